"""HTTP proxy for files stored in a GitHub repository."""

__version__ = "0.1.0"

from .app import create_app
from .settings import ConfigError, ProxySettings

__all__ = ["create_app", "ConfigError", "ProxySettings", "__version__"]
