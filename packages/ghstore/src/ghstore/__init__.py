"""GitHub repository file storage."""

from .models import FileRecord, StoreConfig
from .store import FileStore
from .transport import GitHubTransport

__all__ = ["FileStore", "FileRecord", "GitHubTransport", "StoreConfig"]
