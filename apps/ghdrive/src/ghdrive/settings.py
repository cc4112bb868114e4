"""Proxy settings loaded from the environment."""

import logging
import os

from dotenv import load_dotenv
from ghstore import StoreConfig
from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8000
SECRET_HEADER = "ME"


class ConfigError(ValueError):
    """Required configuration is missing or invalid."""


class ProxySettings(BaseModel):
    """Settings for the HTTP proxy."""

    model_config = ConfigDict(frozen=True)

    secret: str
    store: StoreConfig
    secret_header: str = SECRET_HEADER
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "ProxySettings":
        """
        Load settings from the environment and an optional .env file.

        Variables:
            ME: Shared secret expected in the request header (required)
            PORT: Listen port (default: 8000)
            GITHUB_TOKEN, GITHUB_ACCOUNT, GITHUB_REPO: Backing repository

        Raises:
            ConfigError: If a required variable is missing or invalid
        """
        load_dotenv()

        secret = os.environ.get("ME")
        if not secret:
            raise ConfigError("ME is not defined")

        try:
            store = StoreConfig.from_env()
        except KeyError as e:
            raise ConfigError(f"{e.args[0]} is not defined") from e

        try:
            port = int(os.environ.get("PORT") or DEFAULT_PORT)
            settings = cls(secret=secret, store=store, port=port)
        except (ValueError, ValidationError) as e:
            raise ConfigError(f"Invalid settings: {e}") from e

        logger.info("Settings loaded for %s/%s, port=%d", store.account, store.repo, port)
        return settings
