"""Settings and logging setup for the Wiki.js MCP server."""

import logging
import sys
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    WIKI_API_URL: Optional[str] = Field(default=None)
    WIKI_API_TOKEN: Optional[str] = Field(default=None)
    WIKI_PATH_FALLBACKS: str = Field(
        default="",
        description='Comma-separated fallback path variants, e.g. "slash,ja,en"',
    )
    WIKI_REQUEST_TIMEOUT: float = Field(default=30.0)
    WIKI_RETRY_ATTEMPTS: int = Field(default=3, ge=1)
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @property
    def graphql_url(self) -> str:
        """Full GraphQL endpoint derived from the base URL."""
        return f"{(self.WIKI_API_URL or '').rstrip('/')}/graphql"

    @property
    def masked_token(self) -> str:
        """Token prefix safe to write to logs."""
        return f"{(self.WIKI_API_TOKEN or '')[:5]}..."

    @property
    def path_fallbacks(self) -> List[str]:
        return [token.strip() for token in self.WIKI_PATH_FALLBACKS.split(",") if token.strip()]


def load_settings(**overrides) -> Settings:
    """Read settings from the environment and check the required ones.

    Raises:
        ConfigurationError: WIKI_API_URL or WIKI_API_TOKEN is missing, or a
            setting has the wrong type.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
    if not settings.WIKI_API_URL:
        raise ConfigurationError("WIKI_API_URL environment variable is required")
    if not settings.WIKI_API_TOKEN:
        raise ConfigurationError("WIKI_API_TOKEN environment variable is required")
    return settings


def setup_logging(settings: Settings) -> None:
    # stdout carries the MCP stdio stream, so console logs go to stderr
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )
