"""Configuration settings for driverelay."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from driverelay.errors import ConfigurationError

DEFAULT_PORT: int = 4000
DEFAULT_HOST: str = "0.0.0.0"

SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.file",)

OAUTH_FLOW_LOCAL_SERVER: str = "local_server"
OAUTH_FLOW_CALLBACK: str = "callback"
OAUTH_FLOWS: tuple[str, ...] = (OAUTH_FLOW_LOCAL_SERVER, OAUTH_FLOW_CALLBACK)


@dataclass
class Settings:
    """Process configuration for the relay service.

    Attributes:
        port: TCP port the HTTP server listens on
        host: Interface the HTTP server binds to
        credentials_path: OAuth client secret JSON (installed or web client)
        token_path: Where the authorized-user token is persisted
        upload_file_path: The local file relayed on every upload request
        oauth_flow: "local_server" or "callback"
        redirect_uri: Redirect URI used by the callback flow; derived from
            port when empty
        log_level: Standard logging level name
        scopes: OAuth scopes requested
    """

    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    credentials_path: Path = field(default_factory=lambda: Path.cwd() / "credentials.json")
    token_path: Path = field(default_factory=lambda: Path.cwd() / "token.json")
    upload_file_path: Path = field(default_factory=lambda: Path.cwd() / "notion.pdf")
    oauth_flow: str = OAUTH_FLOW_LOCAL_SERVER
    redirect_uri: str = ""
    log_level: str = "INFO"
    scopes: tuple[str, ...] = SCOPES

    def __post_init__(self) -> None:
        self.credentials_path = Path(self.credentials_path)
        self.token_path = Path(self.token_path)
        self.upload_file_path = Path(self.upload_file_path)
        if not self.redirect_uri:
            self.redirect_uri = f"http://localhost:{self.port}/oauth2callback"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid.
        """
        errors: list[str] = []

        if not 0 < self.port < 65536:
            errors.append(f"port must be between 1 and 65535, got {self.port}")

        if self.oauth_flow not in OAUTH_FLOWS:
            errors.append(
                f"oauth_flow must be one of {', '.join(OAUTH_FLOWS)}, got {self.oauth_flow!r}"
            )

        for name in ("credentials_path", "token_path", "upload_file_path"):
            if not str(getattr(self, name)).strip():
                errors.append(f"{name} must be a non-empty path")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"log_level is not a known logging level: {self.log_level!r}")

        if not self.scopes:
            errors.append("scopes must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))


def _parse_int(value: str | None, default: int) -> int:
    """Parse a string to int, returning default if None or invalid."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_path(value: str | None, default: Path) -> Path:
    if value is None or not value.strip():
        return default
    return Path(value)


def load_settings(env_path: str | Path | None = None, validate: bool = True) -> Settings:
    """Load settings from environment variables and .env file.

    Args:
        env_path: Optional path to .env file. If None, searches for .env
                  in current directory and parent directories.
        validate: If True, validate settings after loading.

    Raises:
        ConfigurationError: If validate=True and configuration is invalid.
    """
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    cwd = Path.cwd()
    settings = Settings(
        port=_parse_int(os.getenv("PORT"), DEFAULT_PORT),
        host=os.getenv("HOST", DEFAULT_HOST),
        credentials_path=_parse_path(os.getenv("CREDENTIALS_PATH"), cwd / "credentials.json"),
        token_path=_parse_path(os.getenv("TOKEN_PATH"), cwd / "token.json"),
        upload_file_path=_parse_path(os.getenv("UPLOAD_FILE_PATH"), cwd / "notion.pdf"),
        oauth_flow=os.getenv("OAUTH_FLOW", OAUTH_FLOW_LOCAL_SERVER).strip().lower(),
        redirect_uri=os.getenv("OAUTH_REDIRECT_URI", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    if validate:
        settings.validate()

    return settings
