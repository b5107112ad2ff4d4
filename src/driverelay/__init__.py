"""driverelay public API."""

from __future__ import annotations

from driverelay.auth import AuthorizationManager, ClientSecret, StoredCredential
from driverelay.config import Settings, load_settings
from driverelay.errors import (
    AuthorizationError,
    ConfigurationError,
    DriveRelayError,
    HttpErrorInfo,
    UploadError,
    ValidationError,
    describe_http_error,
)
from driverelay.server import create_app
from driverelay.upload import UploadHandler, UploadRequest, UploadResult

__all__ = [
    # High-level
    "create_app",
    "AuthorizationManager",
    "UploadHandler",
    # Config
    "Settings",
    "load_settings",
    # Models
    "ClientSecret",
    "StoredCredential",
    "UploadRequest",
    "UploadResult",
    # Errors
    "DriveRelayError",
    "ConfigurationError",
    "ValidationError",
    "AuthorizationError",
    "UploadError",
    "HttpErrorInfo",
    "describe_http_error",
]
