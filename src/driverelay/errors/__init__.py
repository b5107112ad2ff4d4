"""Public error exports for driverelay."""

from __future__ import annotations

from .exceptions import (
    AuthorizationError,
    ConfigurationError,
    DriveRelayError,
    HttpErrorInfo,
    UploadError,
    ValidationError,
    describe_http_error,
)

__all__ = [
    "DriveRelayError",
    "ConfigurationError",
    "ValidationError",
    "AuthorizationError",
    "UploadError",
    "HttpErrorInfo",
    "describe_http_error",
]
