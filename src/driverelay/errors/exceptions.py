"""Exception hierarchy and HTTP error description for driverelay."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional


class DriveRelayError(Exception):
    """
    Base exception for driverelay.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ConfigurationError(DriveRelayError):
    """Raised when settings loaded from the environment are invalid."""


class ValidationError(DriveRelayError):
    """Raised when an upload request is missing required fields."""


class AuthorizationError(DriveRelayError):
    """Raised when loading, saving or obtaining OAuth credentials fails."""


class UploadError(DriveRelayError):
    """Raised for any failure while uploading (auth, local I/O or remote)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information extracted from a Drive API error."""

    status_code: int
    reason: str | None = None
    message: str | None = None

    def as_details(self) -> dict[str, Any]:
        details: dict[str, Any] = {"status_code": self.status_code}
        if self.reason:
            details["reason"] = self.reason
        if self.message:
            details["message"] = self.message
        return details


def describe_http_error(exc: BaseException) -> Optional[HttpErrorInfo]:
    """
    Describe a googleapiclient HttpError (or anything shaped like one).

    Returns None when exc carries no HTTP response.
    """
    resp = getattr(exc, "resp", None)
    status_code = getattr(resp, "status", None)
    if resp is None or not isinstance(status_code, int):
        return None

    reason = getattr(resp, "reason", None)
    message = None

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message if isinstance(message, str) else None,
    )
