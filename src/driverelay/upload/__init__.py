"""Public upload exports for driverelay."""

from __future__ import annotations

from .handler import UploadHandler, build_drive_service
from .request import UploadRequest, UploadResult

__all__ = ["UploadHandler", "UploadRequest", "UploadResult", "build_drive_service"]
