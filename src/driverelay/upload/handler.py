"""Relay the configured local file to Google Drive."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from driverelay.auth import AuthorizationManager
from driverelay.errors import UploadError, describe_http_error

from .request import UploadRequest, UploadResult

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[Any], Any]


def build_drive_service(creds) -> Any:
    """Build a Drive v3 service resource for creds."""
    return build("drive", "v3", credentials=creds, cache_discovery=False)


class UploadHandler:
    """Validate an upload request and create the file on Drive."""

    def __init__(
        self,
        authorization_manager: AuthorizationManager,
        file_path: str | Path,
        *,
        service_factory: Optional[ServiceFactory] = None,
    ) -> None:
        self._auth = authorization_manager
        self._file_path = Path(file_path)
        self._service_factory = service_factory or build_drive_service

    @property
    def file_path(self) -> Path:
        return self._file_path

    async def handle_upload(self, request: UploadRequest) -> UploadResult:
        """
        Upload the local file as request.file_name under request.parent_id.

        Raises:
            ValidationError: before any authorization or remote call.
            UploadError: for every other failure.
        """
        missing = request.missing_fields()
        if missing:
            logger.info("Missing required fields: %s", ", ".join(missing))
        request.validate()

        try:
            creds = await self._auth.authorize()
            file_id = await asyncio.to_thread(self._create_file, creds, request)
        except Exception as exc:
            details: dict[str, Any] = {
                "file_name": request.file_name,
                "parent_id": request.parent_id,
            }
            info = describe_http_error(exc)
            if info is not None:
                details.update(info.as_details())
            logger.exception("Error uploading file %s", self._file_path)
            raise UploadError("Failed to upload file", details=details, cause=exc) from exc

        logger.info("File uploaded with ID: %s", file_id)
        return UploadResult(
            file_id=file_id,
            name=request.file_name,
            parent_id=request.parent_id,
        )

    def _create_file(self, creds, request: UploadRequest) -> str:
        service = self._service_factory(creds)
        body = {"name": request.file_name, "parents": [request.parent_id]}

        with open(self._file_path, "rb") as f:
            media = MediaIoBaseUpload(f, mimetype=request.mime_type)
            data = service.files().create(
                body=body,
                media_body=media,
                fields="id",
            ).execute()

        file_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(file_id, str) or not file_id:
            raise UploadError("Drive response did not include a file id")
        return file_id
