"""FastAPI application exposing /upload and /oauth2callback."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from driverelay.auth import AuthorizationManager
from driverelay.config import Settings, load_settings
from driverelay.errors import AuthorizationError, UploadError, ValidationError
from driverelay.upload import UploadHandler, UploadRequest

logger = logging.getLogger(__name__)

AUTH_SUCCESS_MESSAGE = "Authentication successful! Please return to the console."
AUTH_FAILED_MESSAGE = "Authentication failed"
MISSING_FIELDS_MESSAGE = "Missing required fields"
UPLOAD_FAILED_MESSAGE = "Failed to upload file"


def create_app(
    settings: Optional[Settings] = None,
    *,
    authorization_manager: Optional[AuthorizationManager] = None,
    upload_handler: Optional[UploadHandler] = None,
) -> FastAPI:
    """
    Build the relay application.

    Collaborators are created from settings unless injected.
    """
    settings = settings or load_settings()
    auth = authorization_manager or AuthorizationManager(settings)
    handler = upload_handler or UploadHandler(auth, settings.upload_file_path)

    app = FastAPI(title="driverelay")
    app.state.settings = settings
    app.state.authorization_manager = auth
    app.state.upload_handler = handler

    @app.post("/upload", response_class=PlainTextResponse)
    async def upload(request: Request) -> PlainTextResponse:
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        logger.info("Received Request Body: %s", payload)

        try:
            result = await request.app.state.upload_handler.handle_upload(
                UploadRequest.from_payload(payload)
            )
        except ValidationError:
            return PlainTextResponse(MISSING_FIELDS_MESSAGE, status_code=400)
        except UploadError as exc:
            logger.error("Upload failed: %s (%s)", exc, exc.details)
            return PlainTextResponse(UPLOAD_FAILED_MESSAGE, status_code=500)

        return PlainTextResponse(f"File uploaded with ID: {result.file_id}", status_code=200)

    @app.get("/oauth2callback", response_class=PlainTextResponse)
    async def oauth2callback(request: Request, code: Optional[str] = None) -> PlainTextResponse:
        try:
            await request.app.state.authorization_manager.handle_authorization_callback(code)
        except AuthorizationError as exc:
            logger.error("Error during OAuth2 callback: %s", exc, exc_info=exc.cause)
            return PlainTextResponse(AUTH_FAILED_MESSAGE, status_code=500)

        return PlainTextResponse(AUTH_SUCCESS_MESSAGE, status_code=200)

    return app
