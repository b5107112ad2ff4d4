"""OAuth credential lifecycle for driverelay."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow, InstalledAppFlow

from driverelay.config import OAUTH_FLOW_CALLBACK, Settings
from driverelay.errors import AuthorizationError

from .client_secret import ClientSecret
from .stored_credential import (
    StoredCredential,
    read_stored_credential,
    write_stored_credential,
)

logger = logging.getLogger(__name__)

STATE_UNAUTHENTICATED: str = "unauthenticated"
STATE_PENDING: str = "pending_interactive"
STATE_AUTHENTICATED: str = "authenticated"


@dataclass
class _PendingAuthorization:
    flow: Flow
    future: "asyncio.Future[Any]"


class AuthorizationManager:
    """
    Produce a usable Google credential for every upload attempt.

    Notes:
        - token.json is only ever written after a successful exchange.
        - At most one interactive flow runs at a time; concurrent callers
          share its outcome.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._inflight: Optional[asyncio.Future[Any]] = None
        self._last_flight: Optional[asyncio.Future[Any]] = None
        self._flights_finished = 0
        self._pending: Optional[_PendingAuthorization] = None
        self._state = STATE_UNAUTHENTICATED

    @property
    def state(self) -> str:
        if self._pending is not None or self._inflight is not None:
            return STATE_PENDING
        return self._state

    @property
    def scopes(self) -> list[str]:
        return list(self._settings.scopes)

    # ----------------------------
    # Public API
    # ----------------------------
    async def authorize(self) -> Credentials:
        """
        Return stored credentials, or obtain new ones interactively.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthorizationError: if the interactive flow cannot complete.
        """
        flights_before = self._flights_finished
        creds = await self.load_saved_credentials_if_exist()
        if creds is not None:
            return creds

        if self._inflight is None and self._flights_finished != flights_before:
            # a flight finished while this caller was reading token.json
            logger.info("Reusing the outcome of the interactive authorization that just finished")
            return await self._last_flight

        if self._inflight is None:
            logger.info("No stored credential; starting interactive authorization")
            self._inflight = asyncio.ensure_future(self._authorize_interactively())
            self._inflight.add_done_callback(self._clear_inflight)
        else:
            logger.info("Interactive authorization already in progress; waiting")

        # shield: one cancelled waiter must not abort the flow for the others
        return await asyncio.shield(self._inflight)

    async def load_saved_credentials_if_exist(self) -> Optional[Credentials]:
        """
        Load token.json into a Credentials object.

        Returns None when the file is missing or cannot be parsed; freshness
        is not checked (google-auth refreshes on first use).
        """
        token_path = self._settings.token_path
        try:
            record = await asyncio.to_thread(read_stored_credential, token_path)
        except FileNotFoundError:
            logger.info("No stored credential at %s", token_path)
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable stored credential at %s: %s", token_path, exc)
            return None

        try:
            creds = Credentials.from_authorized_user_info(record.to_dict(), scopes=self.scopes)
        except ValueError as exc:
            logger.warning("Ignoring invalid stored credential at %s: %s", token_path, exc)
            return None

        self._state = STATE_AUTHENTICATED
        return creds

    async def save_credentials(self, creds) -> None:
        """
        Persist the refresh token of creds as an authorized-user record.

        Raises:
            AuthorizationError: on missing refresh token, bad client secret,
                or write failure (the previous token.json is left intact).
        """
        refresh_token = getattr(creds, "refresh_token", None)
        if not isinstance(refresh_token, str) or not refresh_token:
            raise AuthorizationError("Credential has no refresh token to persist")

        secret = await asyncio.to_thread(ClientSecret.from_file, self._settings.credentials_path)
        try:
            record = StoredCredential.from_client_secret(secret, refresh_token)
        except ValueError as exc:
            raise AuthorizationError("Invalid credential record", cause=exc) from exc

        token_path = self._settings.token_path
        try:
            await asyncio.to_thread(write_stored_credential, token_path, record)
        except OSError as exc:
            raise AuthorizationError(
                "Failed to save OAuth token file",
                details={"token_path": str(token_path)},
                cause=exc,
            ) from exc

        self._state = STATE_AUTHENTICATED
        logger.info("Saved credential to %s", token_path)

    async def handle_authorization_callback(self, code: Optional[str]) -> Credentials:
        """
        Exchange an authorization code delivered to the redirect URI.

        Completes the pending callback flow when there is one; otherwise a
        fresh web flow is built from the client secret file.

        Raises:
            AuthorizationError: if the code is missing, invalid or expired.
        """
        if not isinstance(code, str) or not code.strip():
            raise AuthorizationError("Missing authorization code")

        pending = self._pending
        flow = pending.flow if pending is not None else self._new_callback_flow()

        try:
            await asyncio.to_thread(flow.fetch_token, code=code)
        except Exception as exc:
            raise AuthorizationError("Failed to exchange authorization code", cause=exc) from exc

        creds = flow.credentials
        if getattr(creds, "refresh_token", None):
            try:
                await self.save_credentials(creds)
            except AuthorizationError as exc:
                # the code is spent; waiters must not keep waiting for it
                if pending is not None and not pending.future.done():
                    pending.future.set_exception(exc)
                raise
        else:
            logger.warning("Authorization returned no refresh token; credential not persisted")

        if pending is not None and not pending.future.done():
            pending.future.set_result(creds)
        return creds

    # ----------------------------
    # Internals
    # ----------------------------
    async def _authorize_interactively(self) -> Credentials:
        if self._settings.oauth_flow == OAUTH_FLOW_CALLBACK:
            creds = await self._wait_for_callback()
            # handle_authorization_callback persisted it if it could
            return creds

        creds = await self._run_local_server()
        if getattr(creds, "refresh_token", None):
            await self.save_credentials(creds)
        else:
            logger.warning("Authorization returned no refresh token; credential not persisted")
        return creds

    async def _run_local_server(self) -> Credentials:
        credentials_path = str(self._settings.credentials_path)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(credentials_path, scopes=self.scopes)
            return await asyncio.to_thread(flow.run_local_server, port=0)
        except Exception as exc:
            raise AuthorizationError(
                "OAuth authorization flow failed",
                details={"credentials_path": credentials_path},
                cause=exc,
            ) from exc

    async def _wait_for_callback(self) -> Credentials:
        flow = self._new_callback_flow()
        try:
            url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        except Exception as exc:
            raise AuthorizationError("Failed to build authorization URL", cause=exc) from exc

        loop = asyncio.get_running_loop()
        self._pending = _PendingAuthorization(flow=flow, future=loop.create_future())
        logger.warning("Authorize this app by visiting: %s", url)
        try:
            return await self._pending.future
        finally:
            self._pending = None

    def _new_callback_flow(self) -> Flow:
        credentials_path = str(self._settings.credentials_path)
        try:
            return Flow.from_client_secrets_file(
                credentials_path,
                scopes=self.scopes,
                redirect_uri=self._settings.redirect_uri,
            )
        except Exception as exc:
            raise AuthorizationError(
                "Failed to load client secret file",
                details={"credentials_path": credentials_path},
                cause=exc,
            ) from exc

    def _clear_inflight(self, future: "asyncio.Future[Any]") -> None:
        if self._inflight is future:
            self._inflight = None
        if not future.cancelled():
            self._last_flight = future
            self._flights_finished += 1
        if not future.cancelled() and future.exception() is not None:
            logger.error("Interactive authorization failed: %s", future.exception())
