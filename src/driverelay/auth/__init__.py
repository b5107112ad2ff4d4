"""Public auth exports for driverelay."""

from __future__ import annotations

from .authorization_manager import AuthorizationManager
from .client_secret import ClientSecret
from .stored_credential import StoredCredential

__all__ = ["AuthorizationManager", "ClientSecret", "StoredCredential"]
