"""OAuth client secret (credentials.json) for driverelay."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from driverelay.errors import AuthorizationError

CLIENT_KINDS: tuple[str, ...] = ("installed", "web")


@dataclass(slots=True, frozen=True)
class ClientSecret:
    """
    Provider-issued client identity, read-only.

    kind is the top-level key the record was found under:
        - "installed" (desktop client; preferred when both are present)
        - "web"
    """

    client_id: str
    client_secret: str
    kind: str = "installed"
    redirect_uris: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.kind not in CLIENT_KINDS:
            raise ValueError(f"ClientSecret.kind must be one of {CLIENT_KINDS}")

        for key in ("client_id", "client_secret"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"ClientSecret.{key} must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Any) -> "ClientSecret":
        """Parse the `{installed|web: {...}}` layout Google issues."""
        if not isinstance(data, dict):
            raise ValueError("client secret JSON must be an object")

        for kind in CLIENT_KINDS:
            key = data.get(kind)
            if isinstance(key, dict):
                uris = key.get("redirect_uris") or []
                return cls(
                    client_id=key.get("client_id"),
                    client_secret=key.get("client_secret"),
                    kind=kind,
                    redirect_uris=tuple(u for u in uris if isinstance(u, str)),
                )

        raise ValueError("client secret JSON has neither 'installed' nor 'web' key")

    @classmethod
    def from_file(cls, path: str | Path) -> "ClientSecret":
        """
        Read and parse a client secret file.

        Raises:
            AuthorizationError: if the file is missing, unreadable or malformed.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
            return cls.from_dict(data)
        except (OSError, ValueError) as exc:
            raise AuthorizationError(
                "Failed to load client secret file",
                details={"credentials_path": str(path)},
                cause=exc,
            ) from exc
