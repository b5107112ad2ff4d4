"""Persisted authorized-user record (token.json)."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .client_secret import ClientSecret

AUTHORIZED_USER: str = "authorized_user"


@dataclass(slots=True, frozen=True)
class StoredCredential:
    """The only state driverelay persists: enough to refresh silently."""

    client_id: str
    client_secret: str
    refresh_token: str
    type: str = AUTHORIZED_USER

    def __post_init__(self) -> None:
        if self.type != AUTHORIZED_USER:
            raise ValueError(f"StoredCredential.type must be '{AUTHORIZED_USER}'")

        for key in ("client_id", "client_secret", "refresh_token"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"StoredCredential.{key} must be a non-empty string")

    @classmethod
    def from_client_secret(cls, secret: ClientSecret, refresh_token: str) -> "StoredCredential":
        return cls(
            client_id=secret.client_id,
            client_secret=secret.client_secret,
            refresh_token=refresh_token,
        )

    @classmethod
    def from_dict(cls, data: Any) -> "StoredCredential":
        if not isinstance(data, dict):
            raise ValueError("stored credential JSON must be an object")
        return cls(
            client_id=data.get("client_id"),
            client_secret=data.get("client_secret"),
            refresh_token=data.get("refresh_token"),
            type=data.get("type", AUTHORIZED_USER),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


def read_stored_credential(path: str | Path) -> StoredCredential:
    """
    Read token.json.

    Raises:
        OSError: if the file cannot be read.
        ValueError: if the content is not a valid authorized-user record.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return StoredCredential.from_dict(data)


def write_stored_credential(path: str | Path, record: StoredCredential) -> None:
    """Replace token.json atomically; the previous file survives any failure."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.",
        suffix=".tmp",
        dir=str(target.parent),
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(record.to_json())
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
