"""Upload request/result models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from driverelay.errors import ValidationError

REQUIRED_FIELDS: tuple[str, ...] = ("fileName", "parentId", "mimeType")


@dataclass(slots=True, frozen=True)
class UploadRequest:
    """One upload call: Drive file name, parent folder id and media type."""

    file_name: Any
    parent_id: Any
    mime_type: Any

    @classmethod
    def from_payload(cls, payload: Any) -> "UploadRequest":
        """Build from the JSON body `{fileName, parentId, mimeType}`."""
        if not isinstance(payload, dict):
            payload = {}
        return cls(
            file_name=payload.get("fileName"),
            parent_id=payload.get("parentId"),
            mime_type=payload.get("mimeType"),
        )

    def missing_fields(self) -> list[str]:
        values = (self.file_name, self.parent_id, self.mime_type)
        return [
            name
            for name, value in zip(REQUIRED_FIELDS, values)
            if not value
        ]

    def validate(self) -> None:
        """
        Raises:
            ValidationError: if any field is absent, null or empty.
        """
        missing = self.missing_fields()
        if missing:
            raise ValidationError(
                "Missing required fields",
                details={"missing": missing},
            )


@dataclass(slots=True, frozen=True)
class UploadResult:
    """Result of a successful relay to Drive."""

    file_id: str
    name: str
    parent_id: str
