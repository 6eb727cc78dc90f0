"""Snapshot envelope parsing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be accepted for restore."""


class MalformedDocumentError(SnapshotError):
    """Raised when the snapshot bytes do not decode to a JSON object."""


class InvalidEnvelopeError(SnapshotError):
    """Raised when the decoded snapshot lacks its data payload or timestamp."""


class SnapshotTooLargeError(SnapshotError):
    """Raised when the snapshot exceeds the configured size limit."""


class SnapshotEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    timestamp: Any
    data: dict[str, Any]

    @field_validator("timestamp")
    @classmethod
    def _require_timestamp(cls, value: object) -> object:
        if value is None:
            raise ValueError("timestamp marker is required")
        return value


@dataclass(frozen=True, slots=True)
class SnapshotDocument:
    """Decoded snapshot: the timestamp marker and the per-kind data payload."""

    timestamp: object
    data: dict[str, Any]

    @property
    def system_info(self) -> object | None:
        return self.data.get("system_info")


def parse_snapshot(raw: bytes | str, *, max_bytes: int = 0) -> SnapshotDocument:
    """Decode and validate a snapshot.

    Only the envelope is validated here; record lists are checked kind by kind
    during reconciliation.
    """

    try:
        size = len(raw.encode("utf-8") if isinstance(raw, str) else raw)
    except UnicodeEncodeError as exc:
        raise MalformedDocumentError(f"Snapshot text is not valid UTF-8: {exc}") from exc
    if max_bytes and size > max_bytes:
        raise SnapshotTooLargeError(f"Snapshot is {size} bytes, limit is {max_bytes}")

    try:
        decoded: object = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
        raise MalformedDocumentError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise MalformedDocumentError("Snapshot must be a JSON object")

    try:
        envelope = SnapshotEnvelope.model_validate(decoded)
    except ValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        raise InvalidEnvelopeError(
            f"Invalid snapshot envelope: {', '.join(fields) or 'structure'}"
        ) from exc

    return SnapshotDocument(timestamp=envelope.timestamp, data=envelope.data)
