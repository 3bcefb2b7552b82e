"""Base model and enum for yardaudit data.

Every model inherits from :class:`AuditBaseModel` which is frozen, so
all state changes go through ``model_copy(update=...)`` and produce a
new instance.

Enums inherit from :class:`AuditEnum` which accepts member values in
any letter case (``"present"`` resolves to ``PRESENT``).
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce epoch seconds/milliseconds or ISO-8601 strings to an aware UTC datetime.

    Naive datetimes are assumed to be UTC.  ``None`` passes through.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        parsed = datetime.fromisoformat(text)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    raise ValueError(f"unsupported timestamp: {value!r}")


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces epoch numbers and ISO strings to UTC datetimes."""


class AuditEnum(StrEnum):
    """Base for string enums with case-insensitive lookup."""

    @classmethod
    def _missing_(cls, value: object) -> AuditEnum | None:
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class AuditBaseModel(BaseModel):
    """Base for yardaudit models: frozen, ignores unknown keys, accepts field names."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
