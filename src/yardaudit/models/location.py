"""Vehicle location model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from yardaudit.models._base import AuditBaseModel, Timestamp


class VehicleLocation(AuditBaseModel):
    """A vehicle position reported by a location provider.

    Coordinates are not range-checked: NaN or out-of-range values are
    kept as-is and simply never fall inside a geofence.

    Parameters
    ----------
    id : str
        Provider-side vehicle identifier.
    name : str
        Display name; expected to equal a roster unit id.
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    time : datetime
        Observation timestamp (UTC).
    """

    id: str
    name: str
    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"))
    time: Timestamp

    @model_validator(mode="before")
    @classmethod
    def _merge_nested_location(cls, values: Any) -> Any:
        """Flatten the provider's ``{"location": {...}}`` shape."""
        if not isinstance(values, dict):
            return values
        nested = values.get("location")
        if not isinstance(nested, dict):
            return values
        merged = {key: value for key, value in values.items() if key != "location"}
        for key, value in nested.items():
            merged.setdefault(key, value)
        return merged

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def position(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)
