"""Yard geofence model."""

from __future__ import annotations

from pydantic import Field

from yardaudit.models._base import AuditBaseModel, AuditEnum


class YardName(AuditEnum):
    """Supported audit yards."""

    DAVENPORT = "Davenport"
    MOVIE_RANCH = "Movie Ranch"


class Yard(AuditBaseModel):
    """A named yard with a circular geofence.

    Parameters
    ----------
    name : str
        Yard name (a :class:`YardName` value for the built-in table).
    latitude : float
        Geofence center latitude in degrees.
    longitude : float
        Geofence center longitude in degrees.
    radius_meters : float
        Geofence radius in meters.  The boundary itself is inside.
    """

    name: str
    latitude: float
    longitude: float
    radius_meters: float = Field(gt=0)
