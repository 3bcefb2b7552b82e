"""Circular geofence matching for vehicle locations.

A vehicle is in a yard when its great-circle distance to the yard
center is at most the yard radius.  Distances use the haversine formula
on a sphere of radius :data:`~yardaudit._constants.EARTH_RADIUS_M`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping

from yardaudit._constants import EARTH_RADIUS_M
from yardaudit.models.location import VehicleLocation
from yardaudit.models.yard import Yard
from yardaudit.roster import YARD_GEOFENCES

_logger = logging.getLogger(__name__)


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon points in degrees.

    NaN inputs produce a NaN distance.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distance_to_yard(vehicle: VehicleLocation, yard: Yard) -> float:
    return haversine_m(vehicle.latitude, vehicle.longitude, yard.latitude, yard.longitude)


def is_inside_geofence(latitude: float, longitude: float, yard: Yard) -> bool:
    """Whether a point is inside or on the boundary of *yard*'s geofence."""
    # NaN compares false, so malformed coordinates are never inside.
    return haversine_m(latitude, longitude, yard.latitude, yard.longitude) <= yard.radius_meters


def resolve_units_in_yard(
    vehicles: Iterable[VehicleLocation],
    yard_name: str,
    *,
    yards: Mapping[str, Yard] = YARD_GEOFENCES,
) -> list[str]:
    """Return the names of vehicles located inside *yard_name*'s geofence.

    Parameters
    ----------
    vehicles : iterable of VehicleLocation
        Reported vehicle positions.
    yard_name : str
        Key into *yards*.  Unknown names yield an empty list.
    yards : mapping of str to Yard
        Geofence table.  Defaults to the built-in yards.

    Returns
    -------
    list[str]
        Vehicle ``name`` values in input order.  Vehicles sharing a name
        each contribute one entry, so a name may appear more than once.
    """
    yard = yards.get(yard_name)
    if yard is None:
        _logger.debug("Unknown yard %r, no geofence to match", yard_name)
        return []

    matched = [vehicle.name for vehicle in vehicles if is_inside_geofence(vehicle.latitude, vehicle.longitude, yard)]
    _logger.debug("Geofence %s matched %d vehicle(s)", yard.name, len(matched))
    return matched


class GeofenceResolver:
    """Geofence matcher bound to a yard table."""

    def __init__(self, yards: Mapping[str, Yard] = YARD_GEOFENCES) -> None:
        self._yards = yards

    @property
    def yards(self) -> Mapping[str, Yard]:
        return self._yards

    def resolve(self, vehicles: Iterable[VehicleLocation], yard_name: str) -> list[str]:
        return resolve_units_in_yard(vehicles, yard_name, yards=self._yards)
