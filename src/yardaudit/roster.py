"""Static unit roster and yard geofence table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from yardaudit.models.unit import Unit
from yardaudit.models.yard import Yard, YardName

YARD_GEOFENCES: Mapping[str, Yard] = {
    YardName.DAVENPORT.value: Yard(
        name=YardName.DAVENPORT.value,
        latitude=37.0122,
        longitude=-122.1966,
        radius_meters=500,
    ),
    YardName.MOVIE_RANCH.value: Yard(
        name=YardName.MOVIE_RANCH.value,
        latitude=34.3917,
        longitude=-118.5426,
        radius_meters=800,
    ),
}

YARDS: tuple[str, ...] = tuple(YARD_GEOFENCES)

UNITS: tuple[Unit, ...] = (
    Unit(id="GST 01-01", category="5th Wheel", description="Star trailer, 3 room", expected_location="YARD"),
    Unit(id="GST 01-02", category="5th Wheel", description="Star trailer, 3 room", expected_location="Davenport"),
    Unit(id="GST 01-03", category="5th Wheel", description="Star trailer, 2 room", expected_location="Movie Ranch"),
    Unit(id="GST 01-04", category="5th Wheel", expected_location="Texas"),
    Unit(id="GHM 08-01", category="8 Station HMU", description="Hair and makeup", expected_location="YARD"),
    Unit(id="GHM 08-02", category="8 Station HMU", description="Hair and makeup", expected_location="Repair"),
    Unit(id="GHM 08-03", category="8 Station HMU", expected_location="Movie Ranch"),
    Unit(id="GCT 02-01", category="Camera Truck", description="2-ton camera package", expected_location="Davenport"),
    Unit(id="GCT 02-02", category="Camera Truck", description="2-ton camera package", expected_location="New Mexico"),
    Unit(id="GGT 10-01", category="Grip Truck", description="10-ton grip", expected_location="YARD"),
    Unit(id="GGT 10-02", category="Grip Truck", description="10-ton grip", expected_location="Returning"),
    Unit(id="GLT 10-01", category="Lighting Truck", description="10-ton electric", expected_location="Movie Ranch"),
    Unit(id="GWT 05-01", category="Wardrobe Trailer", expected_location="Davenport"),
    Unit(id="GRR 04-01", category="Restroom Trailer", description="4 station", expected_location="YARD"),
    Unit(id="GGN 60-01", category="Generator", description="600 amp tow plant", expected_location="Davenport"),
    Unit(id="GGN 60-02", category="Generator", description="600 amp tow plant", expected_location="Texas"),
)


def categories(units: Iterable[Unit] = UNITS) -> list[str]:
    """Distinct unit categories in roster order."""
    seen: dict[str, None] = {}
    for unit in units:
        seen.setdefault(unit.category, None)
    return list(seen)


def roster_index(units: Iterable[Unit] = UNITS) -> dict[str, Unit]:
    """Map unit id to unit."""
    return {unit.id: unit for unit in units}
