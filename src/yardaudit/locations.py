"""Vehicle location providers.

Two implementations of :class:`LocationProvider` exist:

* :class:`FleetLocationProvider` fetches ``/v1/fleet/locations`` from the
  fleet telematics API with a bearer token.
* :class:`SimulatedLocationProvider` places every roster unit at random
  around the configured yards, or far away, without any network I/O.

:func:`build_location_provider` picks one from the supplied credential.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from pydantic import ValidationError

from yardaudit._constants import (
    LOCATIONS_ENDPOINT,
    SIMULATED_AWAY_COORDINATE,
    SIMULATED_DELAY_SECONDS,
    SIMULATED_FIRST_YARD_SHARE,
    SIMULATED_JITTER_DEGREES,
    SIMULATED_SECOND_YARD_SHARE,
    SIMULATION_TOKEN,
)
from yardaudit._transport import Transport
from yardaudit.exceptions import LocationSyncError, TransportError
from yardaudit.models._base import utcnow
from yardaudit.models.location import VehicleLocation
from yardaudit.models.unit import Unit
from yardaudit.models.yard import Yard
from yardaudit.roster import UNITS, YARD_GEOFENCES

_logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    """Anything that can report the current position of every fleet vehicle."""

    async def fetch_locations(self) -> list[VehicleLocation]:
        ...


def parse_locations_response(body: Any, *, endpoint: str = LOCATIONS_ENDPOINT) -> list[VehicleLocation]:
    """Parse a ``{"vehicles": [...]}`` document into locations.

    Raises
    ------
    LocationSyncError
        If the body has no ``vehicles`` list or an entry cannot be parsed.
    """
    vehicles = body.get("vehicles") if isinstance(body, dict) else None
    if not isinstance(vehicles, list):
        raise LocationSyncError(f"Missing 'vehicles' list in response from {endpoint}")
    try:
        return [VehicleLocation.model_validate(item) for item in vehicles]
    except ValidationError as exc:
        raise LocationSyncError(f"Unexpected vehicle entry in response from {endpoint}: {exc}") from exc


class FleetLocationProvider:
    """Live vehicle locations from the fleet telematics API."""

    def __init__(self, transport: Transport, api_token: str, *, endpoint: str = LOCATIONS_ENDPOINT) -> None:
        self._transport = transport
        self._api_token = api_token
        self._endpoint = endpoint

    async def fetch_locations(self) -> list[VehicleLocation]:
        """Fetch every vehicle's latest position.

        Raises
        ------
        LocationSyncError
            On any transport failure or malformed response.  No partial
            result is returned and nothing is retried.
        """
        _logger.debug("Fetching fleet locations from %s", self._endpoint)
        try:
            body = await self._transport.get_json(
                self._endpoint,
                headers={"authorization": f"Bearer {self._api_token}"},
            )
        except TransportError as exc:
            raise LocationSyncError(f"Fleet location request failed: {exc}") from exc

        locations = parse_locations_response(body, endpoint=self._endpoint)
        _logger.debug("Fleet location response: %d vehicle(s)", len(locations))
        return locations


def _jitter(rng: random.Random, coordinate: float) -> float:
    return coordinate + (rng.random() - 0.5) * SIMULATED_JITTER_DEGREES


class SimulatedLocationProvider:
    """Random vehicle positions for every roster unit.

    Each unit independently lands around the first yard (40 %), around the
    second yard (30 %) or at a fixed coordinate outside every yard (30 %).
    Positions near a yard are jittered by up to ±0.001° per axis.

    Parameters
    ----------
    units : iterable of Unit
        Roster to place.  Vehicle names equal unit ids.
    yards : sequence of Yard
        Yards to place units around; at least two are required.
    rng : random.Random or None
        Random source.  Pass a seeded instance for reproducible output.
    delay : float
        Seconds to wait before answering, modelling network latency.
    clock : callable
        Returns the observation timestamp for every location.
    """

    def __init__(
        self,
        units: Iterable[Unit] = UNITS,
        yards: Sequence[Yard] | None = None,
        *,
        rng: random.Random | None = None,
        delay: float = SIMULATED_DELAY_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._units = tuple(units)
        self._yards = tuple(yards) if yards is not None else tuple(YARD_GEOFENCES.values())
        if len(self._yards) < 2:
            raise ValueError("SimulatedLocationProvider needs at least two yards")
        self._rng = rng if rng is not None else random.Random()
        self._delay = delay
        self._clock = clock

    def _place(self, draw: float) -> tuple[float, float]:
        if draw < SIMULATED_FIRST_YARD_SHARE:
            yard = self._yards[0]
        elif draw < SIMULATED_FIRST_YARD_SHARE + SIMULATED_SECOND_YARD_SHARE:
            yard = self._yards[1]
        else:
            return SIMULATED_AWAY_COORDINATE
        return _jitter(self._rng, yard.latitude), _jitter(self._rng, yard.longitude)

    async def fetch_locations(self) -> list[VehicleLocation]:
        _logger.debug("Simulating locations for %d unit(s)", len(self._units))
        if self._delay > 0:
            await asyncio.sleep(self._delay)

        now = self._clock()
        locations: list[VehicleLocation] = []
        for index, unit in enumerate(self._units):
            latitude, longitude = self._place(self._rng.random())
            locations.append(
                VehicleLocation(
                    id=f"veh-{index}",
                    name=unit.id,
                    latitude=latitude,
                    longitude=longitude,
                    time=now,
                )
            )
        return locations


def is_simulation_token(token: str | None) -> bool:
    return not token or token.strip() == SIMULATION_TOKEN


def build_location_provider(
    token: str | None,
    *,
    transport: Transport | None = None,
    units: Iterable[Unit] = UNITS,
    yards: Mapping[str, Yard] = YARD_GEOFENCES,
    rng: random.Random | None = None,
    delay: float = SIMULATED_DELAY_SECONDS,
) -> LocationProvider:
    """Return the simulator for a missing/``"demo"`` token, else the live provider.

    Raises
    ------
    ValueError
        If a real token is given without a transport.
    """
    if is_simulation_token(token):
        _logger.debug("No location credential, using the simulator")
        return SimulatedLocationProvider(units, tuple(yards.values()), rng=rng, delay=delay)
    if transport is None:
        raise ValueError("A transport is required for the live location provider")
    assert token is not None  # noqa: S101
    return FleetLocationProvider(transport, token.strip())
