#!/usr/bin/env python3
"""Run a geofence sync for one yard and print the resulting audit.

Without a location token the simulator places every roster unit at
random, so this works offline.

Usage
-----
::

    python scripts/sync_yard.py --yard Davenport --seed 7
    export YARDAUDIT_LOCATION_TOKEN="..."   # live fleet locations
    python scripts/sync_yard.py --yard "Movie Ranch" --json

Options::

    --yard NAME        Yard to audit (default: Davenport)
    --token TOKEN      Location API token ("demo" for the simulator)
    --seed N           Seed the simulator for reproducible placement
    --delay SECONDS    Simulator latency (default from config)
    --distances        Also list the distance of every synced vehicle to the yard center
    --json             Output the audit session as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from yardaudit import AuditConfig, YardAuditClient  # noqa: E402
from yardaudit.geofence import distance_to_yard  # noqa: E402
from yardaudit.roster import YARD_GEOFENCES, YARDS  # noqa: E402


def _section(title: str) -> str:
    return f"\n── {title} " + "─" * max(0, 60 - len(title))


async def main() -> None:
    parser = argparse.ArgumentParser(description="Sync vehicle locations into a yard audit")
    parser.add_argument("--yard", default=YARDS[0], choices=YARDS, help="Yard to audit")
    parser.add_argument("--token", help='Location API token ("demo" for the simulator)')
    parser.add_argument("--seed", type=int, help="Seed the simulator")
    parser.add_argument("--delay", type=float, help="Simulator latency in seconds")
    parser.add_argument("--distances", action="store_true", help="List vehicle distances to the yard center")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.seed is not None:
        overrides["simulation_seed"] = args.seed
    if args.delay is not None:
        overrides["simulation_delay"] = args.delay
    config = AuditConfig.from_env(**overrides)

    async with YardAuditClient(config, ai_client=None) as client:
        client.start_audit(args.yard)
        outcome = await client.sync_locations(args.token)
        audit = client.audit
        assert audit is not None  # noqa: S101

        if args.json_mode:
            print(json.dumps(audit.model_dump(mode="json"), indent=2, ensure_ascii=False))
        else:
            if args.distances:
                yard = YARD_GEOFENCES[args.yard]
                print(_section(f"DISTANCES to {yard.name} (r={yard.radius_meters:.0f} m)"))
                for vehicle in outcome.vehicles:
                    distance = distance_to_yard(vehicle, yard)
                    marker = "in " if distance <= yard.radius_meters else "out"
                    print(f"  {marker} {vehicle.name:<12} {distance:>14.1f} m")
            print(_section("SYNC"))
            print(f"  {outcome.message}")
            print(_section("REPORT"))
            print(client.text_report())

    if not outcome.ok:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
