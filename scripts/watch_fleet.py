#!/usr/bin/env python3
"""Watch a fleet from the terminal.

Polls the status endpoint (or the local simulator) and logs every vehicle,
alert and connection change. Useful for checking an endpoint before wiring
the tracker to a real map.

Usage
-----
::

    python scripts/watch_fleet.py --url http://127.0.0.1:5001/status
    python scripts/watch_fleet.py --simulate --ticks 10

Environment variables ``FLEET_*`` (see :class:`pyfleet.FleetConfig`) are
honoured; command-line options win.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfleet import FleetConfig, FleetTracker, InMemoryMapSurface, LoggingFleetView  # noqa: E402
from pyfleet.state.reconcile import ReconcileResult  # noqa: E402

_logger = logging.getLogger("watch_fleet")


def _on_cycle(result: ReconcileResult) -> None:
    if result.created:
        _logger.info("new: %s", ", ".join(result.created))
    if result.skipped:
        _logger.info("skipped (no position): %s", ", ".join(result.skipped))


async def run() -> None:
    parser = argparse.ArgumentParser(description="Poll a fleet status endpoint and log what changes.")
    parser.add_argument("--url", help="Status endpoint URL")
    parser.add_argument("--interval", type=float, help="Seconds between polls")
    parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")
    parser.add_argument("--simulate", action="store_true", help="Use the local simulator instead of the endpoint")
    parser.add_argument("--ticks", type=int, help="Stop after this many ticks (default: run until Ctrl+C)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.url:
        overrides["status_url"] = args.url
    if args.interval is not None:
        overrides["poll_interval"] = args.interval
    if args.timeout is not None:
        overrides["fetch_timeout"] = args.timeout
    if args.simulate:
        overrides["use_simulation"] = True
    config = FleetConfig.from_env(**overrides)

    surface = InMemoryMapSurface()
    async with FleetTracker(config, surface=surface, view=LoggingFleetView(), on_cycle=_on_cycle) as tracker:
        try:
            await tracker.run(ticks=args.ticks)
        finally:
            bounds = tracker.center_view()
            if bounds is not None:
                _logger.info(
                    "fleet bounds: %.4f,%.4f .. %.4f,%.4f",
                    bounds.south,
                    bounds.west,
                    bounds.north,
                    bounds.east,
                )
            for entity in tracker.store:
                _logger.info("%s travelled through %d point(s)", entity.vehicle_id, len(entity.path))


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        print("\nDone.")


if __name__ == "__main__":
    main()
