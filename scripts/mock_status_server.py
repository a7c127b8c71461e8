#!/usr/bin/env python3
"""Serve a simulated fleet on ``/status`` for local testing.

The server keeps its own :class:`pyfleet.EntityStore` and advances it with
the simulator on every request, so consecutive polls see the fleet move.

Usage
-----
::

    python scripts/mock_status_server.py --port 5001
    python scripts/mock_status_server.py --drop-every 5   # remove V2 every 5th request
    python scripts/mock_status_server.py --fail-every 3   # answer 503 every 3rd request
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path

from aiohttp import web

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyfleet import EntityStore, FleetSimulator, reconcile  # noqa: E402

_logger = logging.getLogger("mock_status_server")

_STATE = web.AppKey("state", dict)


async def _status(request: web.Request) -> web.Response:
    state = request.app[_STATE]
    state["requests"] += 1
    count = state["requests"]

    fail_every = state["fail_every"]
    if fail_every and count % fail_every == 0:
        _logger.info("request %d: failing on purpose", count)
        return web.json_response({"error": "unavailable"}, status=503)

    store: EntityStore = state["store"]
    simulator: FleetSimulator = state["simulator"]
    snapshot = simulator.simulate(store)

    drop_every = state["drop_every"]
    if drop_every and count % drop_every == 0:
        snapshot.pop("V2", None)

    reconcile(snapshot, store)
    body = {vehicle_id: status.to_record() for vehicle_id, status in snapshot.items()}
    _logger.debug("request %d: %s", count, body)
    return web.json_response(body)


def build_app(*, seed: int | None = None, drop_every: int = 0, fail_every: int = 0) -> web.Application:
    app = web.Application()
    app[_STATE] = {
        "store": EntityStore(),
        "simulator": FleetSimulator(random.Random(seed)),
        "requests": 0,
        "drop_every": drop_every,
        "fail_every": fail_every,
    }
    app.router.add_get("/status", _status)
    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve a simulated fleet snapshot on /status.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5001)
    parser.add_argument("--seed", type=int, help="Seed for reproducible movement")
    parser.add_argument("--drop-every", type=int, default=0, help="Omit V2 from every Nth response")
    parser.add_argument("--fail-every", type=int, default=0, help="Answer 503 to every Nth request")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    app = build_app(seed=args.seed, drop_every=args.drop_every, fail_every=args.fail_every)
    web.run_app(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
