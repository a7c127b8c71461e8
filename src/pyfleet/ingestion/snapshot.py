"""Snapshot parsing.

Turns the decoded JSON body of a status response (or a simulator output)
into a typed :data:`pyfleet.models.Snapshot`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pyfleet.exceptions import FleetProtocolError
from pyfleet.models.snapshot import Snapshot
from pyfleet.models.status import VehicleStatus

_logger = logging.getLogger(__name__)


def parse_snapshot(payload: Any, *, url: str = "") -> Snapshot:
    """Parse a ``{vehicle_id: record}`` payload.

    Records that are not objects, fail validation, or lack coordinates, are kept as
    position-less statuses: their id still counts as present, but the
    reconciler will not create or move anything for them.

    Raises
    ------
    FleetProtocolError
        If the top level is not a JSON object.
    """
    if not isinstance(payload, Mapping):
        raise FleetProtocolError(
            f"Snapshot must be a JSON object keyed by vehicle id, got {type(payload).__name__}",
            url=url,
        )

    snapshot: Snapshot = {}
    for key, value in payload.items():
        vehicle_id = str(key)
        try:
            status = VehicleStatus.from_payload(value)
        except ValueError:
            _logger.debug("Record for %s failed validation; it will be skipped", vehicle_id, exc_info=True)
            status = VehicleStatus()
        if not status.has_position:
            _logger.debug("Record for %s has no position; it will be skipped", vehicle_id)
        snapshot[vehicle_id] = status
    return snapshot
