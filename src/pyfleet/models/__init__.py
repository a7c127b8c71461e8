"""Data models for fleet status snapshots."""

from pyfleet.models._base import FleetBaseModel
from pyfleet.models.position import Position
from pyfleet.models.snapshot import Snapshot
from pyfleet.models.status import VehicleStatus

__all__ = [
    "FleetBaseModel",
    "Position",
    "Snapshot",
    "VehicleStatus",
]
