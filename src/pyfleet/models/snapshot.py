"""Snapshot type: one point-in-time observation of the whole fleet."""

from __future__ import annotations

from typing import TypeAlias

from pyfleet.models.status import VehicleStatus

Snapshot: TypeAlias = dict[str, VehicleStatus]
"""Mapping of vehicle id to its status record.

Snapshots are total: a vehicle missing from a snapshot is no longer tracked.
"""
