"""Rendering and UI collaborator interfaces.

The tracker drives a map surface (markers, path polylines, viewport) and a
fleet view (vehicle list, alerts, connection status). Both are consumed
through the protocols below; the concrete classes here are small in-memory
or logging implementations used by scripts and tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pyfleet.models.position import Position
from pyfleet.models.status import VehicleStatus

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned lat/lon bounding box."""

    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> Position:
        return Position((self.south + self.north) / 2, (self.west + self.east) / 2)

    def pad(self, ratio: float) -> Bounds:
        """Grow every side by *ratio* of the box height/width."""
        lat_buffer = abs(self.north - self.south) * ratio
        lon_buffer = abs(self.east - self.west) * ratio
        return Bounds(
            south=self.south - lat_buffer,
            west=self.west - lon_buffer,
            north=self.north + lat_buffer,
            east=self.east + lon_buffer,
        )


def fleet_bounds(positions: Iterable[Position], pad: float = 0.0) -> Bounds | None:
    """Bounding box of *positions*, padded by *pad*; ``None`` when empty."""
    points = list(positions)
    if not points:
        return None
    bounds = Bounds(
        south=min(p.lat for p in points),
        west=min(p.lon for p in points),
        north=max(p.lat for p in points),
        east=max(p.lon for p in points),
    )
    return bounds.pad(pad) if pad else bounds


# ------------------------------------------------------------------
# Protocols
# ------------------------------------------------------------------


class MarkerHandle(Protocol):
    def set_position(self, position: Position) -> None: ...

    def set_label(self, text: str) -> None: ...


class PathHandle(Protocol):
    def append(self, position: Position) -> None: ...


class MapSurface(Protocol):
    def create_marker(self, position: Position, label: str) -> MarkerHandle: ...

    def remove_marker(self, handle: MarkerHandle) -> None: ...

    def create_path(self, position: Position) -> PathHandle: ...

    def remove_path(self, handle: PathHandle) -> None: ...

    def set_view(self, center: Position, zoom: int) -> None: ...

    def fit_bounds(self, bounds: Bounds) -> None: ...


class FleetView(Protocol):
    def upsert_vehicle(self, vehicle_id: str, status: VehicleStatus) -> None: ...

    def remove_vehicle(self, vehicle_id: str) -> None: ...

    def set_alerts(self, messages: Sequence[str]) -> None: ...

    def set_connection(self, online: bool) -> None: ...

    def set_last_updated(self, timestamp: datetime) -> None: ...

    def set_simulation(self, enabled: bool) -> None: ...


# ------------------------------------------------------------------
# In-memory map surface
# ------------------------------------------------------------------


@dataclass(eq=False)
class Marker:
    position: Position
    label: str = ""
    moves: int = 0

    def set_position(self, position: Position) -> None:
        self.position = position
        self.moves += 1

    def set_label(self, text: str) -> None:
        self.label = text


@dataclass(eq=False)
class Polyline:
    points: list[Position] = field(default_factory=list)

    def append(self, position: Position) -> None:
        self.points.append(position)


class InMemoryMapSurface:
    """Map surface that only records what would be drawn."""

    def __init__(self) -> None:
        self.markers: list[Marker] = []
        self.paths: list[Polyline] = []
        self.center: Position | None = None
        self.zoom: int | None = None
        self.bounds: Bounds | None = None

    def create_marker(self, position: Position, label: str) -> Marker:
        marker = Marker(position=position, label=label)
        self.markers.append(marker)
        return marker

    def remove_marker(self, handle: Marker) -> None:
        self.markers.remove(handle)

    def create_path(self, position: Position) -> Polyline:
        path = Polyline(points=[position])
        self.paths.append(path)
        return path

    def remove_path(self, handle: Polyline) -> None:
        self.paths.remove(handle)

    def set_view(self, center: Position, zoom: int) -> None:
        self.center = center
        self.zoom = zoom
        self.bounds = None

    def fit_bounds(self, bounds: Bounds) -> None:
        self.bounds = bounds
        self.center = bounds.center


# ------------------------------------------------------------------
# Fleet views
# ------------------------------------------------------------------


class NullFleetView:
    """Fleet view that ignores every update."""

    def upsert_vehicle(self, vehicle_id: str, status: VehicleStatus) -> None:
        pass

    def remove_vehicle(self, vehicle_id: str) -> None:
        pass

    def set_alerts(self, messages: Sequence[str]) -> None:
        pass

    def set_connection(self, online: bool) -> None:
        pass

    def set_last_updated(self, timestamp: datetime) -> None:
        pass

    def set_simulation(self, enabled: bool) -> None:
        pass


class LoggingFleetView:
    """Fleet view that reports state changes through :mod:`logging`."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger
        self._online: bool | None = None

    def upsert_vehicle(self, vehicle_id: str, status: VehicleStatus) -> None:
        self._logger.info(
            "%s  %s  %s  %s",
            vehicle_id,
            status.position_text,
            status.speed_text,
            status.eta_text,
        )

    def remove_vehicle(self, vehicle_id: str) -> None:
        self._logger.info("%s left the fleet", vehicle_id)

    def set_alerts(self, messages: Sequence[str]) -> None:
        if not messages:
            self._logger.info("No active alerts")
            return
        for message in messages:
            self._logger.warning("ALERT %s", message)

    def set_connection(self, online: bool) -> None:
        if online != self._online:
            self._logger.info("Connection: %s", "Online" if online else "Offline")
        self._online = online

    def set_last_updated(self, timestamp: datetime) -> None:
        self._logger.debug("Last: %s", timestamp.astimezone().isoformat(timespec="seconds"))

    def set_simulation(self, enabled: bool) -> None:
        self._logger.info("Simulation %s", "ON" if enabled else "OFF")
