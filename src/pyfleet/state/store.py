"""In-memory entity store.

The authoritative cache of tracked vehicles. Only the reconciler mutates it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pyfleet.models.position import Position
from pyfleet.models.status import VehicleStatus


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class TrackedEntity:
    """Last known state and path history of a single vehicle."""

    vehicle_id: str
    current: Position
    previous: Position
    status: VehicleStatus
    path: list[Position] = field(default_factory=list)
    marker: Any = None
    path_handle: Any = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def updates(self) -> int:
        """Number of accepted positions, creation included."""
        return len(self.path)


class EntityStore:
    """In-memory store of tracked vehicles keyed by id.

    Invariants: one :class:`TrackedEntity` per id, and each entity's path
    grows by exactly one point per accepted update.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._entities: dict[str, TrackedEntity] = {}

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[TrackedEntity]:
        return iter(list(self._entities.values()))

    def get(self, vehicle_id: str) -> TrackedEntity | None:
        return self._entities.get(vehicle_id)

    def ids(self) -> list[str]:
        """Tracked ids in insertion order."""
        return list(self._entities)

    def create(self, vehicle_id: str, position: Position, status: VehicleStatus) -> TrackedEntity:
        """Start tracking *vehicle_id* at *position*.

        Raises :class:`KeyError` if the id is already tracked.
        """
        if vehicle_id in self._entities:
            raise KeyError(f"{vehicle_id} is already tracked")
        now = self._clock()
        entity = TrackedEntity(
            vehicle_id=vehicle_id,
            current=position,
            previous=position,
            status=status,
            path=[position],
            created_at=now,
            updated_at=now,
        )
        self._entities[vehicle_id] = entity
        return entity

    def commit(self, vehicle_id: str, position: Position, status: VehicleStatus) -> TrackedEntity:
        """Commit a new position for a tracked vehicle.

        The position is appended to the path even when it equals the current
        one. The old current position becomes ``previous``.
        """
        entity = self._entities[vehicle_id]
        entity.previous = entity.current
        entity.current = position
        entity.path.append(position)
        entity.status = status
        entity.updated_at = self._clock()
        return entity

    def remove(self, vehicle_id: str) -> TrackedEntity | None:
        """Stop tracking *vehicle_id*; returns the dropped entity, if any."""
        return self._entities.pop(vehicle_id, None)

    def positions(self) -> list[Position]:
        return [entity.current for entity in self._entities.values()]
