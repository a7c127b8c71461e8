"""Snapshot reconciliation.

Diffs each incoming snapshot against the entity store: new ids are created,
known ids are moved (animated) and have their path extended, and ids missing
from the snapshot are retired. Alerts are evaluated for every accepted record
and returned as a fresh list each cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pyfleet._constants import ANIMATION_DURATION_S, NEAR_DISTANCE_KM, SLOW_SPEED_KMH
from pyfleet.alerts import Alert, evaluate_alerts
from pyfleet.animation import Animator
from pyfleet.config import FleetConfig
from pyfleet.models.position import Position
from pyfleet.models.snapshot import Snapshot
from pyfleet.rendering import FleetView, MapSurface
from pyfleet.state.store import EntityStore, TrackedEntity

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation cycle.

    Id tuples are in processing order: snapshot order for ``created``,
    ``updated`` and ``skipped``, store order for ``removed``.
    """

    store: EntityStore
    alert_records: tuple[Alert, ...] = ()
    created: tuple[str, ...] = ()
    updated: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()

    @property
    def alerts(self) -> list[str]:
        return [alert.message for alert in self.alert_records]


class Reconciler:
    """Apply snapshots to an :class:`EntityStore` and its collaborators.

    All collaborators are optional. Without a surface no markers or paths are
    drawn; without an animator markers jump straight to their new position.
    """

    def __init__(
        self,
        surface: MapSurface | None = None,
        view: FleetView | None = None,
        animator: Animator | None = None,
        *,
        slow_speed_kmh: float = SLOW_SPEED_KMH,
        near_distance_km: float = NEAR_DISTANCE_KM,
        animation_duration: float = ANIMATION_DURATION_S,
    ) -> None:
        self._surface = surface
        self._view = view
        self._animator = animator
        self._slow_speed_kmh = slow_speed_kmh
        self._near_distance_km = near_distance_km
        self._animation_duration = animation_duration

    @classmethod
    def from_config(cls, config: FleetConfig, **collaborators: Any) -> Reconciler:
        return cls(
            slow_speed_kmh=config.slow_speed_kmh,
            near_distance_km=config.near_distance_km,
            animation_duration=config.animation_duration,
            **collaborators,
        )

    def reconcile(self, snapshot: Snapshot, store: EntityStore) -> ReconcileResult:
        """Apply *snapshot* to *store* and return the cycle's outcome."""
        alerts: list[Alert] = []
        created: list[str] = []
        updated: list[str] = []
        skipped: list[str] = []

        for vehicle_id, status in snapshot.items():
            position = status.position
            if position is None:
                skipped.append(vehicle_id)
                continue

            entity = store.get(vehicle_id)
            if entity is None:
                entity = store.create(vehicle_id, position, status)
                self._attach(entity)
                created.append(vehicle_id)
            else:
                self._animate(entity, entity.current, position)
                store.commit(vehicle_id, position, status)
                self._extend_path(entity, position)
                updated.append(vehicle_id)

            self._refresh(entity)
            alerts.extend(
                evaluate_alerts(
                    vehicle_id,
                    status,
                    slow_speed_kmh=self._slow_speed_kmh,
                    near_distance_km=self._near_distance_km,
                )
            )

        removed: list[str] = []
        for vehicle_id in store.ids():
            if vehicle_id in snapshot:
                continue
            entity = store.get(vehicle_id)
            if entity is not None:
                self._detach(entity)
            store.remove(vehicle_id)
            self._view_call("remove_vehicle", vehicle_id)
            removed.append(vehicle_id)

        if skipped:
            _logger.debug("Skipped %d record(s) without position: %s", len(skipped), skipped)

        return ReconcileResult(
            store=store,
            alert_records=tuple(alerts),
            created=tuple(created),
            updated=tuple(updated),
            removed=tuple(removed),
            skipped=tuple(skipped),
        )

    # ------------------------------------------------------------------
    # Collaborator side effects (failures are logged, never raised)
    # ------------------------------------------------------------------

    def _attach(self, entity: TrackedEntity) -> None:
        if self._surface is None:
            return
        try:
            entity.marker = self._surface.create_marker(entity.current, entity.status.label(entity.vehicle_id))
        except Exception:
            _logger.warning("Failed to create marker for %s", entity.vehicle_id, exc_info=True)
        try:
            entity.path_handle = self._surface.create_path(entity.current)
        except Exception:
            _logger.warning("Failed to create path for %s", entity.vehicle_id, exc_info=True)

    def _animate(self, entity: TrackedEntity, from_: Position, to: Position) -> None:
        if entity.marker is None:
            return
        if self._animator is not None:
            self._animator.animate(entity.vehicle_id, entity.marker, from_, to, self._animation_duration)
            return
        try:
            entity.marker.set_position(to)
        except Exception:
            _logger.warning("Failed to move marker for %s", entity.vehicle_id, exc_info=True)

    def _extend_path(self, entity: TrackedEntity, position: Position) -> None:
        if entity.path_handle is None:
            return
        try:
            entity.path_handle.append(position)
        except Exception:
            _logger.warning("Failed to add to path for %s", entity.vehicle_id, exc_info=True)

    def _refresh(self, entity: TrackedEntity) -> None:
        if entity.marker is not None:
            try:
                entity.marker.set_label(entity.status.label(entity.vehicle_id))
            except Exception:
                _logger.warning("Failed to update label for %s", entity.vehicle_id, exc_info=True)
        self._view_call("upsert_vehicle", entity.vehicle_id, entity.status)

    def _detach(self, entity: TrackedEntity) -> None:
        if self._animator is not None:
            self._animator.forget(entity.vehicle_id)
        if self._surface is None:
            return
        if entity.marker is not None:
            try:
                self._surface.remove_marker(entity.marker)
            except Exception:
                _logger.warning("Error removing marker for %s", entity.vehicle_id, exc_info=True)
        if entity.path_handle is not None:
            try:
                self._surface.remove_path(entity.path_handle)
            except Exception:
                _logger.warning("Error removing path for %s", entity.vehicle_id, exc_info=True)
        entity.marker = None
        entity.path_handle = None

    def _view_call(self, method: str, *args: Any) -> None:
        if self._view is None:
            return
        try:
            getattr(self._view, method)(*args)
        except Exception:
            _logger.warning("Fleet view %s failed", method, exc_info=True)


def reconcile(snapshot: Snapshot, store: EntityStore, **kwargs: Any) -> ReconcileResult:
    """Reconcile *snapshot* into *store* with a one-off :class:`Reconciler`."""
    return Reconciler(**kwargs).reconcile(snapshot, store)
