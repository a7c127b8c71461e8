"""Application state for one tracking session."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from pyfleet.state.reconcile import ReconcileResult
from pyfleet.state.store import EntityStore


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class FleetSession:
    """Mutable state owned by a running tracker.

    Created when the tracker starts and discarded when it stops; nothing is
    persisted.

    Parameters
    ----------
    store : EntityStore
        Tracked vehicles.
    alerts : list of str
        Alert messages of the most recent cycle.
    online : bool
        Whether the last fetch from the status endpoint succeeded.
    use_simulation : bool
        Whether ticks read from the simulator instead of the endpoint.
    last_updated : datetime or None
        UTC time of the most recently applied snapshot.
    cycles : int
        Number of snapshots applied.
    """

    store: EntityStore = field(default_factory=EntityStore)
    alerts: list[str] = field(default_factory=list)
    online: bool = False
    use_simulation: bool = False
    last_updated: datetime | None = None
    cycles: int = 0
    clock: Callable[[], datetime] = _utcnow

    def toggle_simulation(self) -> bool:
        self.use_simulation = not self.use_simulation
        return self.use_simulation

    def apply_result(self, result: ReconcileResult) -> None:
        """Record a finished cycle; the alert list is replaced, not extended."""
        self.alerts = result.alerts
        self.last_updated = self.clock()
        self.cycles += 1
