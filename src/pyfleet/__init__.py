"""pyfleet - Async live fleet tracker with snapshot reconciliation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfleet.alerts import Alert, AlertKind, evaluate_alerts
from pyfleet.animation import Animator, interpolate
from pyfleet.config import FleetConfig
from pyfleet.exceptions import (
    FleetConfigError,
    FleetError,
    FleetProtocolError,
    FleetTimeoutError,
    FleetTransportError,
)
from pyfleet.models import Position, Snapshot, VehicleStatus
from pyfleet.rendering import (
    Bounds,
    FleetView,
    InMemoryMapSurface,
    LoggingFleetView,
    MapSurface,
    NullFleetView,
    fleet_bounds,
)
from pyfleet.session import FleetSession
from pyfleet.simulator import FleetSimulator, simulate
from pyfleet.state.reconcile import ReconcileResult, Reconciler, reconcile
from pyfleet.state.store import EntityStore, TrackedEntity
from pyfleet.tracker import FleetTracker

__all__ = [
    "__version__",
    "Alert",
    "AlertKind",
    "Animator",
    "Bounds",
    "EntityStore",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "FleetProtocolError",
    "FleetSession",
    "FleetSimulator",
    "FleetTimeoutError",
    "FleetTracker",
    "FleetTransportError",
    "FleetView",
    "InMemoryMapSurface",
    "LoggingFleetView",
    "MapSurface",
    "NullFleetView",
    "Position",
    "ReconcileResult",
    "Reconciler",
    "Snapshot",
    "TrackedEntity",
    "VehicleStatus",
    "evaluate_alerts",
    "fleet_bounds",
    "interpolate",
    "reconcile",
    "simulate",
]
