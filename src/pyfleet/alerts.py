"""Per-vehicle alert evaluation.

Alerts are derived fresh from each vehicle's latest record on every
reconciliation cycle; nothing here keeps state between cycles.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from pyfleet._constants import NEAR_DISTANCE_KM, SLOW_SPEED_KMH
from pyfleet.ingestion.normalize import format_number
from pyfleet.models.status import VehicleStatus


class AlertKind(StrEnum):
    SLOW = "slow"
    NEAR_DESTINATION = "near destination"


_UNITS: dict[AlertKind, str] = {
    AlertKind.SLOW: "km/h",
    AlertKind.NEAR_DESTINATION: "km",
}


class Alert(BaseModel):
    """A single alert raised for one vehicle in one cycle."""

    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    vehicle_id: str
    value: float

    @property
    def message(self) -> str:
        """Display text, e.g. ``"slow: A (10 km/h)"``."""
        return f"{self.kind.value}: {self.vehicle_id} ({format_number(self.value)} {_UNITS[self.kind]})"

    def __str__(self) -> str:
        return self.message


def evaluate_alerts(
    vehicle_id: str,
    status: VehicleStatus,
    *,
    slow_speed_kmh: float = SLOW_SPEED_KMH,
    near_distance_km: float = NEAR_DISTANCE_KM,
) -> list[Alert]:
    """Return the alerts *status* raises, slow first.

    Both comparisons are strict: a vehicle exactly at a threshold does not
    alert.
    """
    alerts: list[Alert] = []
    if status.speed is not None and status.speed < slow_speed_kmh:
        alerts.append(Alert(kind=AlertKind.SLOW, vehicle_id=vehicle_id, value=status.speed))
    if status.distance is not None and status.distance < near_distance_km:
        alerts.append(Alert(kind=AlertKind.NEAR_DESTINATION, vehicle_id=vehicle_id, value=status.distance))
    return alerts
