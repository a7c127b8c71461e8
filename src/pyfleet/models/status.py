"""Vehicle status record model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyfleet._constants import DISPLAY_PLACEHOLDER
from pyfleet.ingestion.normalize import format_number, safe_float
from pyfleet.models._base import FleetBaseModel
from pyfleet.models.position import Position


def _display(value: float | None, digits: int | None = None) -> str:
    if value is None:
        return DISPLAY_PLACEHOLDER
    if digits is not None:
        return f"{value:.{digits}f}"
    return format_number(value)


class VehicleStatus(FleetBaseModel):
    """One vehicle's record inside a status snapshot.

    All fields are ``None`` when absent or unparseable. A record without
    both coordinates is invalid and never creates or moves a vehicle.

    Parameters
    ----------
    lat : float or None
        Latitude in degrees.
    lon : float or None
        Longitude in degrees.
    speed : float or None
        Current speed in km/h.
    eta : float or None
        Estimated minutes to destination.
    distance : float or None
        Remaining distance to destination in km.
    raw : dict
        Full record as received.
    """

    lat: float | None = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lon: float | None = Field(default=None, validation_alias=AliasChoices("lon", "lng", "longitude"))
    speed: float | None = None
    eta: float | None = None
    distance: float | None = None

    @field_validator("lat", "lon", "speed", "eta", "distance", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @classmethod
    def from_payload(cls, value: Any) -> VehicleStatus:
        """Build a status from any JSON value.

        Non-object values yield a status without a position, which the
        reconciler skips.
        """
        if not isinstance(value, dict):
            return cls()
        return cls.model_validate(value)

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def position(self) -> Position | None:
        if self.lat is None or self.lon is None:
            return None
        return Position(self.lat, self.lon)

    # ------------------------------------------------------------------
    # Display helpers (one placeholder for every missing value)
    # ------------------------------------------------------------------

    @property
    def speed_text(self) -> str:
        return f"{_display(self.speed)} km/h"

    @property
    def eta_text(self) -> str:
        return f"ETA: {_display(self.eta)} min"

    @property
    def distance_text(self) -> str:
        return f"{_display(self.distance)} km"

    @property
    def position_text(self) -> str:
        return f"{_display(self.lat, 4)}, {_display(self.lon, 4)}"

    def label(self, vehicle_id: str) -> str:
        """Marker popup text, e.g. ``"V1\\nSpeed: 35 km/h\\nETA: 12 mins"``."""
        return f"{vehicle_id}\nSpeed: {_display(self.speed)} km/h\nETA: {_display(self.eta)} mins"

    def to_record(self) -> dict[str, float]:
        """Return the record in wire form, omitting missing fields."""
        return self.model_dump(exclude={"raw"}, exclude_none=True)
