"""Tracker configuration for pyfleet."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyfleet._constants import (
    ANIMATION_DURATION_S,
    BOUNDS_PADDING,
    DEFAULT_CENTER,
    DEFAULT_ZOOM,
    FETCH_TIMEOUT_S,
    FRAME_INTERVAL_S,
    NEAR_DISTANCE_KM,
    POLL_INTERVAL_S,
    SLOW_SPEED_KMH,
    STATUS_URL,
)
from pyfleet.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise FleetConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Tracker configuration.

    Parameters
    ----------
    status_url : str
        URL of the remote status endpoint returning the fleet snapshot.
    poll_interval : float
        Seconds between poll ticks. Ticks fire on a fixed cadence,
        independent of how long a fetch takes.
    fetch_timeout : float
        Seconds before a pending fetch is abandoned with
        :class:`pyfleet.exceptions.FleetTimeoutError`.
    animation_duration : float
        Seconds a marker takes to glide to its new position.
    frame_interval : float
        Seconds between animation frames.
    use_simulation : bool
        Start with the local simulator instead of the remote endpoint.
        Can be toggled at runtime via ``FleetTracker.toggle_simulation``.
    slow_speed_kmh : float
        Vehicles strictly slower than this raise a "slow" alert.
    near_distance_km : float
        Vehicles strictly closer than this to their destination raise a
        "near destination" alert.
    default_center : tuple of float
        Map centre used when the fleet is empty.
    default_zoom : int
        Map zoom used together with ``default_center``.
    bounds_padding : float
        Fraction by which the fleet bounding box is grown when centring.
    """

    status_url: str = STATUS_URL
    poll_interval: float = POLL_INTERVAL_S
    fetch_timeout: float = FETCH_TIMEOUT_S
    animation_duration: float = ANIMATION_DURATION_S
    frame_interval: float = FRAME_INTERVAL_S
    use_simulation: bool = False
    slow_speed_kmh: float = SLOW_SPEED_KMH
    near_distance_km: float = NEAR_DISTANCE_KM
    default_center: tuple[float, float] = DEFAULT_CENTER
    default_zoom: int = DEFAULT_ZOOM
    bounds_padding: float = BOUNDS_PADDING

    def __post_init__(self) -> None:
        if not self.status_url:
            raise FleetConfigError("status_url must be non-empty")
        for name in ("poll_interval", "fetch_timeout", "frame_interval"):
            if getattr(self, name) <= 0:
                raise FleetConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.animation_duration < 0:
            raise FleetConfigError(f"animation_duration must not be negative, got {self.animation_duration}")
        if self.bounds_padding < 0:
            raise FleetConfigError(f"bounds_padding must not be negative, got {self.bounds_padding}")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads optional ``FLEET_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetConfig
            Populated configuration.

        Raises
        ------
        FleetConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}

        url = env.get("FLEET_STATUS_URL")
        if url is not None:
            config_kwargs["status_url"] = url.strip()

        _ENV_FLOAT_MAP = {
            "FLEET_POLL_INTERVAL": "poll_interval",
            "FLEET_FETCH_TIMEOUT": "fetch_timeout",
            "FLEET_ANIMATION_DURATION": "animation_duration",
            "FLEET_SLOW_SPEED_KMH": "slow_speed_kmh",
            "FLEET_NEAR_DISTANCE_KM": "near_distance_km",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_float(env_key, val)

        if "use_simulation" not in overrides:
            config_kwargs["use_simulation"] = _env_bool(env.get("FLEET_USE_SIMULATION"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
