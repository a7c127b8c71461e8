from __future__ import annotations

import pytest

from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetConfigError


def test_defaults() -> None:
    config = FleetConfig()
    assert config.status_url == "http://127.0.0.1:5001/status"
    assert config.poll_interval == 2.0
    assert config.fetch_timeout == 1.5
    assert config.animation_duration == 0.9
    assert config.use_simulation is False
    assert config.slow_speed_kmh == 15.0
    assert config.near_distance_km == 0.5


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_STATUS_URL", " http://fleet.local/status ")
    monkeypatch.setenv("FLEET_POLL_INTERVAL", "5")
    monkeypatch.setenv("FLEET_FETCH_TIMEOUT", "0.75")
    monkeypatch.setenv("FLEET_USE_SIMULATION", "yes")

    config = FleetConfig.from_env()

    assert config.status_url == "http://fleet.local/status"
    assert config.poll_interval == 5.0
    assert config.fetch_timeout == 0.75
    assert config.use_simulation is True


def test_overrides_beat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_POLL_INTERVAL", "5")
    monkeypatch.setenv("FLEET_USE_SIMULATION", "1")

    config = FleetConfig.from_env(poll_interval=1.0, use_simulation=False)

    assert config.poll_interval == 1.0
    assert config.use_simulation is False


def test_unknown_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_USE_SIMULATION", "maybe")
    assert FleetConfig.from_env().use_simulation is False


def test_unparseable_number_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_FETCH_TIMEOUT", "soon")
    with pytest.raises(FleetConfigError, match="FLEET_FETCH_TIMEOUT"):
        FleetConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"poll_interval": 0},
        {"fetch_timeout": -1},
        {"frame_interval": 0},
        {"animation_duration": -0.1},
        {"status_url": ""},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(**kwargs)
