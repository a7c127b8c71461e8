from __future__ import annotations

from pyfleet.alerts import Alert, AlertKind, evaluate_alerts
from pyfleet.models.status import VehicleStatus


def _status(**fields: float) -> VehicleStatus:
    return VehicleStatus.model_validate({"lat": 1.0, "lon": 2.0, **fields})


def test_speed_at_threshold_does_not_alert() -> None:
    assert evaluate_alerts("A", _status(speed=15.0)) == []


def test_speed_just_below_threshold_alerts_once() -> None:
    alerts = evaluate_alerts("A", _status(speed=14.999))

    assert len(alerts) == 1
    assert alerts[0].kind == AlertKind.SLOW
    assert alerts[0].vehicle_id == "A"
    assert alerts[0].value == 14.999
    assert alerts[0].message == "slow: A (14.999 km/h)"


def test_distance_at_threshold_does_not_alert() -> None:
    assert evaluate_alerts("A", _status(distance=0.5)) == []


def test_distance_just_below_threshold_alerts_once() -> None:
    alerts = evaluate_alerts("A", _status(distance=0.499))

    assert [a.kind for a in alerts] == [AlertKind.NEAR_DESTINATION]
    assert alerts[0].message == "near destination: A (0.499 km)"


def test_both_conditions_fire_slow_first() -> None:
    alerts = evaluate_alerts("B", _status(speed=3, distance=0.1))

    assert [str(a) for a in alerts] == ["slow: B (3 km/h)", "near destination: B (0.1 km)"]


def test_missing_fields_never_alert() -> None:
    assert evaluate_alerts("A", _status()) == []


def test_zero_values_alert() -> None:
    alerts = evaluate_alerts("A", _status(speed=0, distance=0))
    assert [a.message for a in alerts] == ["slow: A (0 km/h)", "near destination: A (0 km)"]


def test_custom_thresholds() -> None:
    alerts = evaluate_alerts("A", _status(speed=20, distance=0.8), slow_speed_kmh=25, near_distance_km=1.0)
    assert len(alerts) == 2


def test_alert_is_immutable_value() -> None:
    a = Alert(kind=AlertKind.SLOW, vehicle_id="A", value=10)
    assert a == Alert(kind=AlertKind.SLOW, vehicle_id="A", value=10.0)
    assert a.message == "slow: A (10 km/h)"
