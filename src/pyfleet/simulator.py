"""Local fleet simulator.

Used when the status endpoint is unreachable (or simulation is switched on)
so the tracker still has something to show. Starting from an empty store it
seeds a fixed two-vehicle fleet; afterwards it nudges every tracked vehicle a
little each cycle. Membership never changes once the store is populated.
"""

from __future__ import annotations

import random

from pyfleet._constants import (
    DISTANCE_STEP_KM,
    POSITION_JITTER_DEG,
    SEED_FLEET,
    SIM_DEFAULT_DISTANCE_KM,
    SIM_DEFAULT_SPEED_KMH,
    SPEED_JITTER_KMH,
)
from pyfleet.ingestion.normalize import round_half_up
from pyfleet.ingestion.snapshot import parse_snapshot
from pyfleet.models.snapshot import Snapshot
from pyfleet.state.store import EntityStore, TrackedEntity


class FleetSimulator:
    """Generate snapshots from the current store state.

    Parameters
    ----------
    rng : random.Random, optional
        Source of randomness. Pass a seeded instance for reproducible runs.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def simulate(self, store: EntityStore) -> Snapshot:
        if len(store) == 0:
            return parse_snapshot({vehicle_id: dict(record) for vehicle_id, record in SEED_FLEET.items()})
        return parse_snapshot({entity.vehicle_id: self._step(entity) for entity in store})

    def _jitter(self, amplitude: float) -> float:
        return self._rng.uniform(-amplitude, amplitude)

    def _step(self, entity: TrackedEntity) -> dict[str, float]:
        previous = entity.status
        prev_speed = previous.speed if previous.speed is not None else SIM_DEFAULT_SPEED_KMH
        prev_distance = previous.distance if previous.distance is not None else SIM_DEFAULT_DISTANCE_KM

        speed = max(0.0, prev_speed + self._jitter(SPEED_JITTER_KMH))
        distance = max(0.0, prev_distance - self._rng.random() * DISTANCE_STEP_KM)
        eta = max(0.0, round_half_up(distance / (max(speed, 1.0) / 60)))

        return {
            "lat": entity.current.lat + self._jitter(POSITION_JITTER_DEG),
            "lon": entity.current.lon + self._jitter(POSITION_JITTER_DEG),
            "speed": round_half_up(speed),
            "eta": eta,
            "distance": round(distance, 2),
        }


def simulate(store: EntityStore, rng: random.Random | None = None) -> Snapshot:
    """One simulated snapshot for *store*."""
    return FleetSimulator(rng).simulate(store)
