"""Internal constants shared across the library."""

STATUS_URL = "http://127.0.0.1:5001/status"
USER_AGENT = "pyfleet/1.0"

# ------------------------------------------------------------------
# Polling cadence  (seconds)
# ------------------------------------------------------------------

POLL_INTERVAL_S = 2.0
FETCH_TIMEOUT_S = 1.5
ANIMATION_DURATION_S = 0.9
FRAME_INTERVAL_S = 1 / 60

# ------------------------------------------------------------------
# Alert thresholds
# ------------------------------------------------------------------

SLOW_SPEED_KMH = 15.0
NEAR_DISTANCE_KM = 0.5

# ------------------------------------------------------------------
# Map viewport
# ------------------------------------------------------------------

DEFAULT_CENTER: tuple[float, float] = (28.6139, 77.2090)
DEFAULT_ZOOM = 12
BOUNDS_PADDING = 0.2

# ------------------------------------------------------------------
# Simulation
# ------------------------------------------------------------------

# Seed fleet used when the simulator starts from an empty store.
SEED_FLEET: dict[str, dict[str, float]] = {
    "V1": {"lat": 28.6139, "lon": 77.2090, "speed": 35, "eta": 12, "distance": 2.3},
    "V2": {"lat": 28.6239, "lon": 77.1990, "speed": 18, "eta": 7, "distance": 0.6},
}

POSITION_JITTER_DEG = 0.0009
SPEED_JITTER_KMH = 3.0
DISTANCE_STEP_KM = 0.05

# Fallbacks for vehicles whose last record lacks speed/distance.
SIM_DEFAULT_SPEED_KMH = 30.0
SIM_DEFAULT_DISTANCE_KM = 2.0

DISPLAY_PLACEHOLDER = "—"
