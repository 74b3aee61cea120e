"""Internal constants shared across the library."""

EARTH_RADIUS_MILES = 3958.8
SECONDS_PER_HOUR = 3600.0

# ------------------------------------------------------------------
# Range model
# ------------------------------------------------------------------

REFERENCE_TEMPERATURE_F = 70.0
TEMPERATURE_PENALTY_PER_DEGREE = 0.01  # 1% per °F below reference
MAX_TEMPERATURE_PENALTY = 0.6

ELEVATION_PENALTY_PER_1000_FT = 0.02
MAX_ELEVATION_PENALTY = 0.5

COLD_SOAK_KWH_PER_HOUR = 1.5

DEFAULT_SAFETY_BUFFER = 0.15

# ------------------------------------------------------------------
# Narration timing
# ------------------------------------------------------------------

MIN_TRIGGER_DISTANCE_MILES = 0.5
DEFAULT_ARRIVAL_WINDOW_SECONDS: tuple[float, float] = (60.0, 120.0)
DEFAULT_WORDS_PER_MINUTE = 150.0
DEFAULT_SPEED_MPH = 45.0
PASSED_POI_THRESHOLD_MILES = 0.5
