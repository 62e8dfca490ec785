"""
Global configuration and constants for the Odour Dispersion Prediction Engine.
"""

# --- Map / Site Configuration ---
MAP_MIN = 0.0                  # Map-relative coordinates are percentages of the site map image
MAP_MAX = 100.0
METERS_TO_MAP_PERCENT = 0.02   # 1 m ~ 0.02 % of map width (assumes a ~500 m wide site map)
MAX_PLUME_DISTANCE = 60.0      # Cap on plume-v2 travel distance (map percent)

# --- Emission Source Defaults ---
DEFAULT_BASE_INTENSITY = 3     # Nominal 1..5 scale
DEFAULT_STABILITY_CLASS = "D"  # Neutral stability
STABILITY_CLASSES = ("A", "B", "C", "D", "E", "F")

# --- Plume Geometry ---
PLUME_SEGMENTS = 12            # Polygon resolution per edge; smooths shape, does not change physics
PLUME_HALF_WIDTH_FACTOR = 0.5  # Edge offset = width * t * 0.5

# --- Prediction Lifecycle ---
DEFAULT_VALIDITY_HOURS = 1.0
DEFAULT_DURATION_MINUTES = 60.0   # plume-v2 travel-time window
DEFAULT_MODEL_VERSION = "plume-v2"

# --- gaussian-v1 ---
GAUSSIAN_BASE_LENGTH = 15.0       # Map percent at zero wind
GAUSSIAN_LENGTH_PER_MPS = 4.0     # Extra length per m/s of wind
GAUSSIAN_PEAK_WIND_FACTOR = 0.1   # peak = base * (1 + 0.1 * ws)

# --- plume-v2 ---
PLUME_PEAK_WIND_FACTOR = 0.05     # peak = base * (1 + 0.05 * ws)
DECAY_LENGTH_FRACTION = 0.6       # I(d) = base * exp(-d / (0.6 * D))
INTENSITY_PROFILE_SAMPLES = 11    # Diagnostic curve: 0..D inclusive

# --- Contours ---
# Fraction of peak intensity -> display label, evaluated in this order
CONTOUR_LEVELS = (
    (0.8, "high"),
    (0.5, "medium"),
    (0.2, "low"),
)
MIN_CONTOUR_FRACTION = 0.05       # Contours at or below this distance fraction are dropped

# --- Pasquill-Gifford Stability Classes ---
# Scheme A (gaussian-v1): lateral / vertical spread coefficients and a length multiplier.
# sigma_z is carried for a future 3-D footprint and is unused in 2-D.
GAUSSIAN_STABILITY_PARAMS = {
    "A": {"sigma_y": 0.22, "sigma_z": 0.20, "spread_factor": 1.8},
    "B": {"sigma_y": 0.16, "sigma_z": 0.12, "spread_factor": 1.5},
    "C": {"sigma_y": 0.11, "sigma_z": 0.08, "spread_factor": 1.2},
    "D": {"sigma_y": 0.08, "sigma_z": 0.06, "spread_factor": 1.0},
    "E": {"sigma_y": 0.06, "sigma_z": 0.03, "spread_factor": 0.8},
    "F": {"sigma_y": 0.04, "sigma_z": 0.016, "spread_factor": 0.6},
}

# Scheme B (plume-v2): lateral spread as a fraction of plume distance
PLUME_SPREAD_FRACTIONS = {
    "A": 0.35,  # Very unstable - wide spread
    "B": 0.30,
    "C": 0.27,
    "D": 0.25,  # Neutral
    "E": 0.20,
    "F": 0.15,  # Stable - very narrow
}

STABILITY_LABELS = {
    "A": "Very Unstable",
    "B": "Unstable",
    "C": "Slightly Unstable",
    "D": "Neutral",
    "E": "Slightly Stable",
    "F": "Stable",
}

# --- Playback ---
DEFAULT_PLAYBACK_SNAPSHOTS = 24

# --- Visualization ---
CONTOUR_COLORS = {
    "high": "rgba(239, 68, 68, 0.55)",
    "medium": "rgba(249, 115, 22, 0.45)",
    "low": "rgba(234, 179, 8, 0.35)",
}
PLUME_FILL_COLOR = "rgba(156, 163, 175, 0.25)"
WIND_ARROW_POSITION = (8.0, 8.0)  # (x, y) map-percent position of the wind arrow on plots
