"""
Configuration constants for ingestion and training analytics.

All adjustable parameters are centralized here for easy tuning.
Thresholds read by the analytics engines can be overridden from YAML,
see core/engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# UNIT CONVERSION
# =============================================================================

LBS_TO_KG: Final[float] = 0.45359237
MILES_TO_KM: Final[float] = 1.609344
METERS_TO_KM: Final[float] = 0.001
FEET_TO_KM: Final[float] = 0.0003048

WEIGHT_UNITS: Final[tuple[str, ...]] = ("kg", "lbs")
DISTANCE_UNITS: Final[tuple[str, ...]] = ("km", "miles", "meters")

# Accepted calendar years for parsed dates (exclusive bounds)
MIN_VALID_YEAR: Final[int] = 1970
MAX_VALID_YEAR: Final[int] = 2100

# Output format for normalized start/end strings
OUTPUT_DATE_FORMAT: Final[str] = "%d %b %Y, %H:%M"

# =============================================================================
# SET TYPES
# =============================================================================

SET_TYPES: Final[tuple[str, ...]] = (
    "normal",
    "warmup",
    "dropset",
    "failure",
    "amrap",
    "restpause",
    "myoreps",
    "cluster",
    "giantset",
    "superset",
    "backoff",
)

# =============================================================================
# FIELD DETECTION
# =============================================================================

SAMPLE_ROWS: Final[int] = 50  # Rows inspected for value validation
SIMILARITY_THRESHOLD: Final[float] = 0.75  # Dice score a header must exceed
CLEAN_MATCH_SCORE: Final[float] = 0.95  # Underscore-normalized synonym match
TEXT_WEIGHT: Final[float] = 0.6  # Share of header text score
VALIDATION_WEIGHT: Final[float] = 0.4  # Share of value validation score
MIN_FIELD_SCORE: Final[float] = 0.5  # Accept mapping only above this
LOW_CONFIDENCE_WARNING: Final[float] = 0.6  # Mean confidence that triggers a warning

# Localization heuristic: with at least this many dated rows, fewer than
# DATE_PARSE_MIN_RATIO parseable dates fails the import.
DATE_CHECK_MIN_ROWS: Final[int] = 5
DATE_PARSE_MIN_RATIO: Final[float] = 0.5

# Inferred workout titles list at most this many exercise names
TITLE_MAX_EXERCISES: Final[int] = 3

# =============================================================================
# EXERCISE NAME RESOLUTION
# =============================================================================

FUZZY_MIN_SCORE_STRICT: Final[float] = 0.5
FUZZY_MIN_GAP_STRICT: Final[float] = 0.05
FUZZY_MIN_SCORE_RELAXED: Final[float] = 0.4
OVERLAP_BONUS: Final[float] = 1.1  # Multiplier on overlap coefficient

# =============================================================================
# ROLLING VOLUME
# =============================================================================

ROLLING_WINDOW_DAYS: Final[int] = 7  # Trailing window, inclusive of the current day
BREAK_THRESHOLD_DAYS: Final[int] = 7  # Gap strictly greater than this is a break
PRIMARY_MUSCLE_SETS: Final[float] = 1.0
SECONDARY_MUSCLE_SETS: Final[float] = 0.5
FULL_BODY_SETS: Final[float] = 1.0
VOLUME_EPSILON: Final[float] = 1e-9  # Accumulator values at or below are evicted

# =============================================================================
# SET-TO-SET PROGRESSION (per session)
# =============================================================================

EPLEY_FACTOR: Final[float] = 30.0
MAX_REPS_FOR_1RM: Final[int] = 12  # Epley degrades above this
SAME_WEIGHT_TOLERANCE_PCT: Final[float] = 1.0
DROP_THRESHOLD_MILD: Final[float] = 15.0  # <= this % rep drop is normal fatigue
DROP_THRESHOLD_MODERATE: Final[float] = 25.0  # <= this % is high fatigue
FATIGUE_BUFFER: Final[float] = 1.5  # Reps under expectation still "good"
AMBITIOUS_BUFFER: Final[float] = 3.0  # Reps under expectation still "slightly ambitious"

# =============================================================================
# SESSION GOAL
# =============================================================================

STRENGTH_MAX_AVG_REPS: Final[int] = 5
HYPERTROPHY_MAX_AVG_REPS: Final[int] = 15

# =============================================================================
# WEIGHT PROMOTION
# =============================================================================

DEFAULT_TARGET_REPS: Final[int] = 10
MIN_HYPERTROPHY_REPS: Final[int] = 5
PROMOTE_THRESHOLD_REPS: Final[int] = 12  # Top-weight min reps for the larger jump
TOP_WEIGHT_FRACTION: Final[float] = 0.95  # Sets at >= this * max weight count as top sets
INCONSISTENT_REP_MARGIN: Final[int] = 3

# =============================================================================
# MULTI-SESSION TREND
# =============================================================================

MIN_SESSIONS_FOR_TREND: Final[int] = 4
RECENT_SESSIONS: Final[int] = 4
LONG_WINDOW_SESSIONS: Final[int] = 6
WEIGHT_STATIC_EPSILON_KG: Final[float] = 0.5
REP_STATIC_EPSILON: Final[int] = 1
MIN_SIGNAL_REPS: Final[int] = 2
BODYWEIGHT_SESSION_SHARE: Final[float] = 0.75
ZERO_WEIGHT_KG: Final[float] = 0.0001
TREND_PCT_THRESHOLD: Final[float] = 1.0
TREND_MIN_ABS_1RM_KG: Final[float] = 0.25
TREND_MIN_ABS_REPS: Final[int] = 1
FAKE_PR_SPIKE_THRESHOLD: Final[float] = 5.0
FAKE_PR_MIN_SPIKE: Final[float] = 2.0
FAKE_PR_FOLLOWUP_REGRESSION: Final[float] = -2.0
FAKE_PR_POST_PR_DROP_THRESHOLD: Final[float] = -2.5
HIGH_CONFIDENCE_SESSIONS: Final[int] = 10
MEDIUM_CONFIDENCE_SESSIONS: Final[int] = 6
MAX_EVIDENCE_LINES: Final[int] = 3
