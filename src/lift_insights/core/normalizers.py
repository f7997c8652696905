"""
Locale-tolerant parsing of numbers, dates, durations and units.

Every parser here degrades to a default instead of raising, so a single
malformed cell never fails a whole import.
"""

import math
import re
from datetime import datetime
from typing import Any

from .config import (
    FEET_TO_KM,
    LBS_TO_KG,
    MAX_VALID_YEAR,
    METERS_TO_KM,
    MILES_TO_KM,
    MIN_VALID_YEAR,
)

_UNIT_SUFFIX_RE = re.compile(r"\s*(kg|kgs|lb|lbs|km|mi|m|sec|s|min|reps?)$", re.IGNORECASE)
_EU_NUMBER_RE = re.compile(r"^\d{1,3}(\.\d{3})*,\d+$")
_US_NUMBER_RE = re.compile(r"^\d{1,3}(,\d{3})*\.\d+$")
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_BLANK_TOKENS = frozenset({"", "null", "undefined", "-", "nan", "none"})

# Tried in order; European day-first forms win over US month-first forms.
DATE_FORMATS: tuple[str, ...] = (
    # ISO
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    # Hevy
    "%d %b %Y, %H:%M",
    "%d %b %Y %H:%M",
    # European
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y",
    # US
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    # Other
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%b %d, %Y %H:%M",
    "%B %d, %Y",
    "%d %b %Y",
)


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip().lower() in _BLANK_TOKENS


def normalize_token(value: Any) -> str:
    """Lowercase and drop every non-alphanumeric character."""
    return re.sub(r"[^a-z0-9]", "", str(value if value is not None else "").strip().lower())


def parse_flexible_number(value: Any, default: float = math.nan) -> float:
    """
    Parse a number written in US or EU notation.

    Handles unit suffixes ("80 kg"), thousands grouping ("1,234.5" and
    "1.234,5") and a lone decimal comma ("82,5").

    Args:
        value: Raw cell value
        default: Returned when the value is blank or unparseable

    Returns:
        Parsed float or ``default``
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default
    if _is_blank(value):
        return default

    s = _UNIT_SUFFIX_RE.sub("", str(value).strip())

    if _EU_NUMBER_RE.match(s):
        s = s.replace(".", "").replace(",", ".", 1)
    elif _US_NUMBER_RE.match(s):
        s = s.replace(",", "")
    elif "," in s and "." not in s:
        s = s.replace(",", ".", 1)

    m = _LEADING_FLOAT_RE.match(s)
    if m is None:
        return default
    n = float(m.group(0))
    return n if math.isfinite(n) else default


def _year_ok(d: datetime) -> bool:
    return MIN_VALID_YEAR < d.year < MAX_VALID_YEAR


def parse_flexible_date(value: Any) -> datetime | None:
    """
    Parse a date/time string in any of the supported export formats.

    Returns a naive datetime, or None if nothing matches or the year falls
    outside the accepted range.
    """
    if isinstance(value, datetime):
        return value if _year_ok(value) else None

    s = str(value if value is not None else "").strip()
    if not s:
        return None

    for fmt in DATE_FORMATS:
        try:
            d = datetime.strptime(s, fmt)
        except ValueError:
            continue
        if _year_ok(d):
            return d

    try:
        d = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    d = d.replace(tzinfo=None)
    return d if _year_ok(d) else None


_CLOCK_RE = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")
_PLAIN_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
_HOURS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:h|hr|hrs|hour)", re.IGNORECASE)
_MINUTES_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:m|min|mins|minute)", re.IGNORECASE)
_SECONDS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:s|sec|secs|second)", re.IGNORECASE)


def parse_duration(value: Any) -> int:
    """
    Parse a duration to whole seconds.

    Accepts plain seconds, MM:SS, HH:MM:SS and text like "1h 30m 45s".
    Anything else is 0.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(0, round(value)) if math.isfinite(value) else 0

    s = str(value if value is not None else "").strip()
    if not s:
        return 0

    if _PLAIN_NUMBER_RE.match(s):
        return max(0, round(float(s)))

    if _CLOCK_RE.match(s):
        parts = [int(p) for p in s.split(":")]
        if len(parts) == 2:
            return parts[0] * 60 + parts[1]
        return parts[0] * 3600 + parts[1] * 60 + parts[2]

    total = 0.0
    hours = _HOURS_RE.search(s)
    minutes = _MINUTES_RE.search(s)
    seconds = _SECONDS_RE.search(s)
    if hours:
        total += float(hours.group(1)) * 3600
    if minutes:
        total += float(minutes.group(1)) * 60
    if seconds:
        total += float(seconds.group(1))
    return round(total)


_NORMAL_SET_TOKENS = frozenset({"", "normal", "normalset", "working", "work", "regular", "standard"})


def normalize_set_type(value: Any) -> str:
    """Map a free-text set type onto the set-type vocabulary."""
    s = re.sub(r"[^a-z]", "", str(value if value is not None else "").lower())

    if s in _NORMAL_SET_TOKENS:
        return "normal"
    if "warm" in s:
        return "warmup"
    if "drop" in s:
        return "dropset"
    if "fail" in s:
        return "failure"
    if "amrap" in s:
        return "amrap"
    if "rest" in s and "pause" in s:
        return "restpause"
    if "myo" in s:
        return "myoreps"
    if "cluster" in s:
        return "cluster"
    if "giant" in s:
        return "giantset"
    if "super" in s:
        return "superset"
    if "backoff" in s or ("back" in s and "off" in s):
        return "backoff"
    return "normal"


def is_warmup(set_type: str | None) -> bool:
    """True for warmup-tagged sets ("w" or anything containing "warmup")."""
    t = (set_type or "").strip().lower()
    if not t:
        return False
    return t == "w" or "warmup" in t


def rir_to_rpe(rir: float) -> float:
    """Convert reps-in-reserve to RPE, clamped to 1..10."""
    return max(1.0, min(10.0, 10.0 - rir))


def extract_unit_from_header(header: str) -> str | None:
    """
    Read a unit hint from a column header such as "weight_lbs" or "Distance (km)".

    Returns "kg", "lbs", "km", "miles", "meters" or None.
    """
    h = header.strip().lower()

    if re.search(r"kgs?$|_kgs?$|\(kgs?\)", h):
        return "kg"
    if re.search(r"lbs?$|_lbs?$|pounds|\(lbs?\)", h):
        return "lbs"

    if re.search(r"km$|_km$|kilometers?|kilometres?|\(km\)", h):
        return "km"
    if re.search(r"mi$|_mi$|miles?|\(mi\)", h):
        return "miles"
    if re.search(r"(?:^|_)m$|meters?|metres?|\(m\)", h) and not re.search(r"km|mi", h):
        return "meters"
    return None


def to_kg(
    weight: float,
    row_unit: str | None = None,
    header_unit: str | None = None,
    user_unit: str = "kg",
) -> float:
    """
    Convert a weight to kilograms.

    Unit precedence: the header hint (e.g. "weight_lbs"), then the row's unit
    column, then the caller's preferred unit. Negative or non-finite weights become 0.
    """
    if not math.isfinite(weight) or weight < 0:
        return 0.0

    unit = normalize_token(header_unit) or normalize_token(row_unit) or user_unit

    if unit.startswith("kg") or unit in ("kilogram", "kilograms"):
        return weight
    if unit.startswith("lb") or unit in ("pound", "pounds"):
        return weight * LBS_TO_KG
    return weight * LBS_TO_KG if user_unit == "lbs" else weight


def to_km(
    distance: float,
    row_unit: str | None = None,
    header_unit: str | None = None,
    user_unit: str = "km",
) -> float:
    """Convert a distance to kilometers, with the same precedence as ``to_kg``."""
    if not math.isfinite(distance) or distance < 0:
        return 0.0

    unit = normalize_token(header_unit) or normalize_token(row_unit) or user_unit

    if unit.startswith("km") or unit in ("kilometer", "kilometre", "kilometers", "kilometres"):
        return distance
    if unit.startswith("mi") or unit == "mile":
        return distance * MILES_TO_KM
    if unit == "m" or unit.startswith("meter") or unit.startswith("metre"):
        return distance * METERS_TO_KM
    if unit.startswith("ft") or unit in ("feet", "foot"):
        return distance * FEET_TO_KM
    return distance


def kg_to_unit(weight_kg: float, unit: str) -> float:
    """Convert kilograms back to the given weight unit ("kg" or "lbs")."""
    if unit == "lbs":
        return weight_kg / LBS_TO_KG
    return weight_kg
