"""
Semantic column detection for arbitrary workout CSV exports.

Each header is scored against every semantic field: the header text is
matched against the field's synonyms, and the score is blended with a
check of the column's sample values. Headers are then assigned greedily
by confidence. Supporting a new export format means adding synonyms to
SEMANTIC_FIELDS, not code.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from ..core.config import (
    CLEAN_MATCH_SCORE,
    MIN_FIELD_SCORE,
    SIMILARITY_THRESHOLD,
    TEXT_WEIGHT,
    VALIDATION_WEIGHT,
)
from ..core.models import FieldMapping
from ..core.normalizers import (
    extract_unit_from_header,
    normalize_token,
    parse_flexible_date,
    parse_flexible_number,
)

logger = logging.getLogger(__name__)

Validator = Callable[[list[Any]], float]

# =============================================================================
# VALUE VALIDATORS
# =============================================================================

_FITNESS_TERMS_RE = re.compile(
    r"bench|squat|deadlift|press|curl|row|pull|push|raise|extension|fly|lunge|crunch|plank"
    r"|cable|dumbbell|barbell|machine|lat|tricep|bicep|chest|leg|shoulder|core|glute|calf|ham|quad",
    re.IGNORECASE,
)
_SET_TYPE_TERMS_RE = re.compile(
    r"normal|warm|drop|failure|working|amrap|cluster|rest|pause|myo|regular|standard",
    re.IGNORECASE,
)
_WEIGHT_UNIT_RE = re.compile(r"^(kg|kgs|kilograms?|lb|lbs|pounds?)$", re.IGNORECASE)
_DISTANCE_UNIT_RE = re.compile(
    r"^(km|kilometers?|kilometres?|mi|miles?|m|meters?|metres?|ft|feet)$", re.IGNORECASE
)
_CLOCK_RE = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")
_UNIT_DURATION_RE = re.compile(r"^\d+\s*(s|sec|m|min|h|hr)", re.IGNORECASE)
_INT_PREFIX_RE = re.compile(r"^\s*[+-]?\d+")


def _parse_int(value: Any) -> int | None:
    """Leading integer of a value, like ``parseInt``; None when there is none."""
    m = _INT_PREFIX_RE.match(str(value))
    return int(m.group(0)) if m else None


def _ints(values: list[Any]) -> list[int]:
    return [n for n in (_parse_int(v) for v in values) if n is not None]


def _numbers(values: list[Any]) -> list[float]:
    nums = (parse_flexible_number(v) for v in values)
    return [n for n in nums if n == n]  # drop NaN


def _ratio(matches: int, total: int) -> float:
    return matches / total if total else 0.0


def _has_sequential_resets(nums: list[int]) -> bool:
    """Set numbers restart at 1 (1,2,3,1,2,...) or stay small throughout."""
    if len(nums) < 3:
        return True
    resets = sum(1 for prev, curr in zip(nums, nums[1:]) if curr == 1 and prev > 1)
    return resets >= 1 or all(1 <= n <= 15 for n in nums)


def _validate_title(values: list[Any]) -> float:
    strings = [str(v) for v in values if parse_flexible_number(v) != parse_flexible_number(v)]
    if not strings:
        return 0.0
    return 0.8 if len(set(strings)) / len(strings) < 0.3 else 0.4


def _validate_exercise(values: list[Any]) -> float:
    return 0.9 if any(_FITNESS_TERMS_RE.search(str(v)) for v in values) else 0.5


def _validate_date(values: list[Any]) -> float:
    return _ratio(sum(1 for v in values if parse_flexible_date(v) is not None), len(values))


def _is_duration_like(value: Any) -> bool:
    s = str(value).strip()
    if _CLOCK_RE.match(s) or _UNIT_DURATION_RE.match(s):
        return True
    n = parse_flexible_number(s)
    return re.fullmatch(r"\d+(\.\d+)?", s) is not None and 0 <= n < 86400


def _validate_duration(values: list[Any]) -> float:
    return _ratio(sum(1 for v in values if _is_duration_like(v)), len(values))


def _validate_set_index(values: list[Any]) -> float:
    nums = _ints(values)
    if not nums:
        return 0.0
    all_small = all(0 <= n <= 50 for n in nums)
    if all_small and _has_sequential_resets(nums):
        return 0.9
    return 0.6 if all_small else 0.2


def _validate_set_type(values: list[Any]) -> float:
    return _ratio(sum(1 for v in values if _SET_TYPE_TERMS_RE.search(str(v))), len(values))


def _validate_weight(values: list[Any]) -> float:
    nums = _numbers(values)
    return _ratio(sum(1 for n in nums if 0 <= n <= 1000), len(nums))


def _validate_weight_unit(values: list[Any]) -> float:
    return _ratio(sum(1 for v in values if _WEIGHT_UNIT_RE.match(str(v).strip())), len(values))


def _validate_reps(values: list[Any]) -> float:
    nums = _ints(values)
    if not nums:
        return 0.0
    return 0.9 if _ratio(sum(1 for n in nums if 0 <= n <= 200), len(nums)) > 0.8 else 0.5


def _validate_distance(values: list[Any]) -> float:
    return 0.7 if any(n > 0 for n in _numbers(values)) else 0.2


def _validate_distance_unit(values: list[Any]) -> float:
    return _ratio(sum(1 for v in values if _DISTANCE_UNIT_RE.match(str(v).strip())), len(values))


def _validate_rpe(values: list[Any]) -> float:
    nums = _numbers(values)
    if not nums:
        return 0.0
    return 0.9 if _ratio(sum(1 for n in nums if 1 <= n <= 10), len(nums)) > 0.7 else 0.4


def _validate_rir(values: list[Any]) -> float:
    nums = _numbers(values)
    if not nums:
        return 0.0
    return 0.85 if _ratio(sum(1 for n in nums if 0 <= n <= 10), len(nums)) > 0.7 else 0.3


# =============================================================================
# FIELD DICTIONARY
# =============================================================================


@dataclass(frozen=True)
class SemanticField:
    """A target field with its header synonyms, ranking priority and value check."""

    name: str
    synonyms: tuple[str, ...]
    priority: int
    validate: Validator | None = None


SEMANTIC_FIELDS: tuple[SemanticField, ...] = (
    SemanticField(
        "workout_title",
        ("title", "workout", "workout name", "workout title", "routine", "routine name",
         "session", "session name", "training", "program", "name"),
        5, _validate_title,
    ),
    SemanticField(
        "exercise",
        ("exercise", "exercise name", "exercise title", "movement", "lift", "activity",
         "drill", "move", "action"),
        10, _validate_exercise,
    ),
    SemanticField(
        "start_time",
        ("date", "time", "datetime", "timestamp", "when",
         "start", "start time", "start date", "started", "started at",
         "performed", "performed at", "logged", "logged at", "recorded", "created", "created at",
         "log date", "workout date", "workout time", "session date", "session time"),
        9, _validate_date,
    ),
    SemanticField(
        "end_time",
        ("end", "end time", "end date", "ended", "ended at",
         "finished", "finished at", "completed", "completed at", "stop", "stopped"),
        3,
    ),
    SemanticField(
        "duration",
        ("duration", "length", "elapsed", "total time",
         "workout duration", "session duration", "workout length", "workout time",
         "seconds", "secs", "sec", "minutes", "mins", "min",
         "elapsed time", "duration seconds", "duration minutes"),
        5, _validate_duration,
    ),
    SemanticField(
        "set_index",
        ("set", "set index", "set number", "set order", "set num", "set no", "set #",
         "order", "index", "number", "num", "no", "#"),
        6, _validate_set_index,
    ),
    SemanticField(
        "set_type",
        ("set type", "type", "kind", "category", "set category", "set kind"),
        5, _validate_set_type,
    ),
    SemanticField(
        "weight",
        ("weight", "load", "resistance", "mass",
         "weight kg", "weight kgs", "weight lb", "weight lbs", "weight pounds",
         "kg", "kgs", "lb", "lbs", "pounds", "kilograms",
         "weight (kg)", "weight (lbs)", "weight (lb)",
         "weight in kg", "weight in lbs", "weight in pounds"),
        9, _validate_weight,
    ),
    SemanticField(
        "weight_unit",
        ("weight unit", "unit", "mass unit", "load unit"),
        7, _validate_weight_unit,
    ),
    SemanticField(
        "reps",
        ("reps", "repetitions", "rep", "repetition", "rep count", "reps count",
         "count", "number of reps", "num reps"),
        9, _validate_reps,
    ),
    SemanticField(
        "distance",
        ("distance", "dist",
         "distance km", "distance mi", "distance m", "distance miles", "distance meters",
         "km", "kilometers", "kilometres", "miles", "mi", "meters", "metres", "m",
         "distance (km)", "distance (mi)", "distance (m)"),
        5, _validate_distance,
    ),
    SemanticField(
        "distance_unit",
        ("distance unit", "dist unit"),
        4, _validate_distance_unit,
    ),
    SemanticField(
        "rpe",
        ("rpe", "perceived exertion", "rate of perceived exertion",
         "effort", "intensity", "difficulty", "hardness", "rating"),
        4, _validate_rpe,
    ),
    SemanticField(
        "rir",
        ("rir", "reps in reserve", "reserve", "reps left", "remaining reps"),
        4, _validate_rir,
    ),
    SemanticField(
        "notes",
        ("notes", "note", "comment", "comments", "memo", "remark", "remarks",
         "exercise notes", "exercise note", "set notes", "set note"),
        3,
    ),
    SemanticField(
        "workout_notes",
        ("workout notes", "workout note", "session notes", "session note",
         "description", "desc", "details", "workout description"),
        3,
    ),
    SemanticField(
        "superset_id",
        ("superset", "superset id", "superset group", "group", "group id",
         "circuit", "circuit id", "pairing", "pair", "linked"),
        3,
    ),
    SemanticField(
        "rest_time",
        ("rest", "rest time", "rest period", "recovery", "recovery time",
         "break", "break time", "pause", "pause time"),
        2,
    ),
)

# Fields that map to at most one column
UNIQUE_FIELDS: frozenset[str] = frozenset({
    "workout_title", "start_time", "end_time", "set_index", "weight", "reps",
    "rpe", "rir", "distance", "weight_unit", "distance_unit",
})

# =============================================================================
# SCORING
# =============================================================================


def normalize_header(header: str) -> str:
    """Lowercase, drop a BOM and fold separators to single underscores."""
    s = str(header).strip().lower().lstrip("\ufeff")
    s = re.sub(r"[^a-z0-9_]", "_", s)
    s = re.sub(r"_+", "_", s)
    return s.strip("_")


def _bigrams(s: str) -> set[str]:
    return {s[i:i + 2] for i in range(len(s) - 1)}


def header_similarity(a: str, b: str) -> float:
    """
    Dice coefficient over character bigrams of the normalized strings.

    One string containing the other scores 0.7 plus up to 0.25 by length
    ratio; identical strings score 1.
    """
    a_norm = normalize_token(a)
    b_norm = normalize_token(b)

    if a_norm == b_norm:
        return 1.0
    if len(a_norm) < 2 or len(b_norm) < 2:
        return 0.0

    if a_norm in b_norm or b_norm in a_norm:
        ratio = min(len(a_norm), len(b_norm)) / max(len(a_norm), len(b_norm))
        return 0.7 + ratio * 0.25

    a_bigrams = _bigrams(a_norm)
    b_bigrams = _bigrams(b_norm)
    matches = len(a_bigrams & b_bigrams)
    return 2 * matches / (len(a_bigrams) + len(b_bigrams))


def _text_score(header: str, field: SemanticField) -> float:
    normalized = normalize_token(header)
    clean = normalize_header(header)
    score = 0.0
    for synonym in field.synonyms:
        if normalized == normalize_token(synonym):
            return 1.0
        if clean == normalize_header(synonym):
            score = max(score, CLEAN_MATCH_SCORE)
            continue
        sim = header_similarity(header, synonym)
        if sim > SIMILARITY_THRESHOLD:
            score = max(score, sim)
    return score


def score_header(header: str, sample_values: Sequence[Any]) -> FieldMapping | None:
    """
    Best semantic field for one header, or None.

    The text score is blended 60/40 with the field's value validation when
    there are non-empty samples. Candidates are ranked by score weighted by
    field priority; a candidate needs a blended score above 0.5.
    """
    values = [v for v in sample_values if v is not None and str(v).strip() != ""]
    best: FieldMapping | None = None
    best_rank = 0.0

    for field in SEMANTIC_FIELDS:
        score = _text_score(header, field)
        if score > 0 and field.validate is not None and values:
            score = score * TEXT_WEIGHT + field.validate(values) * VALIDATION_WEIGHT

        rank = score * field.priority / 10
        if rank > best_rank and score > MIN_FIELD_SCORE:
            best_rank = rank
            best = FieldMapping(
                header=header,
                field=field.name,
                confidence=score,
                unit_hint=extract_unit_from_header(header) if field.name in ("weight", "distance") else None,
            )

    return best


def detect_field_mappings(
    headers: Sequence[str],
    sample_rows: Sequence[Mapping[str, Any]],
) -> list[FieldMapping]:
    """
    Map headers to semantic fields.

    Headers are scored independently, then assigned in order of confidence.
    Unique fields are claimed by at most one header; the other fields may
    collect several (e.g. two notes columns).

    Returns:
        Accepted mappings in assignment order
    """
    scored: list[FieldMapping] = []
    for header in headers:
        match = score_header(header, [row.get(header) for row in sample_rows])
        if match is not None:
            scored.append(match)

    scored.sort(key=lambda m: m.confidence, reverse=True)

    used: set[str] = set()
    mappings: list[FieldMapping] = []
    for match in scored:
        if match.field in UNIQUE_FIELDS and match.field in used:
            logger.debug("Header %r lost %s to an earlier column", match.header, match.field)
            continue
        used.add(match.field)
        mappings.append(match)
        logger.debug("Mapped %r -> %s (%.2f)", match.header, match.field, match.confidence)

    return mappings


def guess_delimiter(text: str) -> str:
    """Pick tab, semicolon or comma from their counts in the first line."""
    first_line = text.splitlines()[0] if text else ""
    commas = first_line.count(",")
    semicolons = first_line.count(";")
    tabs = first_line.count("\t")

    if tabs > commas and tabs > semicolons:
        return "\t"
    if semicolons > commas:
        return ";"
    return ","
