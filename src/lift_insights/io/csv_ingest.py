"""
Workout CSV ingestion.

One pipeline turns raw CSV text into normalized TrainingEvents:

1. guess the delimiter and read the rows
2. try the fixed Strong and Hevy export layouts
3. otherwise detect columns semantically (see field_detector)
4. transform rows, defaulting malformed values instead of failing
5. resolve exercise names, recompute set numbers, infer missing titles
6. sort newest first

Only structural problems (no rows, no exercise/date/weight column, dates in
an unrecognized locale) raise IngestionError.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from ..core.config import (
    DATE_CHECK_MIN_ROWS,
    DATE_PARSE_MIN_RATIO,
    LOW_CONFIDENCE_WARNING,
    OUTPUT_DATE_FORMAT,
    SAMPLE_ROWS,
    TITLE_MAX_EXERCISES,
)
from ..core.models import FieldMapping, IngestionMeta, IngestionResult, SourceFormat, TrainingEvent
from ..core.normalizers import (
    normalize_set_type,
    parse_duration,
    parse_flexible_date,
    parse_flexible_number,
    rir_to_rpe,
    to_kg,
    to_km,
)
from ..core.resolver import ExerciseNameResolver
from .errors import IngestionError
from .field_detector import detect_field_mappings, guess_delimiter

logger = logging.getLogger(__name__)

Row = dict[str, str]

EMPTY_FILE_MESSAGE = "CSV file is empty or has no valid data rows."
UNSUPPORTED_FORMAT_MESSAGE = (
    "Unrecognized file layout. Please export a CSV with one set per row and separate "
    "columns for date, exercise, weight and reps."
)
MISSING_EXERCISE_MESSAGE = (
    "Could not detect an exercise column. Please ensure your CSV has a column for exercises "
    '(e.g., "Exercise", "Exercise Name", "Movement", "Lift", etc.)'
)
MISSING_DATE_MESSAGE = (
    "Could not detect a date/time column. Please ensure your CSV has a column for dates "
    '(e.g., "Date", "Time", "Start Time", "Timestamp", etc.)'
)
MISSING_WEIGHT_MESSAGE = (
    "Could not detect a weight column. Please ensure your CSV has a column for weights "
    '(e.g., "Weight", "Weight (kg)", "Load", "lbs", etc.)'
)
LOW_CONFIDENCE_MESSAGE = (
    "Some columns may not have been detected correctly. Please verify your data after import."
)


@dataclass
class _Stats:
    fuzzy: int = 0
    representative: int = 0
    unmatched: set[str] = field(default_factory=set)


def _fmt_date(d: datetime | None) -> str:
    return d.strftime(OUTPUT_DATE_FORMAT) if d is not None else ""


def _text(value: str | None) -> str:
    return (value or "").strip()


def _rpe_or_none(value: float) -> float | None:
    return value if math.isfinite(value) and 1 <= value <= 10 else None


# =============================================================================
# CSV READING
# =============================================================================


def read_csv_rows(text: str) -> tuple[list[str], list[Row]]:
    """
    Read CSV text into headers and row dicts.

    Headers lose a leading BOM and surrounding whitespace. Blank lines are
    skipped; short rows are padded with empty strings.
    """
    delimiter = guess_delimiter(text)
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)

    headers: list[str] = []
    rows: list[Row] = []
    for record in reader:
        if not headers:
            if not any(cell.strip() for cell in record):
                continue
            headers = [cell.strip().lstrip("\ufeff").strip() for cell in record]
            continue
        if not any(cell.strip() for cell in record):
            continue
        padded = record + [""] * (len(headers) - len(record))
        rows.append(dict(zip(headers, padded)))

    return headers, rows


def _check_date_localization(raw_dates: list[str], parse: Callable[[str], datetime | None]) -> None:
    """Fail when most non-empty date strings cannot be parsed."""
    present = [d for d in raw_dates if d.strip()]
    if len(present) < DATE_CHECK_MIN_ROWS:
        return
    parsed = sum(1 for d in present if parse(d) is not None)
    if parsed / len(present) < DATE_PARSE_MIN_RATIO:
        raise IngestionError(
            code="date_parse_failure",
            message=(
                f"Could not parse dates in {len(present) - parsed} of {len(present)} rows. "
                "The date format may be specific to your region; supported examples are "
                '"2024-01-31 18:30", "31/01/2024" and "31 Jan 2024, 18:30".'
            ),
            field="start_time",
        )


# =============================================================================
# STRONG EXPORT
# =============================================================================

STRONG_HEADER_ALIASES: dict[str, str] = {
    "date": "date",
    "workout_name": "workout name",
    "exercise_name": "exercise name",
    "set_order": "set order",
    "workout_notes": "workout notes",
    "notes": "notes",
    "workout_duration": "workout duration",
    "duration": "duration",
    "duration_sec": "workout duration",
    "duration_secs": "workout duration",
    "duration_second": "workout duration",
    "duration_seconds": "workout duration",
    "weight": "weight",
    "weight_kg": "weight",
    "weight_kgs": "weight",
    "weight_lb": "weight",
    "weight_lbs": "weight",
    "weight_unit": "weight unit",
    "reps": "reps",
    "rpe": "rpe",
    "distance": "distance",
    "distance_m": "distance",
    "distance_meter": "distance",
    "distance_meters": "distance",
    "distance_km": "distance",
    "distance_mi": "distance",
    "distance_unit": "distance unit",
    "seconds": "seconds",
}

STRONG_REQUIRED = ("date", "workout name", "exercise name", "set order", "weight")
STRONG_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d")

# Letter codes Strong writes into "Set Order" for non-working sets
_STRONG_SET_CODES = {"w": "warmup", "d": "dropset", "f": "failure"}


def _canonical_header(header: str) -> str:
    s = header.strip().lstrip("\ufeff").lower()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    return s.strip("_")


def _strong_key(header: str) -> str:
    canonical = _canonical_header(header)
    return STRONG_HEADER_ALIASES.get(canonical, canonical.replace("_", " "))


def _weight_unit_from_header(canonical: str) -> str:
    if canonical.endswith(("_kg", "_kgs")):
        return "kg"
    if canonical.endswith(("_lb", "_lbs")):
        return "lbs"
    return ""


def _distance_unit_from_header(canonical: str) -> str:
    if canonical.endswith(("_m", "_meter", "_meters")):
        return "meters"
    if canonical.endswith("_km"):
        return "km"
    if canonical.endswith(("_mi", "_mile", "_miles")):
        return "miles"
    return ""


def is_strong_export(headers: list[str]) -> bool:
    keys = {_strong_key(h) for h in headers}
    return all(h in keys for h in STRONG_REQUIRED)


def _normalize_strong_row(row: Row) -> Row:
    out: Row = {}
    header_units: Row = {}
    for header, value in row.items():
        canonical = _canonical_header(header)
        key = _strong_key(header)
        out[key] = value
        if key == "weight":
            unit = _weight_unit_from_header(canonical)
            if unit:
                header_units["weight unit"] = unit
        elif key == "distance":
            unit = _distance_unit_from_header(canonical)
            if unit:
                header_units["distance unit"] = unit
    # A unit in the value header beats the unit columns
    out.update(header_units)
    return out


def parse_strong_number(value: str | None, default: float = 0.0) -> float:
    """Strong numbers: "82,5" is a decimal comma, "1,200" a thousands separator."""
    s = _text(value)
    if not s:
        return default
    if re.fullmatch(r"-?\d+,\d+", s):
        s = s.replace(",", ".", 1)
    else:
        s = re.sub(r",(?=\d{3}(?:\D|$))", "", s)
    n = parse_flexible_number(s, default)
    return n if math.isfinite(n) else default


def parse_strong_date(value: str | None) -> datetime | None:
    s = _text(value)
    for fmt in STRONG_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def _strong_set(value: str | None) -> tuple[int, str]:
    s = _text(value)
    code = _STRONG_SET_CODES.get(s.lower())
    if code is not None:
        return 0, code
    n = parse_flexible_number(s, 0.0)
    return (int(n) if n > 0 else 0), "normal"


def _strong_weight_to_kg(weight: float, unit: str, user_unit: str) -> float:
    if weight <= 0:
        return 0.0
    return to_kg(weight, unit or None, None, user_unit)


def _strong_distance_to_km(distance: float, unit: str, user_unit: str) -> float:
    if distance <= 0:
        return 0.0
    return to_km(distance, unit or None, None, user_unit)


def _parse_strong_rows(rows: list[Row], weight_unit: str, distance_unit: str) -> list[TrainingEvent]:
    events: list[TrainingEvent] = []
    for raw in rows:
        row = _normalize_strong_row(raw)
        exercise = _text(row.get("exercise name"))
        start = parse_strong_date(row.get("date"))
        if not exercise or start is None:
            logger.debug("Skipping Strong row without exercise or date: %r", raw)
            continue

        duration = parse_duration(row.get("workout duration")) or parse_duration(row.get("duration"))
        end = start + timedelta(seconds=duration) if duration > 0 else None
        set_index, set_type = _strong_set(row.get("set order"))
        rpe = _rpe_or_none(parse_strong_number(row.get("rpe"), math.nan))

        events.append(TrainingEvent(
            exercise_title=exercise,
            parsed_start=start,
            title=_text(row.get("workout name")),
            start_time=_fmt_date(start),
            end_time=_fmt_date(end),
            parsed_end=end,
            description=_text(row.get("workout notes")),
            exercise_notes=_text(row.get("notes")),
            set_index=set_index,
            set_type=set_type,
            weight_kg=_strong_weight_to_kg(
                parse_strong_number(row.get("weight")), _text(row.get("weight unit")), weight_unit
            ),
            reps=max(0.0, parse_strong_number(row.get("reps"))),
            distance_km=_strong_distance_to_km(
                parse_strong_number(row.get("distance")), _text(row.get("distance unit")), distance_unit
            ),
            duration_seconds=max(0, round(parse_strong_number(row.get("seconds")))),
            rpe=rpe,
        ))
    return events


# =============================================================================
# HEVY EXPORT
# =============================================================================

HEVY_REQUIRED = ("title", "start_time", "exercise_title", "set_index", "weight_kg", "reps")
HEVY_DATE_FORMAT = "%d %b %Y, %H:%M"


def is_hevy_export(headers: list[str]) -> bool:
    keys = {h.strip().lower() for h in headers}
    return all(h in keys for h in HEVY_REQUIRED)


def parse_hevy_date(value: str | None) -> datetime | None:
    s = _text(value)
    if not s:
        return None
    try:
        return datetime.strptime(s, HEVY_DATE_FORMAT)
    except ValueError:
        return parse_flexible_date(s)


def _parse_hevy_rows(rows: list[Row]) -> list[TrainingEvent]:
    events: list[TrainingEvent] = []
    for raw in rows:
        row = {k.strip().lower(): v for k, v in raw.items()}
        exercise = _text(row.get("exercise_title"))
        start = parse_hevy_date(row.get("start_time"))
        if not exercise or start is None:
            logger.debug("Skipping Hevy row without exercise or date: %r", raw)
            continue

        end = parse_hevy_date(row.get("end_time"))
        events.append(TrainingEvent(
            exercise_title=exercise,
            parsed_start=start,
            title=_text(row.get("title")),
            start_time=_fmt_date(start),
            end_time=_fmt_date(end),
            parsed_end=end,
            description=_text(row.get("description")),
            superset_id=_text(row.get("superset_id")),
            exercise_notes=_text(row.get("exercise_notes")),
            set_index=max(0, int(parse_flexible_number(row.get("set_index"), 0.0))),
            set_type=normalize_set_type(row.get("set_type")),
            weight_kg=to_kg(parse_flexible_number(row.get("weight_kg"), 0.0), "kg"),
            reps=max(0.0, parse_flexible_number(row.get("reps"), 0.0)),
            distance_km=to_km(parse_flexible_number(row.get("distance_km"), 0.0), "km"),
            duration_seconds=parse_duration(row.get("duration_seconds")),
            rpe=_rpe_or_none(parse_flexible_number(row.get("rpe"))),
        ))
    return events


# =============================================================================
# SEMANTIC PATH
# =============================================================================


class _MappedRow:
    """Row accessor by semantic field; the first non-empty mapped column wins."""

    def __init__(self, row: Row, by_field: dict[str, list[FieldMapping]]) -> None:
        self._row = row
        self._by_field = by_field

    def has(self, field_name: str) -> bool:
        return field_name in self._by_field

    def get(self, field_name: str) -> tuple[str, FieldMapping | None]:
        mappings = self._by_field.get(field_name, [])
        for mapping in mappings:
            value = _text(self._row.get(mapping.header))
            if value:
                return value, mapping
        return "", mappings[0] if mappings else None


def _transform_row(
    mapped: _MappedRow,
    weight_unit: str,
    distance_unit: str,
) -> TrainingEvent | None:
    exercise, _ = mapped.get("exercise")
    if not exercise:
        return None
    start = parse_flexible_date(mapped.get("start_time")[0])
    if start is None:
        return None

    duration = parse_duration(mapped.get("duration")[0])
    end = parse_flexible_date(mapped.get("end_time")[0])
    if end is None and duration > 0:
        end = start + timedelta(seconds=duration)

    rpe: float | None = None
    rpe_raw, _ = mapped.get("rpe")
    rir_raw, _ = mapped.get("rir")
    if rpe_raw:
        rpe = _rpe_or_none(parse_flexible_number(rpe_raw))
    elif rir_raw:
        rir = parse_flexible_number(rir_raw)
        if math.isfinite(rir) and 0 <= rir <= 10:
            rpe = rir_to_rpe(rir)

    weight_raw, weight_mapping = mapped.get("weight")
    distance_raw, distance_mapping = mapped.get("distance")
    title = mapped.get("workout_title")[0] if mapped.has("workout_title") else "Workout"

    return TrainingEvent(
        exercise_title=exercise,
        parsed_start=start,
        title=title,
        start_time=_fmt_date(start),
        end_time=_fmt_date(end),
        parsed_end=end,
        description=mapped.get("workout_notes")[0],
        superset_id=mapped.get("superset_id")[0],
        exercise_notes=mapped.get("notes")[0],
        set_type=normalize_set_type(mapped.get("set_type")[0]),
        weight_kg=to_kg(
            parse_flexible_number(weight_raw, 0.0),
            mapped.get("weight_unit")[0] or None,
            weight_mapping.unit_hint if weight_mapping else None,
            weight_unit,
        ),
        reps=max(0.0, parse_flexible_number(mapped.get("reps")[0], 0.0)),
        distance_km=to_km(
            parse_flexible_number(distance_raw, 0.0),
            mapped.get("distance_unit")[0] or None,
            distance_mapping.unit_hint if distance_mapping else None,
            distance_unit,
        ),
        duration_seconds=duration,
        rpe=rpe,
    )


def _detect_and_check(headers: list[str], rows: list[Row]) -> list[FieldMapping]:
    mappings = detect_field_mappings(headers, rows[:SAMPLE_ROWS])
    fields = {m.field for m in mappings}

    if "exercise" not in fields:
        raise IngestionError(code="missing_exercise_column", message=MISSING_EXERCISE_MESSAGE, field="exercise")
    if "start_time" not in fields:
        raise IngestionError(code="missing_date_column", message=MISSING_DATE_MESSAGE, field="start_time")
    if "weight" not in fields:
        raise IngestionError(code="missing_weight_column", message=MISSING_WEIGHT_MESSAGE, field="weight")
    return mappings


# =============================================================================
# POST-PROCESSING
# =============================================================================


def assign_set_indices(events: list[TrainingEvent]) -> None:
    """Number sets 1..n per exercise within each session, in file order."""
    counters: dict[tuple[str, str], int] = {}
    for event in events:
        key = (event.session_key, event.exercise_title)
        counters[key] = counters.get(key, 0) + 1
        event.set_index = counters[key]


def infer_workout_titles(events: list[TrainingEvent]) -> None:
    """
    Name untitled workouts after their exercises, per calendar day.

    Up to three exercises are joined with " + "; more become
    "Workout (N exercises)".
    """
    by_day: dict[str, list[TrainingEvent]] = {}
    for event in events:
        if event.title and event.title != "Workout":
            continue
        key = event.day.isoformat() if event.day is not None else event.start_time
        by_day.setdefault(key, []).append(event)

    for day_events in by_day.values():
        exercises = list(dict.fromkeys(e.exercise_title for e in day_events))
        if len(exercises) <= TITLE_MAX_EXERCISES:
            title = " + ".join(exercises)
        else:
            title = f"Workout ({len(exercises)} exercises)"
        for event in day_events:
            event.title = title


def _resolve_names(events: list[TrainingEvent], resolver: ExerciseNameResolver | None) -> _Stats:
    stats = _Stats()
    if resolver is None:
        return stats
    resolved = resolver.resolve_events(events)
    stats.fuzzy = resolved.fuzzy
    stats.representative = resolved.representative
    stats.unmatched = resolved.unmatched
    return stats


def _sort_events(events: list[TrainingEvent]) -> None:
    """Newest session first, then by set number."""
    events.sort(key=lambda e: e.set_index)
    events.sort(key=lambda e: e.parsed_start or datetime.min, reverse=True)


# =============================================================================
# PUBLIC API
# =============================================================================


def parse_workout_csv(
    text: str,
    *,
    resolver: ExerciseNameResolver | None = None,
    weight_unit: str = "kg",
    distance_unit: str = "km",
) -> IngestionResult:
    """
    Parse workout CSV text into training events.

    Args:
        text: Raw CSV content
        resolver: Rewrites exercise names to catalog names when given
        weight_unit: Unit assumed for weights with no unit column or header hint
        distance_unit: Same for distances

    Returns:
        IngestionResult with events sorted newest first

    Raises:
        IngestionError: If the file has no data, is not a multi-column CSV,
            lacks an exercise, date or weight column, or its dates are
            mostly unparseable
    """
    try:
        headers, rows = read_csv_rows(text)
    except csv.Error as exc:
        raise IngestionError(code="unsupported_format", message=f"{UNSUPPORTED_FORMAT_MESSAGE} ({exc})") from exc
    if not headers or not rows:
        raise IngestionError(code="empty_file", message=EMPTY_FILE_MESSAGE)
    # Exercise, date and weight cannot share one column
    if len([h for h in headers if h]) < 2:
        raise IngestionError(code="unsupported_format", message=UNSUPPORTED_FORMAT_MESSAGE)

    source: SourceFormat
    mappings: list[FieldMapping] = []
    if is_strong_export(headers):
        source = "strong"
        date_header = next(h for h in headers if _strong_key(h) == "date")
        _check_date_localization([r.get(date_header, "") for r in rows], parse_strong_date)
        events = _parse_strong_rows(rows, weight_unit, distance_unit)
        field_mappings = {h: _strong_key(h) for h in headers}
        confidence = 1.0
    elif is_hevy_export(headers):
        source = "hevy"
        date_header = next(h for h in headers if h.strip().lower() == "start_time")
        _check_date_localization([r.get(date_header, "") for r in rows], parse_hevy_date)
        events = _parse_hevy_rows(rows)
        field_mappings = {h: h.strip().lower() for h in headers}
        confidence = 1.0
    else:
        source = "semantic"
        mappings = _detect_and_check(headers, rows)
        by_field: dict[str, list[FieldMapping]] = {}
        for m in mappings:
            by_field.setdefault(m.field, []).append(m)

        date_headers = [m.header for m in by_field["start_time"]]
        _check_date_localization(
            [next((r.get(h, "") for h in date_headers if _text(r.get(h))), "") for r in rows],
            parse_flexible_date,
        )

        events = []
        for row in rows:
            event = _transform_row(_MappedRow(row, by_field), weight_unit, distance_unit)
            if event is None:
                logger.debug("Skipping row without exercise or parseable date: %r", row)
                continue
            events.append(event)
        field_mappings = {m.header: m.field for m in mappings}
        confidence = sum(m.confidence for m in mappings) / len(mappings)

    logger.info(
        "Parsed %d of %d rows as %s export",
        len(events), len(rows), source,
        extra={"lift_source_format": source, "lift_row_count": len(rows), "lift_event_count": len(events)},
    )

    stats = _resolve_names(events, resolver)
    if source == "semantic":
        assign_set_indices(events)
    infer_workout_titles(events)
    _sort_events(events)

    warnings: list[str] = []
    if confidence < LOW_CONFIDENCE_WARNING:
        warnings.append(LOW_CONFIDENCE_MESSAGE)
        logger.warning("Low column detection confidence %.2f", confidence)

    meta = IngestionMeta(
        confidence=confidence,
        field_mappings=field_mappings,
        unmatched_exercises=sorted(stats.unmatched),
        fuzzy_matches=stats.fuzzy,
        representative_matches=stats.representative,
        row_count=len(rows),
        warnings=warnings,
        source_format=source,
    )
    return IngestionResult(events=events, meta=meta)


def parse_workout_file(path: Path, **kwargs) -> IngestionResult:
    """Read a CSV file (UTF-8, optional BOM) and parse it with ``parse_workout_csv``."""
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise IngestionError(code="unreadable_file", message=f"Cannot read {path}: {exc}") from exc
    return parse_workout_csv(text, **kwargs)
