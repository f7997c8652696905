"""
Data models for lift-insights.

Dataclasses for normalized training events, catalog entries, field
mappings, volume snapshots and analysis results. Analysis results are
derived on demand and never persisted.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from .config import SET_TYPES

AnalysisStatus = Literal["success", "info", "warning", "danger"]
TrendDirection = Literal["up", "down", "same"]
TrendStatus = Literal["overload", "stagnant", "regression", "neutral", "new", "fake_pr"]
Confidence = Literal["low", "medium", "high"]
GoalLabel = Literal["Strength", "Hypertrophy", "Endurance", "N/A"]
ResolutionMethod = Literal[
    "exact",
    "case_insensitive",
    "alias",
    "normalized_exact",
    "normalized_case_insensitive",
    "fuzzy",
    "representative",
    "none",
]
SourceFormat = Literal["strong", "hevy", "semantic"]


@dataclass
class TrainingEvent:
    """
    One logged set.

    Weight and distance are always in kg and km. Only ``exercise_title``
    (rewritten by the resolver) and ``is_pr`` change after ingestion.
    """

    exercise_title: str
    parsed_start: datetime | None
    title: str = "Workout"
    start_time: str = ""
    end_time: str = ""
    parsed_end: datetime | None = None
    description: str = ""
    superset_id: str = ""
    exercise_notes: str = ""
    set_index: int = 0
    set_type: str = "normal"
    weight_kg: float = 0.0
    reps: float = 0.0
    distance_km: float = 0.0
    duration_seconds: int = 0
    rpe: float | None = None
    is_pr: bool = False

    def __post_init__(self) -> None:
        """Validate event data."""
        if self.weight_kg < 0:
            raise ValueError("weight_kg must be non-negative")
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.distance_km < 0:
            raise ValueError("distance_km must be non-negative")
        if self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
        if self.rpe is not None and not 1 <= self.rpe <= 10:
            raise ValueError(f"rpe must be within 1..10, got {self.rpe}")
        if self.set_type not in SET_TYPES:
            raise ValueError(f"Invalid set_type: {self.set_type}")

    @property
    def day(self) -> date | None:
        """Calendar day of the session start, if the start parsed."""
        return self.parsed_start.date() if self.parsed_start is not None else None

    @property
    def session_key(self) -> str:
        """Identity of the session this set belongs to."""
        return f"{self.title}|{self.start_time}"


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == "none":
        return None
    return text


@dataclass(frozen=True)
class ExerciseCatalogEntry:
    """
    Canonical exercise with muscle metadata.

    ``secondary_muscle`` is a comma list; blank or the literal "None"
    means no secondary muscles.
    """

    name: str
    equipment: str | None = None
    primary_muscle: str | None = None
    secondary_muscle: str | None = None
    media: str | None = None
    source: str | None = None
    thumbnail: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("catalog entry name must be non-empty")
        for attr in ("equipment", "primary_muscle", "secondary_muscle", "media", "source", "thumbnail"):
            object.__setattr__(self, attr, _clean_optional(getattr(self, attr)))

    def secondary_muscles(self) -> list[str]:
        """Return the secondary muscles as a list, dropping "None" tokens."""
        if not self.secondary_muscle:
            return []
        parts = [p.strip() for p in self.secondary_muscle.split(",")]
        return [p for p in parts if p and p.lower() != "none"]


@dataclass
class FieldMapping:
    """Association between one CSV header and one semantic field."""

    header: str
    field: str
    confidence: float
    unit_hint: str | None = None


@dataclass
class IngestionMeta:
    """Summary of an ingestion run."""

    confidence: float
    field_mappings: dict[str, str] = field(default_factory=dict)
    unmatched_exercises: list[str] = field(default_factory=list)
    fuzzy_matches: int = 0
    representative_matches: int = 0
    row_count: int = 0
    warnings: list[str] = field(default_factory=list)
    source_format: SourceFormat = "semantic"


@dataclass
class IngestionResult:
    """Normalized events plus ingestion metadata."""

    events: list[TrainingEvent]
    meta: IngestionMeta


@dataclass
class ResolutionResult:
    """Outcome of resolving one raw exercise name."""

    name: str
    method: ResolutionMethod

    @property
    def matched(self) -> bool:
        return self.method != "none"


@dataclass
class DailyMuscleVolume:
    """Set-equivalents per muscle key for one training day."""

    day: date
    muscles: dict[str, float]

    @property
    def date_key(self) -> str:
        return self.day.isoformat()


@dataclass
class RollingWeeklyVolume:
    """Trailing 7-day set-equivalents ending on a training day."""

    day: date
    muscles: dict[str, float]
    total_sets: float
    is_in_break: bool = False

    @property
    def date_key(self) -> str:
        return self.day.isoformat()


@dataclass
class PeriodAverageVolume:
    """Average weekly sets per muscle over a calendar month or year."""

    period_key: str
    period_label: str
    start_date: date
    end_date: date
    avg_weekly_sets: dict[str, float]
    total_avg_sets: float
    training_days_count: int
    weeks_included: int


@dataclass
class TimeSeriesEntry:
    """One point of a volume series: timestamp, label and a value per key."""

    timestamp: int  # milliseconds since the epoch
    label: str
    values: dict[str, float] = field(default_factory=dict)


@dataclass
class TimeSeries:
    data: list[TimeSeriesEntry]
    keys: list[str]


@dataclass
class StructuredExplanation:
    """Trend value plus "why" lines and optional "improve" tips."""

    trend_value: str
    direction: TrendDirection
    why: list[str] = field(default_factory=list)
    improve: list[str] = field(default_factory=list)


@dataclass
class AnalysisResult:
    """Classification of one set-to-set transition."""

    transition: str
    status: AnalysisStatus
    metrics: dict[str, str | float]
    short_message: str
    tooltip: str
    explanation: StructuredExplanation | None = None


@dataclass
class SessionAnalysis:
    """Training-goal label for one exercise within one session."""

    goal_label: GoalLabel
    avg_reps: int
    set_count: int
    tooltip: str = ""


@dataclass
class WeightRecommendation:
    kind: Literal["promote", "demote"]
    message: str
    tooltip: str


@dataclass
class ExerciseSessionSummary:
    """One session of one exercise, represented by its best set by 1RM."""

    day: datetime
    weight: float = 0.0
    reps: float = 0.0
    one_rep_max: float = 0.0
    volume: float = 0.0
    sets: int = 0
    total_reps: float = 0.0
    max_reps: float = 0.0


@dataclass
class Plateau:
    weight: float
    min_reps: float
    max_reps: float


@dataclass
class ExerciseTrend:
    """Multi-session progression state for one exercise."""

    status: TrendStatus
    is_bodyweight_like: bool
    confidence: Confidence = "low"
    diff_pct: float | None = None
    evidence: list[str] = field(default_factory=list)
    plateau: Plateau | None = None

    def __post_init__(self) -> None:
        if self.diff_pct is not None and not math.isfinite(self.diff_pct):
            raise ValueError("diff_pct must be finite")
