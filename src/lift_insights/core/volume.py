"""
Rolling muscle volume.

Volume is counted in set-equivalents: each working set credits its primary
muscle 1.0 and each secondary muscle 0.5. The weekly figure for a training
day is the sum over that day and the six days before it, so it does not
depend on calendar week boundaries. A training day that follows a gap of
more than seven days is flagged as a break day; break days are kept in the
rolling sequence but left out of averages and charts.
"""

import logging
import math
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Literal, Sequence

from .config import BREAK_THRESHOLD_DAYS, ROLLING_WINDOW_DAYS, VOLUME_EPSILON
from .models import (
    DailyMuscleVolume,
    ExerciseCatalogEntry,
    PeriodAverageVolume,
    RollingWeeklyVolume,
    TimeSeries,
    TimeSeriesEntry,
    TrainingEvent,
)
from .muscles import muscle_contributions, normalize_muscle_group, region_ids_for_muscle
from .normalizers import is_warmup
from .resolver import create_resolver

logger = logging.getLogger(__name__)

VolumePeriod = Literal["daily", "weekly", "monthly", "yearly"]
AveragePeriod = Literal["monthly", "yearly"]

Contributions = list[tuple[str, float]]


def _day_timestamp(day: date) -> int:
    """Midnight UTC of ``day`` in epoch milliseconds."""
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp() * 1000)


def _day_label(day: date) -> str:
    return day.strftime("%d %b")


def _period_key(day: date, period: AveragePeriod) -> str:
    return day.strftime("%Y-%m") if period == "monthly" else day.strftime("%Y")


def _period_label(day: date, period: AveragePeriod) -> str:
    return day.strftime("%b %Y") if period == "monthly" else day.strftime("%Y")


def identify_break_days(daily: Sequence[DailyMuscleVolume]) -> set[date]:
    """
    Days that follow a gap of more than seven days.

    Args:
        daily: Daily volumes sorted ascending by day

    Returns:
        The first training day after each long gap
    """
    breaks: set[date] = set()
    for prev, curr in zip(daily, daily[1:]):
        if (curr.day - prev.day).days > BREAK_THRESHOLD_DAYS:
            breaks.add(curr.day)
    return breaks


def rolling_weekly_volumes(
    daily: Sequence[DailyMuscleVolume],
    breaks: set[date] | None = None,
) -> list[RollingWeeklyVolume]:
    """
    Trailing 7-day sums for every training day.

    A single pass with an accumulator: add the current day, then evict days
    older than the window start. Muscles whose running total drops to zero
    are removed.
    """
    breaks = breaks or set()
    snapshots: list[RollingWeeklyVolume] = []
    accum: dict[str, float] = {}
    total = 0.0
    start = 0

    for i, current in enumerate(daily):
        for muscle, sets in current.muscles.items():
            accum[muscle] = accum.get(muscle, 0.0) + sets
            total += sets

        window_start = current.day - timedelta(days=ROLLING_WINDOW_DAYS - 1)
        while start <= i and daily[start].day < window_start:
            for muscle, sets in daily[start].muscles.items():
                remaining = accum.get(muscle, 0.0) - sets
                if remaining <= VOLUME_EPSILON:
                    accum.pop(muscle, None)
                else:
                    accum[muscle] = remaining
                total -= sets
            start += 1

        snapshots.append(RollingWeeklyVolume(
            day=current.day,
            muscles=dict(accum),
            total_sets=round(total, 1),
            is_in_break=current.day in breaks,
        ))

    return snapshots


def period_average_volumes(
    rolling: Sequence[RollingWeeklyVolume],
    period: AveragePeriod,
) -> list[PeriodAverageVolume]:
    """
    Average weekly sets per muscle for each calendar month or year.

    Break days are excluded. A muscle absent from a snapshot counts as zero
    for that snapshot. Periods are returned in chronological order.
    """
    groups: dict[str, list[RollingWeeklyVolume]] = defaultdict(list)
    for snapshot in rolling:
        if snapshot.is_in_break:
            continue
        groups[_period_key(snapshot.day, period)].append(snapshot)

    averages: list[PeriodAverageVolume] = []
    for key, snapshots in groups.items():
        n = len(snapshots)
        muscles: list[str] = []
        for s in snapshots:
            muscles.extend(m for m in s.muscles if m not in muscles)

        avg_sets: dict[str, float] = {}
        total_avg = 0.0
        for muscle in muscles:
            avg = sum(s.muscles.get(muscle, 0.0) for s in snapshots) / n
            avg_sets[muscle] = round(avg, 1)
            total_avg += avg

        days = [s.day for s in snapshots]
        averages.append(PeriodAverageVolume(
            period_key=key,
            period_label=_period_label(days[0], period),
            start_date=min(days),
            end_date=max(days),
            avg_weekly_sets=avg_sets,
            total_avg_sets=round(total_avg, 1),
            training_days_count=n,
            weeks_included=math.ceil(n / 7),
        ))

    averages.sort(key=lambda a: a.period_key)
    return averages


def _series(points: Iterable[tuple[int, str, dict[str, float]]], key_sources: Iterable[dict[str, float]]) -> TimeSeries:
    keys: list[str] = []
    for source in key_sources:
        keys.extend(k for k in source if k not in keys)
    data = [
        TimeSeriesEntry(timestamp=ts, label=label, values={k: values.get(k, 0.0) for k in keys})
        for ts, label, values in points
    ]
    return TimeSeries(data=data, keys=keys)


class VolumeCalculator:
    """
    Computes muscle volume from training events against an exercise catalog.

    Events are matched to catalog entries by exact name, then case-insensitive
    name, then through a resolver built over the catalog names.
    """

    def __init__(self, catalog: Iterable[ExerciseCatalogEntry]) -> None:
        self._entries: dict[str, ExerciseCatalogEntry] = {}
        self._lower: dict[str, ExerciseCatalogEntry] = {}
        for entry in catalog:
            self._entries.setdefault(entry.name, entry)
            self._lower.setdefault(entry.name.lower(), entry)
        self._resolver = create_resolver(self._entries.keys())

    def lookup(self, name: str) -> ExerciseCatalogEntry | None:
        """Catalog entry for an exercise name, or None."""
        if not name:
            return None
        entry = self._entries.get(name) or self._lower.get(name.lower())
        if entry is not None:
            return entry
        result = self._resolver.resolve(name)
        if not result.matched:
            return None
        return self._entries.get(result.name) or self._lower.get(result.name.lower())

    def _group_contributions(self, use_groups: bool) -> Callable[[TrainingEvent], Contributions]:
        def contributions(event: TrainingEvent) -> Contributions:
            entry = self.lookup(event.exercise_title)
            return muscle_contributions(entry, use_groups) if entry is not None else []
        return contributions

    def _region_contributions(self, event: TrainingEvent) -> Contributions:
        entry = self.lookup(event.exercise_title)
        if entry is None:
            return []
        full_body = normalize_muscle_group(entry.primary_muscle) == "Full Body"
        out: Contributions = []
        for muscle, sets in muscle_contributions(entry, use_groups=full_body):
            out.extend((region, sets) for region in region_ids_for_muscle(muscle))
        return out

    @staticmethod
    def _daily(
        events: Iterable[TrainingEvent],
        contributions: Callable[[TrainingEvent], Contributions],
    ) -> list[DailyMuscleVolume]:
        by_day: dict[date, dict[str, float]] = {}
        for event in events:
            day = event.day
            if day is None or is_warmup(event.set_type):
                continue
            parts = contributions(event)
            if not parts:
                continue
            muscles = by_day.setdefault(day, {})
            for key, sets in parts:
                muscles[key] = muscles.get(key, 0.0) + sets
        return [DailyMuscleVolume(day=d, muscles=by_day[d]) for d in sorted(by_day)]

    def daily_volumes(self, events: Iterable[TrainingEvent], use_groups: bool = True) -> list[DailyMuscleVolume]:
        """Per-day set-equivalents keyed by muscle group (or catalog muscle), ascending."""
        return self._daily(events, self._group_contributions(use_groups))

    def daily_region_volumes(self, events: Iterable[TrainingEvent]) -> list[DailyMuscleVolume]:
        """Per-day set-equivalents keyed by body-map region id, ascending."""
        return self._daily(events, self._region_contributions)

    def _time_series(self, daily: list[DailyMuscleVolume], period: VolumePeriod) -> TimeSeries:
        if period not in ("daily", "weekly", "monthly", "yearly"):
            raise ValueError(f"Unknown period: {period}")

        breaks = identify_break_days(daily)

        if period == "daily":
            kept = [d for d in daily if d.day not in breaks]
            return _series(
                ((_day_timestamp(d.day), _day_label(d.day), d.muscles) for d in kept),
                (d.muscles for d in kept),
            )

        rolling = rolling_weekly_volumes(daily, breaks)

        if period == "weekly":
            kept_rolling = [r for r in rolling if not r.is_in_break]
            return _series(
                ((_day_timestamp(r.day), _day_label(r.day), r.muscles) for r in kept_rolling),
                (r.muscles for r in rolling),
            )

        averages = period_average_volumes(rolling, period)
        return _series(
            ((_day_timestamp(a.start_date), a.period_label, a.avg_weekly_sets) for a in averages),
            (a.avg_weekly_sets for a in averages),
        )

    def time_series(
        self,
        events: Iterable[TrainingEvent],
        period: VolumePeriod = "weekly",
        use_groups: bool = True,
    ) -> TimeSeries:
        """
        Volume series for charting.

        Args:
            events: Training events
            period: "daily" (raw per-day volume), "weekly" (rolling 7-day),
                "monthly" or "yearly" (average weekly sets)
            use_groups: Key by muscle group rather than catalog muscle

        Returns:
            Points in chronological order; every point carries every key
        """
        daily = self.daily_volumes(events, use_groups)
        logger.debug("Computing %s volume series over %d training days", period, len(daily))
        return self._time_series(daily, period)

    def region_time_series(self, events: Iterable[TrainingEvent], period: VolumePeriod = "weekly") -> TimeSeries:
        """Volume series keyed by body-map region id."""
        return self._time_series(self.daily_region_volumes(events), period)

    def latest_rolling_volume(
        self,
        events: Iterable[TrainingEvent],
        use_groups: bool = True,
    ) -> RollingWeeklyVolume | None:
        """Most recent non-break snapshot; the last snapshot if all are breaks."""
        daily = self.daily_volumes(events, use_groups)
        if not daily:
            return None
        rolling = rolling_weekly_volumes(daily, identify_break_days(daily))
        for snapshot in reversed(rolling):
            if not snapshot.is_in_break:
                return snapshot
        return rolling[-1]

    def latest_region_volume(self, events: Iterable[TrainingEvent]) -> RollingWeeklyVolume | None:
        """Same as ``latest_rolling_volume`` keyed by body-map region id."""
        daily = self.daily_region_volumes(events)
        if not daily:
            return None
        rolling = rolling_weekly_volumes(daily, identify_break_days(daily))
        for snapshot in reversed(rolling):
            if not snapshot.is_in_break:
                return snapshot
        return rolling[-1]
