"""
Set-to-set progression and fatigue analysis within one session.

For one exercise in one session the working sets are compared pairwise:

- same weight (within tolerance): classified by the rep change
- weight up or down: actual reps are compared with the reps the session's
  best estimated 1RM predicts at the new weight

Session-level helpers label the training goal from average reps and
recommend whether to change the load next time.
"""

from collections import defaultdict
from typing import Iterable, Sequence

from .config import (
    AMBITIOUS_BUFFER,
    DEFAULT_TARGET_REPS,
    DROP_THRESHOLD_MILD,
    DROP_THRESHOLD_MODERATE,
    FATIGUE_BUFFER,
    HYPERTROPHY_MAX_AVG_REPS,
    INCONSISTENT_REP_MARGIN,
    MIN_HYPERTROPHY_REPS,
    PROMOTE_THRESHOLD_REPS,
    SAME_WEIGHT_TOLERANCE_PCT,
    STRENGTH_MAX_AVG_REPS,
    TOP_WEIGHT_FRACTION,
)
from .engine.config_loader import get_threshold
from .metrics import epley_1rm, percent_change, predict_reps, round_half_up
from .models import (
    AnalysisResult,
    AnalysisStatus,
    SessionAnalysis,
    StructuredExplanation,
    TrainingEvent,
    TrendDirection,
    WeightRecommendation,
)
from .normalizers import is_warmup

GOAL_TOOLTIPS = {
    "Strength": "Average reps are low (≤5). This zone prioritizes neural adaptation and max strength.",
    "Hypertrophy": "Average reps are moderate (6-15). This is the main zone for muscle growth (hypertrophy).",
    "Endurance": "Average reps are high (>15). This zone prioritizes metabolic conditioning and muscular endurance.",
}


def _num(value: float) -> str:
    """Format a number without a trailing ".0"."""
    rounded = round(value, 1)
    return str(int(rounded)) if rounded == int(rounded) else str(rounded)


def _signed_pct(value: float) -> str:
    if value == 0:
        return "0%"
    return f"{'+' if value > 0 else ''}{_num(value)}%"


def _result(
    transition: str,
    status: AnalysisStatus,
    weight_change_pct: float,
    vol_change_pct: float,
    actual_reps: float,
    expected_reps: str,
    short_message: str,
    tooltip: str,
    trend_value: str,
    direction: TrendDirection,
    why: list[str],
    improve: list[str] | None = None,
) -> AnalysisResult:
    return AnalysisResult(
        transition=transition,
        status=status,
        metrics={
            "weight_change_pct": _signed_pct(weight_change_pct),
            "vol_drop_pct": f"{_num(vol_change_pct)}%",
            "actual_reps": actual_reps,
            "expected_reps": expected_reps,
        },
        short_message=short_message,
        tooltip=tooltip,
        explanation=StructuredExplanation(trend_value, direction, why, improve or []),
    )


def _same_weight(transition: str, prev_reps: float, curr_reps: float, set_number: int) -> AnalysisResult:
    rep_diff = curr_reps - prev_reps
    rep_pct = percent_change(prev_reps, curr_reps)
    expected = _num(prev_reps)
    after_first = set_number == 2

    if rep_diff > 0:
        return _result(
            transition, "success", 0, rep_pct, curr_reps, expected,
            "Second Wind", f"+{_num(rep_diff)} reps vs last",
            f"+{_num(rep_diff)} reps", "up",
            ["Had reserves in last set", "Or took longer rest this time"],
        )

    if rep_diff == 0:
        return _result(
            transition, "success", 0, 0, curr_reps, expected,
            "Consistent", f"Maintained {_num(curr_reps)} reps",
            "= reps", "same",
            ["Good pacing and recovery", "Rest time is working well"],
        )

    drop = abs(rep_diff)
    drop_pct = abs(rep_pct)
    tooltip = f"-{_num(drop)} reps ({round(drop_pct)}%)"

    if drop_pct <= get_threshold("progression", "DROP_THRESHOLD_MILD", DROP_THRESHOLD_MILD):
        return _result(
            transition, "info", 0, rep_pct, curr_reps, expected,
            "Normal Fatigue", tooltip,
            f"-{_num(drop)} reps", "down",
            ["Normal fatigue between sets", "Muscles recovering as expected"],
        )

    if drop_pct <= get_threshold("progression", "DROP_THRESHOLD_MODERATE", DROP_THRESHOLD_MODERATE):
        why = (
            ["First set pushed close to failure"]
            if after_first
            else ["Last set was near failure", "Or rest was shorter than usual"]
        )
        return _result(
            transition, "warning", 0, rep_pct, curr_reps, expected,
            "High Fatigue", tooltip,
            f"-{_num(drop)} reps", "down", why,
            ["Normal if training to failure", "For more volume: rest 2-3 min"],
        )

    why = (
        ["First set was to failure", "Limits performance on remaining sets"]
        if after_first
        else ["Accumulated fatigue from earlier sets", "Or rest time too short"]
    )
    return _result(
        transition, "danger", 0, rep_pct, curr_reps, expected,
        "Significant Drop", tooltip,
        f"-{_num(drop)} reps", "down", why,
        ["If intentional: good intensity", "For more volume: leave 1-2 RIR"],
    )


def _weight_increase(
    transition: str,
    weight_pct: float,
    vol_pct: float,
    curr_reps: float,
    expected: float,
) -> AnalysisResult:
    pct = round(weight_pct)
    label = _num(expected)
    tooltip = f"+{pct}% weight, {_num(curr_reps)} reps"
    trend = f"+{pct}% weight"
    fatigue_buffer = get_threshold("progression", "FATIGUE_BUFFER", FATIGUE_BUFFER)
    ambitious_buffer = get_threshold("progression", "AMBITIOUS_BUFFER", AMBITIOUS_BUFFER)

    if curr_reps > expected:
        return _result(
            transition, "success", weight_pct, vol_pct, curr_reps, label,
            "Strong Overload", tooltip, trend, "up",
            [f"Got {_num(curr_reps)} reps (expected {label})", "Strength gains showing"],
        )

    if curr_reps >= expected - fatigue_buffer:
        return _result(
            transition, "success", weight_pct, vol_pct, curr_reps, label,
            "Good Overload", tooltip, trend, "up",
            [f"Hit {_num(curr_reps)} reps as expected", "Progress achieved"],
        )

    if curr_reps >= expected - ambitious_buffer:
        return _result(
            transition, "warning", weight_pct, vol_pct, curr_reps, label,
            "Slightly Ambitious", tooltip, trend, "up",
            [f"Got {_num(curr_reps)} reps (expected {label})", "Weight jump may be slightly aggressive"],
            ["Keep trying this weight", "Strength adapts over time"],
        )

    return _result(
        transition, "danger", weight_pct, vol_pct, curr_reps, label,
        "Premature Jump", tooltip, trend, "up",
        [f"Only {_num(curr_reps)} reps (expected {label})", "Weight increase too aggressive"],
        ["Build more reps at the last weight first", "Try smaller 2.5-5% jumps"],
    )


def _weight_decrease(
    transition: str,
    weight_pct: float,
    vol_pct: float,
    curr_reps: float,
    expected: float,
) -> AnalysisResult:
    pct = round(weight_pct)
    label = _num(expected)
    tooltip = f"{pct}% weight, {_num(curr_reps)} reps"
    trend = f"{pct}% weight"

    if curr_reps >= expected:
        return _result(
            transition, "success", weight_pct, vol_pct, curr_reps, label,
            "Effective Backoff", tooltip, trend, "down",
            ["Smart backoff for volume", "Reduced neural fatigue while maintaining work"],
        )

    if curr_reps >= expected - get_threshold("progression", "AMBITIOUS_BUFFER", AMBITIOUS_BUFFER):
        return _result(
            transition, "info", weight_pct, vol_pct, curr_reps, label,
            "Fatigued Backoff", tooltip, trend, "down",
            [f"Got {_num(curr_reps)} reps (expected {label})", "Accumulated fatigue from earlier sets"],
        )

    return _result(
        transition, "warning", weight_pct, vol_pct, curr_reps, label,
        "Heavy Fatigue", tooltip, trend, "down",
        [f"Only {_num(curr_reps)} reps (expected {label})", "High accumulated fatigue"],
        ["Good if training to failure intentionally", "Otherwise: end exercise or rest longer"],
    )


def working_sets(sets: Iterable[TrainingEvent]) -> list[TrainingEvent]:
    """Drop warmup sets, keeping order."""
    return [s for s in sets if not is_warmup(s.set_type)]


def analyze_set_progression(sets: Sequence[TrainingEvent]) -> list[AnalysisResult]:
    """
    Classify each consecutive pair of working sets.

    Args:
        sets: Sets of one exercise in one session, in performed order

    Returns:
        One result per transition; empty with fewer than two working sets
    """
    work = working_sets(sets)
    if len(work) < 2:
        return []

    best_1rm = max(epley_1rm(s.weight_kg, s.reps) for s in work)
    tolerance = get_threshold("progression", "SAME_WEIGHT_TOLERANCE_PCT", SAME_WEIGHT_TOLERANCE_PCT)

    results: list[AnalysisResult] = []
    for i in range(1, len(work)):
        prev, curr = work[i - 1], work[i]
        transition = f"Set {i} → {i + 1}"
        weight_pct = percent_change(prev.weight_kg, curr.weight_kg)

        if abs(weight_pct) < tolerance:
            results.append(_same_weight(transition, prev.reps, curr.reps, i + 1))
            continue

        expected = predict_reps(best_1rm, curr.weight_kg)
        vol_pct = percent_change(prev.weight_kg * prev.reps, curr.weight_kg * curr.reps)
        if weight_pct > 0:
            results.append(_weight_increase(transition, weight_pct, vol_pct, curr.reps, expected))
        else:
            results.append(_weight_decrease(transition, weight_pct, vol_pct, curr.reps, expected))

    return results


def analyze_session(sets: Sequence[TrainingEvent]) -> SessionAnalysis:
    """Label the session's training goal from average working-set reps."""
    work = working_sets(sets)
    if not work:
        return SessionAnalysis(goal_label="N/A", avg_reps=0, set_count=0)

    avg_reps = round_half_up(sum(s.reps for s in work) / len(work))
    if avg_reps <= get_threshold("session", "STRENGTH_MAX_AVG_REPS", STRENGTH_MAX_AVG_REPS):
        label = "Strength"
    elif avg_reps <= get_threshold("session", "HYPERTROPHY_MAX_AVG_REPS", HYPERTROPHY_MAX_AVG_REPS):
        label = "Hypertrophy"
    else:
        label = "Endurance"
    return SessionAnalysis(goal_label=label, avg_reps=avg_reps, set_count=len(work), tooltip=GOAL_TOOLTIPS[label])


def analyze_weight_promotion(
    sets: Sequence[TrainingEvent],
    target_reps: int | None = None,
) -> WeightRecommendation | None:
    """
    Recommend a load change for next session, or None to keep it.

    Only sets at the top weight (within 5%) are considered.

    - promote when every top set reaches ``target_reps``
    - demote when even the best top set stays under the hypertrophy floor
    - demote as "Inconsistent" when top-set reps range from well under the
      target to at or above it
    """
    work = working_sets(sets)
    if not work:
        return None
    if target_reps is None:
        target_reps = get_threshold("promotion", "DEFAULT_TARGET_REPS", DEFAULT_TARGET_REPS)

    max_weight = max(s.weight_kg for s in work)
    top_reps = [s.reps for s in work if s.weight_kg >= max_weight * TOP_WEIGHT_FRACTION]
    top_min = min(top_reps)
    top_max = max(top_reps)

    if top_min >= target_reps:
        promote_at = get_threshold("promotion", "PROMOTE_THRESHOLD_REPS", PROMOTE_THRESHOLD_REPS)
        increase = "5-10%" if top_min >= promote_at else "2.5-5%"
        return WeightRecommendation(
            kind="promote",
            message="Increase Weight",
            tooltip=f"All sets hit {_num(top_min)}+ reps. Increase by {increase} next session.",
        )

    if top_max < get_threshold("promotion", "MIN_HYPERTROPHY_REPS", MIN_HYPERTROPHY_REPS):
        return WeightRecommendation(
            kind="demote",
            message="Decrease Weight",
            tooltip=f"Max {_num(top_max)} reps. Reduce by 5-10% to hit 6-12 rep range.",
        )

    if len(top_reps) >= 2 and top_min < target_reps - INCONSISTENT_REP_MARGIN and top_max >= target_reps:
        return WeightRecommendation(
            kind="demote",
            message="Inconsistent",
            tooltip=f"Reps varied {_num(top_min)}-{_num(top_max)}. Lower weight or rest longer for consistency.",
        )

    return None


def analyze_events_by_session(events: Iterable[TrainingEvent]) -> dict[tuple[str, str], list[TrainingEvent]]:
    """
    Group events by (session key, exercise) in set order.

    Session order follows first appearance in ``events``.
    """
    grouped: dict[tuple[str, str], list[TrainingEvent]] = defaultdict(list)
    for event in events:
        grouped[(event.session_key, event.exercise_title)].append(event)
    for sets in grouped.values():
        sets.sort(key=lambda s: s.set_index)
    return dict(grouped)
