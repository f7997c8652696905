"""
Multi-session exercise trend.

Each session of an exercise is reduced to its best set by estimated 1RM.
The most recent sessions are then classified, in priority order, as:

    new        -> too little history or no usable signal
    stagnant   -> top weight and reps flat across the recent window
    overload   -> windowed average metric up
    regression -> windowed average metric down
    fake_pr    -> a one-off spike that did not hold
    neutral    -> none of the above

Bodyweight-like exercises (most recent sessions at ~0 kg) track max reps
instead of 1RM.
"""

import math
import re
from collections import defaultdict
from datetime import datetime
from typing import Iterable

from .config import (
    BODYWEIGHT_SESSION_SHARE,
    FAKE_PR_FOLLOWUP_REGRESSION,
    FAKE_PR_MIN_SPIKE,
    FAKE_PR_POST_PR_DROP_THRESHOLD,
    FAKE_PR_SPIKE_THRESHOLD,
    HIGH_CONFIDENCE_SESSIONS,
    LONG_WINDOW_SESSIONS,
    MAX_EVIDENCE_LINES,
    MEDIUM_CONFIDENCE_SESSIONS,
    MIN_SESSIONS_FOR_TREND,
    MIN_SIGNAL_REPS,
    RECENT_SESSIONS,
    REP_STATIC_EPSILON,
    TREND_MIN_ABS_1RM_KG,
    TREND_MIN_ABS_REPS,
    TREND_PCT_THRESHOLD,
    WEIGHT_STATIC_EPSILON_KG,
    ZERO_WEIGHT_KG,
)
from .engine.config_loader import get_threshold
from .metrics import epley_1rm, mean
from .models import Confidence, ExerciseSessionSummary, ExerciseTrend, Plateau, TrainingEvent
from .normalizers import is_warmup

_DIGIT_RE = re.compile(r"\d")


def _t(key: str, default):
    return get_threshold("trend", key, default)


def _evidence(lines: Iterable[str | None]) -> list[str]:
    """Keep at most three non-empty lines, then only those carrying a number."""
    kept = [line for line in lines if line][:MAX_EVIDENCE_LINES]
    return [line for line in kept if _DIGIT_RE.search(line)]


def _signed_pct(pct: float) -> str:
    if not math.isfinite(pct):
        return "0.0%"
    return f"{'+' if pct > 0 else ''}{pct:.1f}%"


def _confidence(history_len: int, window_size: int) -> Confidence:
    if history_len < _t("MIN_SESSIONS_FOR_TREND", MIN_SESSIONS_FOR_TREND):
        return "low"
    if history_len >= HIGH_CONFIDENCE_SESSIONS and window_size >= LONG_WINDOW_SESSIONS:
        return "high"
    if history_len >= MEDIUM_CONFIDENCE_SESSIONS:
        return "medium"
    return "low"


def summarize_exercise_history(events: Iterable[TrainingEvent]) -> list[ExerciseSessionSummary]:
    """
    One summary per session, newest first.

    Sessions are keyed by start timestamp. The session's weight and reps
    come from its best set by estimated 1RM (later sets win ties).
    Warmups and events without a start are ignored.
    """
    by_session: dict[datetime, ExerciseSessionSummary] = {}

    for event in events:
        if event.parsed_start is None or is_warmup(event.set_type):
            continue
        entry = by_session.get(event.parsed_start)
        if entry is None:
            entry = ExerciseSessionSummary(day=event.parsed_start)
            by_session[event.parsed_start] = entry

        one_rm = epley_1rm(event.weight_kg, event.reps)
        entry.sets += 1
        entry.volume += event.weight_kg * event.reps
        entry.total_reps += event.reps
        entry.max_reps = max(entry.max_reps, event.reps)
        if one_rm >= entry.one_rep_max:
            entry.one_rep_max = one_rm
            entry.weight = event.weight_kg
            entry.reps = event.reps

    return sorted(by_session.values(), key=lambda e: e.day, reverse=True)


def analyze_exercise_trend(events: Iterable[TrainingEvent]) -> ExerciseTrend:
    """
    Classify the recent progression of one exercise.

    Args:
        events: All logged sets of a single exercise, any order

    Returns:
        ExerciseTrend; never raises on sparse data
    """
    history = summarize_exercise_history(events)
    if not history:
        return ExerciseTrend(status="new", is_bodyweight_like=False)

    min_sessions = _t("MIN_SESSIONS_FOR_TREND", MIN_SESSIONS_FOR_TREND)
    recent = history[:RECENT_SESSIONS]
    weights = [h.weight for h in recent]
    zero_weight_sessions = sum(1 for w in weights if w <= ZERO_WEIGHT_KG)
    bodyweight_like = zero_weight_sessions >= math.ceil(len(recent) * BODYWEIGHT_SESSION_SHARE)

    if bodyweight_like:
        has_signal = max(h.max_reps for h in recent) >= MIN_SIGNAL_REPS
    else:
        has_signal = max(weights) > ZERO_WEIGHT_KG

    if not has_signal:
        note = (
            "Most recent sessions look bodyweight-like (weight ≈ 0)."
            if bodyweight_like
            else "Most recent sessions have near-zero load."
        )
        return ExerciseTrend(status="new", is_bodyweight_like=bodyweight_like, evidence=_evidence([note]))

    if len(history) < min_sessions:
        plural = "" if len(history) == 1 else "s"
        return ExerciseTrend(
            status="new",
            is_bodyweight_like=bodyweight_like,
            evidence=_evidence([f"Only {len(history)} session{plural} logged (need {min_sessions}+)."]),
        )

    # Flat top weight and reps across the recent window
    rep_metric = [h.max_reps if bodyweight_like else h.reps for h in recent]
    weight_eps = _t("WEIGHT_STATIC_EPSILON_KG", WEIGHT_STATIC_EPSILON_KG)
    rep_eps = _t("REP_STATIC_EPSILON", REP_STATIC_EPSILON)
    weight_static = all(abs(w - weights[0]) < weight_eps for w in weights)
    rep_static = max(rep_metric) - min(rep_metric) <= rep_eps

    if weight_static and rep_static:
        if bodyweight_like:
            note = f"Top reps stayed within ~{max(0.0, max(rep_metric) - min(rep_metric)):g} rep(s)."
        else:
            note = f"Top weight stayed within ~{weight_eps:g}kg and reps within ~{rep_eps:g} rep(s)."
        return ExerciseTrend(
            status="stagnant",
            is_bodyweight_like=bodyweight_like,
            confidence=_confidence(len(history), RECENT_SESSIONS),
            evidence=_evidence([note]),
            plateau=Plateau(weight=weights[0], min_reps=min(rep_metric), max_reps=max(rep_metric)),
        )

    # Recent half of the window against the older half
    window_size = LONG_WINDOW_SESSIONS if len(history) >= LONG_WINDOW_SESSIONS else RECENT_SESSIONS
    window = history[:window_size]
    metric = [h.max_reps if bodyweight_like else h.one_rep_max for h in window]
    half = window_size // 2
    current = mean(metric[:half])
    previous = mean(metric[half:])

    if current <= 0 or previous <= 0:
        return ExerciseTrend(status="new", is_bodyweight_like=bodyweight_like)

    diff_abs = current - previous
    diff_pct = diff_abs / previous * 100
    confidence = _confidence(len(history), window_size)

    pct_threshold = _t("TREND_PCT_THRESHOLD", TREND_PCT_THRESHOLD)
    min_abs = (
        _t("TREND_MIN_ABS_REPS", TREND_MIN_ABS_REPS)
        if bodyweight_like
        else _t("TREND_MIN_ABS_1RM_KG", TREND_MIN_ABS_1RM_KG)
    )
    label = "Reps" if bodyweight_like else "Strength"

    if diff_abs >= min_abs and diff_pct >= pct_threshold:
        return ExerciseTrend(
            status="overload",
            is_bodyweight_like=bodyweight_like,
            confidence=confidence,
            diff_pct=diff_pct,
            evidence=_evidence([f"{label}: {_signed_pct(diff_pct)}"]),
        )

    if diff_abs <= -min_abs and diff_pct <= -pct_threshold:
        return ExerciseTrend(
            status="regression",
            is_bodyweight_like=bodyweight_like,
            confidence=confidence,
            diff_pct=diff_pct,
            evidence=_evidence([f"{label}: {_signed_pct(diff_pct)}"]),
        )

    # A spike in the latest session that the windowed average does not confirm
    latest = metric[0]
    prior = metric[1]
    spike_pct = (latest - prior) / prior * 100 if prior > 0 else 0.0
    min_spike = _t("FAKE_PR_MIN_SPIKE", FAKE_PR_MIN_SPIKE)
    followup = diff_pct <= _t("FAKE_PR_FOLLOWUP_REGRESSION", FAKE_PR_FOLLOWUP_REGRESSION)

    post_pr_drop = False
    post_pr_drop_pct = 0.0
    if spike_pct >= min_spike:
        post_pr_drop_pct = (prior - latest) / latest * 100 if latest > 0 else 0.0
        post_pr_drop = post_pr_drop_pct <= _t("FAKE_PR_POST_PR_DROP_THRESHOLD", FAKE_PR_POST_PR_DROP_THRESHOLD)

    spike_threshold = _t("FAKE_PR_SPIKE_THRESHOLD", FAKE_PR_SPIKE_THRESHOLD)
    if (spike_pct >= spike_threshold and followup) or (spike_pct >= min_spike and post_pr_drop):
        return ExerciseTrend(
            status="fake_pr",
            is_bodyweight_like=bodyweight_like,
            confidence=confidence,
            diff_pct=spike_pct,
            evidence=_evidence([
                f"Spike: +{spike_pct:.1f}%",
                f"Follow-up: {_signed_pct(diff_pct)}" if followup else None,
                f"Post-PR drop: {_signed_pct(post_pr_drop_pct)}" if post_pr_drop else None,
            ]),
        )

    return ExerciseTrend(
        status="neutral",
        is_bodyweight_like=bodyweight_like,
        confidence=confidence,
        diff_pct=diff_pct,
    )


def trends_by_exercise(events: Iterable[TrainingEvent]) -> dict[str, ExerciseTrend]:
    """Trend for every exercise in ``events``, keyed by exercise name in sorted order."""
    grouped: dict[str, list[TrainingEvent]] = defaultdict(list)
    for event in events:
        grouped[event.exercise_title].append(event)
    return {name: analyze_exercise_trend(grouped[name]) for name in sorted(grouped)}
