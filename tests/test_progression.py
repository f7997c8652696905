"""
Tests for set-to-set progression, session goal labels and load recommendations.
"""

from datetime import datetime

import pytest

from lift_insights.core.models import TrainingEvent
from lift_insights.core.progression import (
    analyze_events_by_session,
    analyze_session,
    analyze_set_progression,
    analyze_weight_promotion,
    working_sets,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

START = datetime(2024, 1, 31, 18, 30)


def _session(*sets: tuple[float, float], set_type: str = "normal") -> list[TrainingEvent]:
    return [
        TrainingEvent(
            exercise_title="Bench Press",
            parsed_start=START,
            start_time="31 Jan 2024, 18:30",
            set_index=i + 1,
            set_type=set_type,
            weight_kg=weight,
            reps=reps,
        )
        for i, (weight, reps) in enumerate(sets)
    ]


def _labels_for(sets: list[TrainingEvent]) -> list[str]:
    return [r.short_message for r in analyze_set_progression(sets)]


def _labels(*sets: tuple[float, float]) -> list[str]:
    return _labels_for(_session(*sets))


class TestSameWeight:
    def test_consistent(self):
        (result,) = analyze_set_progression(_session((80, 10), (80, 10)))
        assert result.short_message == "Consistent"
        assert result.status == "success"
        assert result.transition == "Set 1 → 2"

    def test_second_wind(self):
        assert _labels((80, 8), (80, 10)) == ["Second Wind"]

    def test_fatigue_levels(self):
        assert _labels((80, 10), (80, 9)) == ["Normal Fatigue"]
        assert _labels((80, 10), (80, 8)) == ["High Fatigue"]
        assert _labels((80, 10), (80, 6)) == ["Significant Drop"]

    def test_first_transition_explains_first_set(self):
        (result,) = analyze_set_progression(_session((80, 10), (80, 8)))
        assert result.status == "warning"
        assert result.explanation is not None
        assert result.explanation.why == ["First set pushed close to failure"]

    def test_within_tolerance_counts_as_same_weight(self):
        assert _labels((100, 8), (100.5, 8)) == ["Consistent"]


class TestWeightIncrease:
    def test_good_overload(self):
        (result,) = analyze_set_progression(_session((90, 10), (100, 6)))
        assert result.short_message == "Good Overload"
        assert result.metrics["weight_change_pct"] == "+11.1%"
        assert result.metrics["vol_drop_pct"] == "-33.3%"
        assert result.metrics["expected_reps"] == "6"

    def test_strong_overload(self):
        assert _labels((50, 15), (60, 15)) == ["Strong Overload"]

    def test_slightly_ambitious(self):
        assert _labels((100, 12), (110, 6)) == ["Slightly Ambitious"]

    def test_premature_jump(self):
        (result,) = analyze_set_progression(_session((100, 12), (110, 3)))
        assert result.short_message == "Premature Jump"
        assert result.status == "danger"


class TestWeightDecrease:
    def test_effective_backoff(self):
        assert _labels((100, 5), (80, 15)) == ["Effective Backoff"]

    def test_fatigued_backoff(self):
        assert _labels((100, 5), (80, 12)) == ["Fatigued Backoff"]

    def test_heavy_fatigue(self):
        (result,) = analyze_set_progression(_session((100, 8), (80, 12)))
        assert result.short_message == "Heavy Fatigue"
        assert result.metrics["weight_change_pct"] == "-20%"


class TestWorkingSets:
    def test_warmups_ignored(self):
        sets = _session((40, 10), set_type="warmup") + _session((80, 10), (80, 10))
        assert len(working_sets(sets)) == 2
        assert _labels_for(sets) == ["Consistent"]

    def test_fewer_than_two_sets(self):
        assert analyze_set_progression(_session((80, 10))) == []
        assert analyze_set_progression([]) == []

class TestSessionGoal:
    @pytest.mark.parametrize("reps, label, avg", [
        ((5, 5, 5), "Strength", 5),
        ((5, 6), "Hypertrophy", 6),
        ((8, 10, 12), "Hypertrophy", 10),
        ((20, 20), "Endurance", 20),
    ])
    def test_labels(self, reps, label, avg):
        analysis = analyze_session(_session(*[(60, r) for r in reps]))
        assert analysis.goal_label == label
        assert analysis.avg_reps == avg
        assert analysis.set_count == len(reps)
        assert analysis.tooltip

    def test_no_working_sets(self):
        analysis = analyze_session(_session((40, 10), set_type="warmup"))
        assert (analysis.goal_label, analysis.set_count) == ("N/A", 0)


class TestWeightPromotion:
    def test_promote_small_jump(self):
        rec = analyze_weight_promotion(_session((80, 10), (80, 11), (80, 10)))
        assert rec is not None
        assert (rec.kind, rec.message) == ("promote", "Increase Weight")
        assert "2.5-5%" in rec.tooltip

    def test_promote_large_jump(self):
        rec = analyze_weight_promotion(_session((80, 12), (80, 12)))
        assert rec is not None and "5-10%" in rec.tooltip

    def test_only_top_weight_sets_count(self):
        rec = analyze_weight_promotion(_session((100, 10), (60, 5)))
        assert rec is not None and rec.kind == "promote"

    def test_demote_when_reps_too_low(self):
        rec = analyze_weight_promotion(_session((100, 3), (100, 4)))
        assert rec is not None
        assert (rec.kind, rec.message) == ("demote", "Decrease Weight")

    def test_inconsistent(self):
        rec = analyze_weight_promotion(_session((80, 12), (80, 6)))
        assert rec is not None
        assert (rec.kind, rec.message) == ("demote", "Inconsistent")

    def test_keep_weight(self):
        assert analyze_weight_promotion(_session((80, 8), (80, 8))) is None

    def test_custom_target(self):
        rec = analyze_weight_promotion(_session((80, 8), (80, 8)), target_reps=8)
        assert rec is not None and rec.kind == "promote"

    def test_no_sets(self):
        assert analyze_weight_promotion([]) is None


class TestGrouping:
    def test_groups_by_session_and_exercise_in_set_order(self):
        sets = _session((80, 10), (80, 9))
        squat = TrainingEvent(exercise_title="Squat", parsed_start=START, start_time="31 Jan 2024, 18:30", set_index=1)
        grouped = analyze_events_by_session([sets[1], squat, sets[0]])

        assert list(grouped) == [("Workout|31 Jan 2024, 18:30", "Bench Press"), ("Workout|31 Jan 2024, 18:30", "Squat")]
        assert [s.set_index for s in grouped[("Workout|31 Jan 2024, 18:30", "Bench Press")]] == [1, 2]
