"""
Tests for threshold loading from YAML and user overrides.
"""

from datetime import datetime

from lift_insights.core.engine.config_loader import (
    _deep_merge,
    get_bundled_yaml_path,
    get_threshold,
    get_user_yaml_path,
    load_model_config,
    reload_model_config,
)
from lift_insights.core.models import TrainingEvent
from lift_insights.core.progression import analyze_set_progression

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_user_yaml(home, text: str) -> None:
    config_dir = home / ".lift-insights"
    config_dir.mkdir(exist_ok=True)
    (config_dir / "thresholds.yaml").write_text(text, encoding="utf-8")
    reload_model_config()


def _sets(*reps: float) -> list[TrainingEvent]:
    start = datetime(2024, 1, 31, 18, 30)
    return [
        TrainingEvent(exercise_title="Bench Press", parsed_start=start, set_index=i + 1, weight_kg=80, reps=r)
        for i, r in enumerate(reps)
    ]


class TestBundledConfig:
    def test_bundled_file_found(self):
        path = get_bundled_yaml_path()
        assert path is not None
        assert path.name == "thresholds.yaml"

    def test_bundled_values_match_defaults(self):
        config = load_model_config()
        assert config["progression"]["DROP_THRESHOLD_MILD"] == 15.0
        assert config["promotion"]["DEFAULT_TARGET_REPS"] == 10

    def test_missing_key_uses_default(self):
        assert get_threshold("progression", "NO_SUCH_KEY", 7.5) == 7.5
        assert get_threshold("no_such_section", "DROP_THRESHOLD_MILD", 3) == 3


class TestUserOverrides:
    def test_no_user_file(self, isolated_home):
        assert get_user_yaml_path() is None

    def test_override_single_key(self, isolated_home):
        _write_user_yaml(isolated_home, "progression:\n  DROP_THRESHOLD_MILD: 30\n")

        assert get_threshold("progression", "DROP_THRESHOLD_MILD", 15.0) == 30.0
        # Untouched keys keep the bundled values
        assert get_threshold("progression", "DROP_THRESHOLD_MODERATE", 0.0) == 25.0

    def test_coerced_to_default_type(self, isolated_home):
        _write_user_yaml(isolated_home, "promotion:\n  DEFAULT_TARGET_REPS: 8.0\n")
        value = get_threshold("promotion", "DEFAULT_TARGET_REPS", 10)
        assert value == 8
        assert isinstance(value, int)

    def test_non_number_ignored(self, isolated_home):
        _write_user_yaml(isolated_home, "progression:\n  DROP_THRESHOLD_MILD: lots\n")
        assert get_threshold("progression", "DROP_THRESHOLD_MILD", 15.0) == 15.0

    def test_boolean_ignored(self, isolated_home):
        _write_user_yaml(isolated_home, "progression:\n  DROP_THRESHOLD_MILD: true\n")
        assert get_threshold("progression", "DROP_THRESHOLD_MILD", 15.0) == 15.0

    def test_broken_yaml_falls_back(self, isolated_home):
        _write_user_yaml(isolated_home, "progression: [unclosed\n")
        assert get_threshold("progression", "DROP_THRESHOLD_MILD", 15.0) == 15.0

    def test_non_mapping_ignored(self, isolated_home):
        _write_user_yaml(isolated_home, "- just\n- a list\n")
        assert get_threshold("progression", "DROP_THRESHOLD_MILD", 15.0) == 15.0

    def test_override_changes_classification(self, isolated_home):
        assert [r.short_message for r in analyze_set_progression(_sets(10, 8))] == ["High Fatigue"]

        _write_user_yaml(isolated_home, "progression:\n  DROP_THRESHOLD_MILD: 25\n")
        assert [r.short_message for r in analyze_set_progression(_sets(10, 8))] == ["Normal Fatigue"]


class TestDeepMerge:
    def test_nested_override(self):
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        merged = _deep_merge(base, {"a": {"y": 20}, "c": 4})
        assert merged == {"a": {"x": 1, "y": 20}, "b": 3, "c": 4}

    def test_base_not_modified(self):
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}

    def test_scalar_replaces_mapping(self):
        assert _deep_merge({"a": {"x": 1}}, {"a": 5}) == {"a": 5}
