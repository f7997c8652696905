"""
Minimal smoke tests for lift-insights CLI.

Tests basic functionality:
- App runs and shows help
- Workout files import (table and JSON)
- Names resolve against a catalog
- Volume, set progression and trend commands produce output
"""

import json

import pytest
from typer.testing import CliRunner

from lift_insights.cli.main import app


runner = CliRunner()

HEVY_CSV = (
    '"title","start_time","end_time","description","exercise_title","superset_id","exercise_notes",'
    '"set_index","set_type","weight_kg","reps","distance_km","duration_seconds","rpe"\n'
    '"Push Day","01 Mar 2024, 18:00","01 Mar 2024, 19:00","","Bench Press (Barbell)","","","0","warmup","40","10","","",""\n'
    '"Push Day","01 Mar 2024, 18:00","01 Mar 2024, 19:00","","Bench Press (Barbell)","","","1","normal","80","10","","","8"\n'
    '"Push Day","01 Mar 2024, 18:00","01 Mar 2024, 19:00","","Bench Press (Barbell)","","","2","normal","80","10","","","9"\n'
    '"Push Day","04 Mar 2024, 18:00","04 Mar 2024, 19:00","","Bench Press (Barbell)","","","1","normal","82.5","8","","",""\n'
)

CATALOG_CSV = (
    "name,equipment,primary_muscle,secondary_muscle\n"
    'Bench Press (Barbell),Barbell,Chest,"Triceps, Shoulders"\n'
    'Squat (Barbell),Barbell,Quadriceps,"Glutes, Hamstrings"\n'
    "Triceps Pushdown,Cable,Triceps,None\n"
)


@pytest.fixture
def workout_file(tmp_path):
    path = tmp_path / "workouts.csv"
    path.write_text(HEVY_CSV, encoding="utf-8")
    return path


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text(CATALOG_CSV, encoding="utf-8")
    return path


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "lift-insights" in result.output or "volume" in result.output

    def test_import_table(self, workout_file, catalog_file):
        """Test import prints the summary and recent sets."""
        result = runner.invoke(app, ["import", str(workout_file), "--catalog", str(catalog_file)])

        assert result.exit_code == 0
        assert "Imported 4 sets" in result.output

    def test_rejects_unknown_log_format(self, workout_file):
        result = runner.invoke(app, ["--log-format", "xml", "trend", str(workout_file)])
        assert result.exit_code != 0

    def test_verbose_json_logging(self, workout_file):
        result = runner.invoke(app, ["--verbose", "--log-format", "json", "trend", str(workout_file), "--json"])
        assert result.exit_code == 0

    def test_import_json(self, workout_file):
        """Test import --json emits metadata and events."""
        result = runner.invoke(app, ["import", str(workout_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["meta"]["source_format"] == "hevy"
        assert data["meta"]["confidence"] == 1.0
        assert len(data["events"]) == 4
        assert data["events"][0]["start_time"] == "04 Mar 2024, 18:00"

    def test_import_empty_file_fails(self, tmp_path):
        """Test an empty file exits with an error."""
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        result = runner.invoke(app, ["import", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_import_error_json(self, tmp_path):
        """Test ingestion errors are reported as JSON with --json."""
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        result = runner.invoke(app, ["import", str(path), "--json"])
        assert result.exit_code == 1
        error = json.loads(result.stdout)["error"]
        assert (error["code"], error["error_class"]) == ("empty_file", "parse")

    def test_weight_unit_leaves_distance_in_km(self, tmp_path):
        path = tmp_path / "sled.csv"
        path.write_text("Date,Exercise,Weight,Reps,Distance\n2024-01-31 07:00,Sled Push,100,10,2\n", encoding="utf-8")

        result = runner.invoke(app, ["import", str(path), "--unit", "lbs", "--json"])
        assert result.exit_code == 0
        (event,) = json.loads(result.stdout)["events"]
        assert event["weight_kg"] == pytest.approx(45.359, abs=0.001)
        assert event["distance_km"] == 2

    def test_distance_unit_option(self, tmp_path):
        path = tmp_path / "sled.csv"
        path.write_text("Date,Exercise,Weight,Reps,Distance\n2024-01-31 07:00,Sled Push,100,10,2\n", encoding="utf-8")

        result = runner.invoke(app, ["import", str(path), "--distance-unit", "miles", "--json"])
        assert result.exit_code == 0
        (event,) = json.loads(result.stdout)["events"]
        assert event["weight_kg"] == 100
        assert event["distance_km"] == pytest.approx(3.219, abs=0.001)

    def test_import_rejects_unknown_unit(self, workout_file):
        result = runner.invoke(app, ["import", str(workout_file), "--unit", "stone"])
        assert result.exit_code != 0

    def test_resolve_json(self, catalog_file):
        """Test resolve maps logged names onto catalog names."""
        result = runner.invoke(app, [
            "resolve", "bench press (barbell)", "Tricep Push-Down", "Zumba",
            "--catalog", str(catalog_file),
            "--json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["name"] for d in data] == ["Bench Press (Barbell)", "Triceps Pushdown", "Zumba"]
        assert data[0]["method"] == "case_insensitive"
        assert data[2]["matched"] is False

    def test_resolve_missing_catalog(self, tmp_path):
        result = runner.invoke(app, ["resolve", "Squat", "--catalog", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1

    def test_volume_json(self, workout_file, catalog_file):
        """Test volume --json returns a rolling series per muscle group."""
        result = runner.invoke(app, ["volume", str(workout_file), "--catalog", str(catalog_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["keys"] == ["Chest", "Arms", "Shoulders"]
        assert max(entry["values"]["Chest"] for entry in data["data"]) == 3.0

    def test_volume_regions_json(self, workout_file, catalog_file):
        result = runner.invoke(app, [
            "volume", str(workout_file), "--catalog", str(catalog_file), "--regions", "--json",
        ])

        assert result.exit_code == 0
        assert "upper-pectoralis" in json.loads(result.stdout)["keys"]

    def test_volume_table(self, workout_file, catalog_file):
        result = runner.invoke(app, ["volume", str(workout_file), "--catalog", str(catalog_file)])
        assert result.exit_code == 0
        assert "Chest" in result.output

    def test_volume_rejects_unknown_period(self, workout_file, catalog_file):
        result = runner.invoke(app, [
            "volume", str(workout_file), "--catalog", str(catalog_file), "--period", "hourly",
        ])
        assert result.exit_code != 0

    def test_sets_json(self, workout_file):
        """Test sets --json analyses one session of one exercise."""
        result = runner.invoke(app, [
            "sets", str(workout_file),
            "--exercise", "Bench Press (Barbell)",
            "--date", "2024-03-01",
            "--json",
        ])

        assert result.exit_code == 0
        (session,) = json.loads(result.stdout)
        assert session["title"] == "Push Day"
        assert [t["short_message"] for t in session["transitions"]] == ["Consistent"]
        assert session["summary"]["goal_label"] == "Hypertrophy"
        assert session["recommendation"]["kind"] == "promote"

    def test_sets_unknown_exercise(self, workout_file):
        result = runner.invoke(app, ["sets", str(workout_file), "--exercise", "Curl"])
        assert result.exit_code == 1

    def test_trend_json(self, workout_file):
        """Test trend --json reports every exercise."""
        result = runner.invoke(app, ["trend", str(workout_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert list(data) == ["Bench Press (Barbell)"]
        assert data["Bench Press (Barbell)"]["status"] == "new"

    def test_trend_table(self, workout_file):
        result = runner.invoke(app, ["trend", str(workout_file)])
        assert result.exit_code == 0
        assert "Exercise Trends" in result.output
