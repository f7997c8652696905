"""
Tests for workout CSV ingestion: semantic path, Strong and Hevy exports,
post-processing and structural errors.
"""

from datetime import datetime

import pytest

from lift_insights.core.config import LBS_TO_KG
from lift_insights.core.resolver import create_resolver
from lift_insights.io.csv_ingest import (
    parse_workout_csv,
    parse_workout_file,
    read_csv_rows,
)
from lift_insights.io.errors import IngestionError, classify_ingestion_error_code

# ---------------------------------------------------------------------------
# Fixtures as text
# ---------------------------------------------------------------------------

GENERIC_CSV = """Date,Exercise,Weight (kg),Reps,Notes
2024-01-31 18:30,Bench Press,80,8,
2024-01-31 18:30,Bench Press,80,7,hard
2024-01-31 18:30,Squat,100,5,
2024-02-02 18:30,Squat,100,5,
"""

STRONG_CSV = """Date,Workout Name,Duration,Exercise Name,Set Order,Weight,Reps,Distance,Seconds,Notes,Workout Notes,RPE
2024-03-01 18:00:00,Push Day,1h 5m,Bench Press (Barbell),W,40,10,0,0,,,
2024-03-01 18:00:00,Push Day,1h 5m,Bench Press (Barbell),1,80,8,0,0,,,8
2024-03-01 18:00:00,Push Day,1h 5m,Bench Press (Barbell),2,"82,5",6,0,0,felt heavy,,9
"""

HEVY_CSV = (
    '"title","start_time","end_time","description","exercise_title","superset_id","exercise_notes",'
    '"set_index","set_type","weight_kg","reps","distance_km","duration_seconds","rpe"\n'
    '"Leg Day","5 Mar 2024, 07:00","5 Mar 2024, 08:00","","Squat (Barbell)","","","0","warmup","60","5","","",""\n'
    '"Leg Day","5 Mar 2024, 07:00","5 Mar 2024, 08:00","","Squat (Barbell)","","","1","normal","100","5","","","8.5"\n'
)


def _error_code(text: str) -> str:
    with pytest.raises(IngestionError) as exc_info:
        parse_workout_csv(text)
    return exc_info.value.code


class TestReadCsvRows:
    def test_strips_bom_and_whitespace_from_headers(self):
        headers, rows = read_csv_rows("\ufeff Date ,Exercise\n2024-01-01,Squat\n")
        assert headers == ["Date", "Exercise"]
        assert rows == [{"Date": "2024-01-01", "Exercise": "Squat"}]

    def test_skips_blank_lines_and_pads_short_rows(self):
        headers, rows = read_csv_rows("a,b,c\n\n1,2\n,,\n")
        assert headers == ["a", "b", "c"]
        assert rows == [{"a": "1", "b": "2", "c": ""}]


class TestSemanticPath:
    def test_generic_export(self):
        result = parse_workout_csv(GENERIC_CSV)

        assert result.meta.source_format == "semantic"
        assert result.meta.row_count == 4
        assert result.meta.confidence > 0.6
        assert result.meta.warnings == []
        assert result.meta.field_mappings["Weight (kg)"] == "weight"
        assert len(result.events) == 4

    def test_sorted_newest_first_then_by_set(self):
        events = parse_workout_csv(GENERIC_CSV).events

        assert events[0].parsed_start == datetime(2024, 2, 2, 18, 30)
        assert [e.set_index for e in events[1:]] == [1, 1, 2]

    def test_set_indices_restart_per_exercise_and_session(self):
        events = parse_workout_csv(GENERIC_CSV).events
        bench = [e.set_index for e in events if e.exercise_title == "Bench Press"]
        assert sorted(bench) == [1, 2]

    def test_titles_inferred_from_exercises(self):
        events = parse_workout_csv(GENERIC_CSV).events
        titles = {e.parsed_start.date().isoformat(): e.title for e in events}
        assert titles == {"2024-01-31": "Bench Press + Squat", "2024-02-02": "Squat"}

    def test_many_exercises_title(self):
        rows = "\n".join(f"2024-01-31 18:30,Exercise {i},10,10" for i in range(4))
        events = parse_workout_csv("Date,Exercise,Weight,Reps\n" + rows).events
        assert {e.title for e in events} == {"Workout (4 exercises)"}

    def test_display_time_and_notes(self):
        events = parse_workout_csv(GENERIC_CSV).events
        hard = [e for e in events if e.exercise_notes == "hard"]
        assert len(hard) == 1
        assert hard[0].start_time == "31 Jan 2024, 18:30"
        assert hard[0].reps == 7

    def test_header_unit_hint(self):
        result = parse_workout_csv("Date,Exercise,Weight (lbs),Reps\n2024-01-31,Squat,135,5\n")
        assert result.events[0].weight_kg == pytest.approx(135 * LBS_TO_KG)

    def test_preferred_unit_applies_without_hints(self):
        result = parse_workout_csv("Date,Exercise,Weight,Reps\n2024-01-31,Squat,100,5\n", weight_unit="lbs")
        assert result.events[0].weight_kg == pytest.approx(100 * LBS_TO_KG)

    def test_row_unit_column_applies_without_header_hint(self):
        text = "Date,Exercise,Weight,Unit,Reps\n2024-01-31,Squat,100,lbs,5\n2024-01-31,Squat,100,kg,5\n"
        weights = sorted(e.weight_kg for e in parse_workout_csv(text).events)
        assert weights == [pytest.approx(100 * LBS_TO_KG), 100]

    def test_header_hint_beats_row_unit_column(self):
        result = parse_workout_csv("Date,Exercise,Weight_lbs,Unit,Reps\n2024-01-31,Squat,100,kg,5\n")
        assert result.meta.field_mappings["Weight_lbs"] == "weight"
        assert result.events[0].weight_kg == pytest.approx(45.359237)

    def test_semicolon_and_decimal_comma(self):
        result = parse_workout_csv("Date;Exercise;Weight;Reps\n31/01/2024;Squat;82,5;5\n")
        event = result.events[0]
        assert event.weight_kg == 82.5
        assert event.parsed_start == datetime(2024, 1, 31)

    def test_rir_converted_to_rpe(self):
        result = parse_workout_csv("Date,Exercise,Weight,Reps,RIR\n2024-01-31,Squat,100,5,2\n")
        assert result.events[0].rpe == 8.0

    def test_rows_without_exercise_or_date_skipped(self):
        text = "Date,Exercise,Weight,Reps\n2024-01-31,Squat,100,5\n2024-01-31,,100,5\n,Squat,100,5\n"
        result = parse_workout_csv(text)
        assert len(result.events) == 1
        assert result.meta.row_count == 3

    def test_malformed_numbers_default(self):
        result = parse_workout_csv("Date,Exercise,Weight,Reps\n2024-01-31,Squat,heavy,-3\n")
        event = result.events[0]
        assert event.weight_kg == 0.0
        assert event.reps == 0.0


class TestStrongExport:
    def test_detected_and_parsed(self):
        result = parse_workout_csv(STRONG_CSV)

        assert result.meta.source_format == "strong"
        assert result.meta.confidence == 1.0
        assert len(result.events) == 3

    def test_set_order_and_warmups(self):
        events = parse_workout_csv(STRONG_CSV).events
        assert [e.set_index for e in events] == [0, 1, 2]
        assert events[0].set_type == "warmup"
        assert events[1].set_type == "normal"

    def test_values(self):
        last = parse_workout_csv(STRONG_CSV).events[2]
        assert last.title == "Push Day"
        assert last.weight_kg == 82.5
        assert last.exercise_notes == "felt heavy"
        assert last.rpe == 9.0
        assert last.start_time == "01 Mar 2024, 18:00"
        assert last.end_time == "01 Mar 2024, 19:05"

    def test_unit_from_weight_header(self):
        text = (
            "Date,Workout Name,Exercise Name,Set Order,Weight (lbs),Reps\n"
            "2024-03-01 18:00:00,Push Day,Bench Press (Barbell),1,100,5\n"
        )
        result = parse_workout_csv(text)
        assert result.meta.source_format == "strong"
        assert result.events[0].weight_kg == pytest.approx(100 * LBS_TO_KG)

    def test_weight_header_beats_weight_unit_column(self):
        text = (
            "Date,Workout Name,Exercise Name,Set Order,Weight (lbs),Weight Unit,Reps\n"
            "2024-03-01 18:00:00,Push Day,Bench Press (Barbell),1,100,kg,5\n"
        )
        assert parse_workout_csv(text).events[0].weight_kg == pytest.approx(100 * LBS_TO_KG)


class TestHevyExport:
    def test_detected_and_parsed(self):
        result = parse_workout_csv(HEVY_CSV)

        assert result.meta.source_format == "hevy"
        events = result.events
        assert [e.set_index for e in events] == [0, 1]
        assert events[0].set_type == "warmup"
        assert events[1].rpe == 8.5
        assert events[1].weight_kg == 100
        assert events[1].parsed_end == datetime(2024, 3, 5, 8, 0)


class TestResolution:
    def test_names_rewritten_and_stats_counted(self):
        resolver = create_resolver(["Squat (Barbell)", "Bench Press (Barbell)"])
        text = (
            "Date,Exercise,Weight,Reps\n"
            "2024-01-31,Squat,100,5\n"
            "2024-01-31,Barbell Bench Press Paused,80,5\n"
            "2024-01-31,Zumba,0,1\n"
        )
        result = parse_workout_csv(text, resolver=resolver)

        names = {e.exercise_title for e in result.events}
        assert names == {"Squat (Barbell)", "Bench Press (Barbell)", "Zumba"}
        assert result.meta.fuzzy_matches == 1
        assert result.meta.unmatched_exercises == ["Zumba"]


class TestStructuralErrors:
    def test_empty_file(self):
        assert _error_code("") == "empty_file"

    def test_header_only(self):
        assert _error_code("Date,Exercise,Weight,Reps\n") == "empty_file"

    def test_single_column_file(self):
        with pytest.raises(IngestionError) as exc_info:
            parse_workout_csv("Notes\nfelt good\nheavy day\n")
        assert exc_info.value.code == "unsupported_format"
        assert exc_info.value.error_class == "parse"

    def test_missing_exercise_column(self):
        assert _error_code("Date,Weight,Reps\n2024-01-31,100,5\n") == "missing_exercise_column"

    def test_missing_date_column(self):
        assert _error_code("Exercise,Weight,Reps\nSquat,100,5\n") == "missing_date_column"

    def test_missing_weight_column(self):
        assert _error_code("Date,Exercise,Reps\n2024-01-31,Squat,5\n") == "missing_weight_column"

    def test_unparseable_dates(self):
        rows = "\n".join("Jan-31-2024,Squat,100,5" for _ in range(5))
        with pytest.raises(IngestionError) as exc_info:
            parse_workout_csv("Date,Exercise,Weight,Reps\n" + rows)
        assert exc_info.value.code == "date_parse_failure"
        assert exc_info.value.error_class == "localization"

    def test_few_unparseable_dates_tolerated(self):
        rows = "\n".join("Jan-31-2024,Squat,100,5" for _ in range(3))
        result = parse_workout_csv("Date,Exercise,Weight,Reps\n" + rows)
        assert result.events == []

    def test_error_taxonomy(self):
        assert classify_ingestion_error_code("missing_date_column") == "mapping"
        assert classify_ingestion_error_code("EMPTY_FILE") == "parse"
        assert classify_ingestion_error_code("unreadable_file") == "io"
        assert classify_ingestion_error_code("whatever") == "other"
        assert classify_ingestion_error_code(None) == "other"


class TestParseWorkoutFile:
    def test_reads_utf8_with_bom(self, tmp_path):
        path = tmp_path / "log.csv"
        path.write_text(GENERIC_CSV, encoding="utf-8-sig")
        assert len(parse_workout_file(path).events) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(IngestionError) as exc_info:
            parse_workout_file(tmp_path / "nope.csv")
        assert exc_info.value.error_class == "io"
        assert exc_info.value.to_dict()["code"] == "unreadable_file"
