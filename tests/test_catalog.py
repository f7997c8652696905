"""
Tests for exercise catalog loading.
"""

import pytest

from lift_insights.io.catalog import load_catalog, parse_catalog_rows
from lift_insights.io.errors import CatalogError


class TestParseCatalogRows:
    def test_fields_and_none_values(self):
        (entry,) = parse_catalog_rows([{
            "name": "Bench Press (Barbell)",
            "equipment": "Barbell",
            "primary_muscle": "Chest",
            "secondary_muscle": "None",
            "thumbnail": "",
        }])
        assert entry.name == "Bench Press (Barbell)"
        assert entry.primary_muscle == "Chest"
        assert entry.secondary_muscle is None
        assert entry.secondary_muscles() == []
        assert entry.thumbnail is None

    def test_explicit_source_beats_video(self):
        (entry,) = parse_catalog_rows([{
            "name": "Squat",
            "video": "https://example.com/squat.mp4",
            "source": "https://example.com/squat",
        }])
        assert entry.media == "https://example.com/squat.mp4"
        assert entry.source == "https://example.com/squat"

    @pytest.mark.parametrize("source", ["", "None", None])
    def test_video_fills_missing_source(self, source):
        (entry,) = parse_catalog_rows([{"name": "Squat", "video": "https://example.com/squat.mp4", "source": source}])
        assert entry.source == "https://example.com/squat.mp4"

    def test_media_column_when_no_video(self):
        (entry,) = parse_catalog_rows([{"name": "Squat", "media": "squat.gif"}])
        assert entry.media == "squat.gif"
        assert entry.source is None

    def test_rows_without_name_skipped(self):
        rows = [{"name": ""}, {"name": "  "}, {"Name": "Deadlift"}]
        assert [e.name for e in parse_catalog_rows(rows)] == ["Deadlift"]


class TestLoadCatalog:
    def test_reads_bom_file(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text(
            'name,primary_muscle,secondary_muscle\nBench Press,Chest,"Triceps, Shoulders"\n',
            encoding="utf-8-sig",
        )
        (entry,) = load_catalog(path)
        assert entry.secondary_muscles() == ["Triceps", "Shoulders"]

    def test_missing_name_column(self, tmp_path):
        path = tmp_path / "catalog.csv"
        path.write_text("exercise,primary_muscle\nSquat,Legs\n", encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError):
            load_catalog(tmp_path / "nope.csv")
