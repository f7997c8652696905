"""
Exercise catalog loading.

The catalog is a CSV with one canonical exercise per row:
name, equipment, primary_muscle, secondary_muscle, video (or media),
source, thumbnail. Blank cells and the literal "None" become None.
"""

import csv
import logging
from pathlib import Path

from ..core.models import ExerciseCatalogEntry
from .errors import CatalogError

logger = logging.getLogger(__name__)


def _cell(row: dict[str, str | None], *keys: str) -> str | None:
    for key in keys:
        value = row.get(key)
        if value is not None and value.strip() and value.strip().lower() != "none":
            return value
    return None


def parse_catalog_rows(rows: list[dict[str, str | None]]) -> list[ExerciseCatalogEntry]:
    """
    Build catalog entries from CSV row dicts.

    Rows without a name are skipped. An explicit source wins; a video link
    doubles as the source otherwise.
    """
    entries: list[ExerciseCatalogEntry] = []
    for row in rows:
        row = {(k or "").strip().lstrip("\ufeff").lower(): v for k, v in row.items()}
        name = (row.get("name") or "").strip()
        if not name:
            continue
        media = _cell(row, "video", "media")
        entries.append(ExerciseCatalogEntry(
            name=name,
            equipment=_cell(row, "equipment"),
            primary_muscle=_cell(row, "primary_muscle"),
            secondary_muscle=_cell(row, "secondary_muscle"),
            media=media,
            source=_cell(row, "source", "video"),
            thumbnail=_cell(row, "thumbnail"),
        ))
    return entries


def load_catalog(path: Path) -> list[ExerciseCatalogEntry]:
    """
    Load an exercise catalog CSV.

    Args:
        path: Catalog file

    Returns:
        Entries in file order

    Raises:
        CatalogError: If the file is missing, unreadable, or has no name column
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            headers = [h.strip().lower() for h in reader.fieldnames or []]
            if "name" not in headers:
                raise CatalogError(f"Catalog {path} has no 'name' column")
            rows = list(reader)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    entries = parse_catalog_rows(rows)
    logger.debug("Loaded %d catalog entries from %s", len(entries), path)
    return entries
