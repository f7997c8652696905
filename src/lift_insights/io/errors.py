"""Error types and the stable error taxonomy for file ingestion."""

from __future__ import annotations

from typing import Literal

IngestionErrorClass = Literal[
    "parse",
    "mapping",
    "localization",
    "io",
    "other",
]

INGESTION_ERROR_CLASS_BY_CODE: dict[str, IngestionErrorClass] = {
    "empty_file": "parse",
    "unsupported_format": "parse",
    "missing_exercise_column": "mapping",
    "missing_date_column": "mapping",
    "missing_weight_column": "mapping",
    "date_parse_failure": "localization",
    "unreadable_file": "io",
}


def classify_ingestion_error_code(error_code: str | None) -> IngestionErrorClass:
    normalized = str(error_code or "").strip().lower()
    if not normalized:
        return "other"
    return INGESTION_ERROR_CLASS_BY_CODE.get(normalized, "other")


class IngestionError(Exception):
    """A workout file could not be turned into training events."""

    def __init__(self, *, code: str, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field

    @property
    def error_class(self) -> IngestionErrorClass:
        return classify_ingestion_error_code(self.code)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "code": self.code,
            "error_class": self.error_class,
            "message": self.message,
            "field": self.field,
        }


class CatalogError(Exception):
    """An exercise catalog file could not be read."""
