"""Shared Typer app object, shared option types, and data loading utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import ExerciseCatalogEntry, IngestionResult
from ..core.resolver import ResolverMode, create_resolver
from ..io.catalog import load_catalog
from ..io.csv_ingest import parse_workout_file

# Shared option types used across commands
CatalogOption = Annotated[
    Optional[Path],
    typer.Option("--catalog", "-c", help="Exercise catalog CSV (name, primary_muscle, secondary_muscle, ...)"),
]

ModeOption = Annotated[
    str,
    typer.Option("--mode", "-m", help="Name matching: strict (default) or relaxed"),
]

UnitOption = Annotated[
    str,
    typer.Option("--unit", "-u", help="Weight unit assumed when the file does not say: kg (default) or lbs"),
]

DistanceUnitOption = Annotated[
    str,
    typer.Option("--distance-unit", help="Distance unit assumed when the file does not say: km (default), miles or meters"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="lift-insights",
    help="Import workout logs and analyse muscle volume, set progression and strength trends.",
    no_args_is_help=True,
)


def check_choice(value: str, choices: tuple[str, ...], option: str) -> str:
    """Validate a string option against allowed values."""
    normalized = value.strip().lower()
    if normalized not in choices:
        raise typer.BadParameter(f"must be one of: {', '.join(choices)}", param_hint=option)
    return normalized


def load_events(
    csv_path: Path,
    catalog_path: Path | None = None,
    mode: ResolverMode = "strict",
    unit: str = "kg",
    distance_unit: str = "km",
) -> tuple[IngestionResult, list[ExerciseCatalogEntry]]:
    """
    Load the catalog (if given) and ingest a workout CSV against it.

    Raises:
        CatalogError: If the catalog cannot be read
        IngestionError: If the workout file cannot be ingested
    """
    catalog = load_catalog(catalog_path) if catalog_path is not None else []
    resolver = create_resolver([e.name for e in catalog], mode) if catalog else None
    result = parse_workout_file(csv_path, resolver=resolver, weight_unit=unit, distance_unit=distance_unit)
    return result, catalog
