"""Import command: read a workout export and summarise what was detected."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...core.config import DISTANCE_UNITS
from ...io.errors import CatalogError, IngestionError
from ...io.serializers import ingestion_meta_to_dict, training_event_to_dict
from .. import views
from ..app import CatalogOption, DistanceUnitOption, JsonOption, ModeOption, UnitOption, app, check_choice, load_events


@app.command("import")
def import_csv(
    csv_path: Annotated[Path, typer.Argument(help="Workout CSV export (Strong, Hevy or any spreadsheet)")],
    catalog_path: CatalogOption = None,
    unit: UnitOption = "kg",
    distance_unit: DistanceUnitOption = "km",
    mode: ModeOption = "strict",
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Number of recent sets to show"),
    ] = 20,
    json_out: JsonOption = False,
) -> None:
    """
    Import a workout CSV and show the detected columns and recent sets.
    """
    unit = check_choice(unit, ("kg", "lbs"), "--unit")
    distance_unit = check_choice(distance_unit, DISTANCE_UNITS, "--distance-unit")
    mode = check_choice(mode, ("strict", "relaxed"), "--mode")

    try:
        result, _ = load_events(csv_path, catalog_path, mode, unit, distance_unit)  # type: ignore[arg-type]
    except IngestionError as e:
        if json_out:
            print(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            views.print_error(e.message)
        raise typer.Exit(1)
    except CatalogError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({
            "meta": ingestion_meta_to_dict(result.meta),
            "events": [training_event_to_dict(e) for e in result.events],
        }, indent=2))
        return

    views.console.print()
    views.console.print(views.format_ingestion_summary(result.meta, len(result.events)))
    for warning in result.meta.warnings:
        views.print_warning(warning)
    if result.meta.unmatched_exercises:
        views.print_warning(
            f"{len(result.meta.unmatched_exercises)} exercise(s) not in catalog: "
            + ", ".join(result.meta.unmatched_exercises)
        )
    views.console.print()
    views.console.print(views.format_events_table(result.events, limit))
    views.console.print()
    views.print_success(f"Imported {len(result.events)} sets.")
