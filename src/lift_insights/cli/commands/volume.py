"""Volume command: rolling weekly sets per muscle."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...core.config import DISTANCE_UNITS
from ...core.volume import VolumeCalculator
from ...io.errors import CatalogError, IngestionError
from ...io.serializers import time_series_to_dict
from .. import views
from ..app import DistanceUnitOption, JsonOption, ModeOption, UnitOption, app, check_choice, load_events

PERIODS = ("daily", "weekly", "monthly", "yearly")


@app.command()
def volume(
    csv_path: Annotated[Path, typer.Argument(help="Workout CSV export")],
    catalog_path: Annotated[
        Path,
        typer.Option("--catalog", "-c", help="Exercise catalog CSV with muscle data"),
    ],
    period: Annotated[
        str,
        typer.Option("--period", "-p", help="daily, weekly (rolling 7 days), monthly or yearly"),
    ] = "weekly",
    detailed: Annotated[
        bool,
        typer.Option("--detailed", "-d", help="Per catalog muscle instead of muscle group"),
    ] = False,
    regions: Annotated[
        bool,
        typer.Option("--regions", help="Per body-map region id"),
    ] = False,
    unit: UnitOption = "kg",
    distance_unit: DistanceUnitOption = "km",
    mode: ModeOption = "strict",
    json_out: JsonOption = False,
) -> None:
    """
    Show weekly set volume per muscle over time.

    Sets count 1.0 for the primary muscle and 0.5 for each secondary muscle,
    summed over a trailing 7-day window. Days after a break are left out.
    """
    period = check_choice(period, PERIODS, "--period")
    unit = check_choice(unit, ("kg", "lbs"), "--unit")
    distance_unit = check_choice(distance_unit, DISTANCE_UNITS, "--distance-unit")
    mode = check_choice(mode, ("strict", "relaxed"), "--mode")

    try:
        result, catalog = load_events(csv_path, catalog_path, mode, unit, distance_unit)  # type: ignore[arg-type]
    except (IngestionError, CatalogError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    calculator = VolumeCalculator(catalog)
    if regions:
        series = calculator.region_time_series(result.events, period)  # type: ignore[arg-type]
    else:
        series = calculator.time_series(result.events, period, use_groups=not detailed)  # type: ignore[arg-type]

    if json_out:
        print(json.dumps(time_series_to_dict(series), indent=2))
        return

    if not series.data:
        views.print_info("No volume to show. Check that exercises match the catalog.")
        return

    views.console.print()
    views.console.print(views.format_volume_table(series, f"{period.capitalize()} sets per muscle"))

    latest = (
        calculator.latest_region_volume(result.events)
        if regions
        else calculator.latest_rolling_volume(result.events, use_groups=not detailed)
    )
    if latest is not None:
        views.print_info(f"Last 7 days to {latest.day:%d %b %Y}: {latest.total_sets:.1f} sets")
    views.console.print()
