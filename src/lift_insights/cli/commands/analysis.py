"""Analysis commands: sets, trend."""

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.config import DISTANCE_UNITS
from ...core.progression import (
    analyze_events_by_session,
    analyze_session,
    analyze_set_progression,
    analyze_weight_promotion,
)
from ...core.trend import trends_by_exercise
from ...io.errors import CatalogError, IngestionError
from ...io.serializers import (
    analysis_result_to_dict,
    exercise_trend_to_dict,
    recommendation_to_dict,
    session_analysis_to_dict,
)
from .. import views
from ..app import CatalogOption, DistanceUnitOption, JsonOption, ModeOption, UnitOption, app, check_choice, load_events


def _parse_day(value: str | None):
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise typer.BadParameter("expected YYYY-MM-DD", param_hint="--date") from e


@app.command()
def sets(
    csv_path: Annotated[Path, typer.Argument(help="Workout CSV export")],
    exercise: Annotated[
        str,
        typer.Option("--exercise", "-e", help="Exercise name (after catalog resolution)"),
    ],
    day: Annotated[
        Optional[str],
        typer.Option("--date", help="Only sessions on this day (YYYY-MM-DD)"),
    ] = None,
    catalog_path: CatalogOption = None,
    unit: UnitOption = "kg",
    distance_unit: DistanceUnitOption = "km",
    mode: ModeOption = "strict",
    json_out: JsonOption = False,
) -> None:
    """
    Analyse set-to-set progression for one exercise, session by session.
    """
    only_day = _parse_day(day)
    unit = check_choice(unit, ("kg", "lbs"), "--unit")
    distance_unit = check_choice(distance_unit, DISTANCE_UNITS, "--distance-unit")
    mode = check_choice(mode, ("strict", "relaxed"), "--mode")

    try:
        result, _ = load_events(csv_path, catalog_path, mode, unit, distance_unit)  # type: ignore[arg-type]
    except (IngestionError, CatalogError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    wanted = exercise.strip().lower()
    events = [
        e for e in result.events
        if e.exercise_title.lower() == wanted and (only_day is None or e.day == only_day)
    ]
    if not events:
        views.print_error(f"No sets found for '{exercise}'")
        raise typer.Exit(1)

    sessions = []
    for (session_key, name), session_sets in analyze_events_by_session(events).items():
        sessions.append({
            "session": session_sets[0].start_time,
            "title": session_sets[0].title,
            "exercise": name,
            "transitions": analyze_set_progression(session_sets),
            "summary": analyze_session(session_sets),
            "recommendation": analyze_weight_promotion(session_sets),
        })

    if json_out:
        print(json.dumps([
            {
                "session": s["session"],
                "title": s["title"],
                "exercise": s["exercise"],
                "transitions": [analysis_result_to_dict(r) for r in s["transitions"]],
                "summary": session_analysis_to_dict(s["summary"]),
                "recommendation": recommendation_to_dict(s["recommendation"]),
            }
            for s in sessions
        ], indent=2))
        return

    for s in sessions:
        views.print_session_analysis(
            f"{s['session']}  {s['title']}",
            s["transitions"],
            s["summary"],
            s["recommendation"],
        )
    views.console.print()


@app.command()
def trend(
    csv_path: Annotated[Path, typer.Argument(help="Workout CSV export")],
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Only this exercise"),
    ] = None,
    catalog_path: CatalogOption = None,
    unit: UnitOption = "kg",
    distance_unit: DistanceUnitOption = "km",
    mode: ModeOption = "strict",
    json_out: JsonOption = False,
) -> None:
    """
    Classify each exercise's recent sessions: overload, stagnant, regression, fake PR.
    """
    unit = check_choice(unit, ("kg", "lbs"), "--unit")
    distance_unit = check_choice(distance_unit, DISTANCE_UNITS, "--distance-unit")
    mode = check_choice(mode, ("strict", "relaxed"), "--mode")

    try:
        result, _ = load_events(csv_path, catalog_path, mode, unit, distance_unit)  # type: ignore[arg-type]
    except (IngestionError, CatalogError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    events = result.events
    if exercise is not None:
        wanted = exercise.strip().lower()
        events = [e for e in events if e.exercise_title.lower() == wanted]
        if not events:
            views.print_error(f"No sets found for '{exercise}'")
            raise typer.Exit(1)

    trends = trends_by_exercise(events)

    if json_out:
        print(json.dumps({name: exercise_trend_to_dict(t) for name, t in trends.items()}, indent=2))
        return

    views.console.print()
    views.console.print(views.format_trend_table(trends))
    views.console.print()
