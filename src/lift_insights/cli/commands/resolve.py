"""Resolve command: show how exercise names map onto the catalog."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...core.resolver import create_resolver
from ...io.catalog import load_catalog
from ...io.errors import CatalogError
from ...io.serializers import resolution_to_dict
from .. import views
from ..app import JsonOption, ModeOption, app, check_choice


@app.command()
def resolve(
    names: Annotated[list[str], typer.Argument(help="Exercise names as logged")],
    catalog_path: Annotated[
        Path,
        typer.Option("--catalog", "-c", help="Exercise catalog CSV"),
    ],
    mode: ModeOption = "strict",
    json_out: JsonOption = False,
) -> None:
    """
    Resolve exercise names to catalog names and show the matching method.
    """
    mode = check_choice(mode, ("strict", "relaxed"), "--mode")

    try:
        catalog = load_catalog(catalog_path)
    except CatalogError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    resolver = create_resolver([e.name for e in catalog], mode)  # type: ignore[arg-type]
    results = [(name, resolver.resolve(name)) for name in names]

    if json_out:
        print(json.dumps([resolution_to_dict(raw, r) for raw, r in results], indent=2))
        return

    views.console.print()
    views.console.print(views.format_resolution_table(results))
    views.console.print()
