"""
CLI entry point using Typer.

Provides commands for workout log analysis:
- import: Read a workout CSV and show detected columns
- resolve: Match exercise names against a catalog
- volume: Rolling weekly sets per muscle
- sets: Set-to-set progression per session
- trend: Multi-session strength trend per exercise
"""

import logging
from typing import Annotated

import typer

from ..logging import LOG_FORMATS, setup_logging
from .app import app, check_choice
from .commands import analysis, ingest, resolve, volume  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
    log_format: Annotated[
        str,
        typer.Option("--log-format", help="Log format: text or json"),
    ] = "text",
) -> None:
    """
    Workout log analysis: import, volume, set progression and trends.
    """
    log_format = check_choice(log_format, LOG_FORMATS, "--log-format")
    setup_logging(log_format, logging.DEBUG if verbose else logging.WARNING)


if __name__ == "__main__":
    app()
