"""Logging setup for the lift-insights CLI.

Logs go to stderr so that ``--json`` output on stdout stays parseable.
``--log-format json`` emits one JSON object per record, carrying the
``lift_*`` extras that ingestion attaches (source format, row and event
counts). ``--verbose`` lowers the level from WARNING to DEBUG.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone

LOG_FORMATS = ("text", "json")
EXTRA_PREFIX = "lift_"

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        # Ingestion counters, e.g. lift_source_format, lift_row_count, lift_event_count
        entry.update(
            (key, value) for key, value in record.__dict__.items() if key.startswith(EXTRA_PREFIX)
        )

        return json.dumps(entry, default=str)


def setup_logging(log_format: str = "text", level: int = logging.WARNING) -> None:
    """
    Route all logging to stderr in the chosen format.

    Handlers left by an earlier call are replaced, so repeated CLI
    invocations in one process do not duplicate output.

    Raises:
        ValueError: If ``log_format`` is not "text" or "json"
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format}")

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
