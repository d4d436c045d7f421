"""
Log configuration.

Lines are flat ``key=value`` pairs joined by commas, e.g.::

    2024/01/02 15:04:05 run_id=run-abc,workspace_name=net-prod,action=apply
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog


TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if hasattr(value, "value") and isinstance(value.value, str):
        return value.value
    return str(value)


class CommaKeyValueRenderer:
    """
    Render an event dict as ``k=v,k=v``.

    The event name identifies the line for tests and filtering but isn't
    printed. Anything louder than info gets a leading ``level=`` field.
    """

    def __call__(self, logger: Any, method_name: str, event_dict: dict) -> str:
        event_dict = dict(event_dict)
        event_dict.pop("event", None)
        timestamp = event_dict.pop("timestamp", None)
        level = event_dict.pop("level", method_name)

        fields = []
        if level not in ("debug", "info"):
            fields.append(f"level={level}")
        fields.extend(f"{key}={_format_value(value)}" for key, value in event_dict.items())

        line = ",".join(fields)
        if timestamp:
            return f"{timestamp} {line}"
        return line


def configure_logging(debug: bool = False, stream: TextIO = None) -> None:
    """Send structlog output to stderr, filtered at info (or debug)."""
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt=TIMESTAMP_FORMAT, utc=False),
            CommaKeyValueRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
