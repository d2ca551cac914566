"""
structlog setup.

The terminal belongs to the UI, so log events are never written to stdout:
with a debug path they are appended to that file as key/value lines, without
one they are dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

import structlog

from tinyhatchet.core.exceptions import ConfigError

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# debug log file currently handed to structlog, closed on reconfigure
_sink: TextIO | None = None


def configure_logging(debug_path: str = "", level: str = "INFO") -> None:
    """(Re)configure structlog; calling it again closes the previous debug log."""
    global _sink

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
    ]

    sink: TextIO | None = None
    if debug_path:
        path = Path(debug_path).expanduser()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            sink = path.open("a", encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot open debug log {path}: {exc}") from exc
        factory = structlog.WriteLoggerFactory(file=sink)
        threshold = _LEVELS.get(level.upper(), logging.INFO)
    else:
        factory = structlog.ReturnLoggerFactory()
        threshold = logging.CRITICAL

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        logger_factory=factory,
        cache_logger_on_first_use=False,
    )

    previous, _sink = _sink, sink
    if previous is not None:
        previous.close()
