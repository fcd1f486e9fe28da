"""Structured logging for the minutes pipeline.

structlog on top of stdlib logging. Output goes to stderr so the CLI can
keep stdout for per-file results. Two renderers:
- console: human-readable (default)
- json: one JSON object per line, for log collectors
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

_configured = False


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    log_format: str | None = None,
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging once per process.

    Later calls are ignored, so library modules can call this freely.

    Args:
        log_format: "json" or "console". Falls back to MINUTES_LOG_FORMAT, then "console".
        level: Log level name. Falls back to MINUTES_LOG_LEVEL, then "WARNING".
        stream: Destination stream. Defaults to stderr.
    """
    global _configured
    if _configured:
        return

    resolved_format = (log_format or os.environ.get("MINUTES_LOG_FORMAT", "console")).lower()
    resolved_level = level or os.environ.get("MINUTES_LOG_LEVEL", "WARNING")

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(resolved_format),
            ],
        )
    )

    package_logger = logging.getLogger("minutes")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, resolved_level.upper(), logging.WARNING))
    package_logger.propagate = False

    _configured = True


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Return a logger bound to a pipeline component.

    Args:
        component: Dotted component name, e.g. "preprocessing.silence_trim".
    """
    configure_logging()
    return structlog.get_logger(f"minutes.{component}").bind(component=component)  # type: ignore[no-any-return]
