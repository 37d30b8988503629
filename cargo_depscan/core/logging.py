"""Structured logging for cargo-depscan: structlog rendered through stdlib handlers.

stdout belongs to the report, so every record goes to stderr.
"""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

from cargo_depscan.exceptions import ConfigurationError

DEFAULT_LEVEL = "WARNING"
LOG_FORMATS = ("console", "json")


def _shared_processors(log_format: str) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if log_format == "json":
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors.append(structlog.processors.format_exc_info)
    return processors


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and the stdlib ``cargo_depscan`` logger.

    Environment:
        CARGO_DEPSCAN_LOG_LEVEL  — DEBUG, INFO, WARNING, ... (default: WARNING)
        CARGO_DEPSCAN_LOG_FORMAT — console | json (default: console)

    *level* (``--verbose`` passes ``"DEBUG"``) overrides the environment.
    Raises :class:`ConfigurationError` for an unknown level or format.
    """
    log_level = (level or os.environ.get("CARGO_DEPSCAN_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Unknown log level {log_level!r}")

    log_format = os.environ.get("CARGO_DEPSCAN_LOG_FORMAT", "console").lower()
    if log_format not in LOG_FORMATS:
        raise ConfigurationError(
            f"Unknown log format {log_format!r}; expected one of {', '.join(LOG_FORMATS)}"
        )

    shared = _shared_processors(log_format)
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "depscan": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "depscan",
                },
            },
            "loggers": {
                "cargo_depscan": {
                    "handlers": ["stderr"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )
