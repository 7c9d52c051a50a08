"""Structured logging configuration using structlog.

Provides a single ``configure_logging`` entry-point that sets up structlog
processors and configures the stdlib root logger to emit structured JSON
(production) or human-readable console output (development). uvicorn's own
loggers propagate to the root logger, so access and error lines share the
same renderer.
"""

from __future__ import annotations

import logging
import sys

import structlog


def _add_service(service: str) -> structlog.types.Processor:
    """Build a processor that stamps every event with the service name."""

    def processor(
        logger: structlog.types.WrappedLogger,
        method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def configure_logging(
    *,
    json_logs: bool = True,
    log_level: str = "INFO",
    service: str = "pr-relay",
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_logs: When *True* (default / production), render logs as JSON.
            When *False* (development), use a colourful console renderer.
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).
        service: Value of the ``service`` field added to every record.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service(service),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
