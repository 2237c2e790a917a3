"""structlog configuration for codechunk.

Every entry point (serverless handler, HTTP app, CLI) calls
:func:`configure_logging` once.  Events carry the bound ``job_id`` from
:mod:`structlog.contextvars`, so every line written while a transformation
job runs can be traced back to it.

Rendering is JSON when ``APP_ENV=production`` or ``json_output`` is set, and
a coloured console layout otherwise.  Records from the standard ``logging``
module (uvicorn, boto3) pass through the same processors.
"""

import logging
import os
import sys
from typing import TextIO

import structlog

# AWS SDK loggers dump full request/response wire data at DEBUG.
_NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _renderer(use_json: bool) -> structlog.types.Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def _route_stdlib_logging(
    level: str,
    output: TextIO,
    processors: list[structlog.types.Processor],
    renderer: structlog.types.Processor,
) -> None:
    handler = logging.StreamHandler(output)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *processors,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and the standard library root logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR.
        json_output: Force JSON rendering regardless of ``APP_ENV``.
        stream: Where rendered events go (default stdout).  The CLI passes
            stderr so its stdout stays machine-readable.

    Returns:
        A root structlog logger.
    """
    level = log_level.upper()
    output = stream or sys.stdout
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    processors = _shared_processors()
    renderer = _renderer(use_json)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )
    _route_stdlib_logging(level, output, processors, renderer)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a logger tagged with ``logger_name=name``.

    Falls back to :func:`configure_logging` defaults when nothing has
    configured structlog yet.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
