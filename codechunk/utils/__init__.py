"""Utility modules for codechunk.

- **errors** -- Exception hierarchy rooted at CodeChunkError; each stage of
  a transformation job raises its own subclass.
- **concurrency** -- Semaphore-bounded gathering and bounded retry used by
  the orchestrator for storage I/O.
- **logging** -- structlog setup: coloured console output in development,
  structured JSON in production.
"""

from codechunk.utils.concurrency import retry_async, throttled_gather
from codechunk.utils.errors import (
    CodeChunkError,
    ConfigurationError,
    InputError,
    JobCancelledError,
    ParseError,
    PipelineError,
    StorageError,
)
from codechunk.utils.logging import configure_logging, get_logger

__all__ = [
    "CodeChunkError",
    "ConfigurationError",
    "InputError",
    "JobCancelledError",
    "ParseError",
    "PipelineError",
    "StorageError",
    "configure_logging",
    "get_logger",
    "retry_async",
    "throttled_gather",
]
