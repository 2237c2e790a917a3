"""Serverless entry point for the knowledge-base custom transformation step.

The ingestion scheduler invokes :func:`handler` with the raw event dict and
a runtime context.  Settings come from the environment (the transformation
bucket in particular is supplied out of band, never by the event); the
orchestrator is built once per warm container and reused across
invocations, while every invocation still owns its own job state.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from codechunk.config.settings import Settings
from codechunk.interfaces.object_store import IObjectStore
from codechunk.pipeline.cancellation import CancellationToken
from codechunk.pipeline.orchestrator import TransformationOrchestrator
from codechunk.providers.storage import build_object_store
from codechunk.utils.logging import configure_logging, get_logger

_orchestrator: TransformationOrchestrator | None = None
_settings: Settings | None = None


def build_orchestrator(
    settings: Settings,
    object_store: IObjectStore | None = None,
) -> TransformationOrchestrator:
    """Wire a :class:`TransformationOrchestrator` from *settings*."""
    return TransformationOrchestrator(
        object_store=object_store or build_object_store(settings),
        settings=settings,
    )


def _get_orchestrator() -> tuple[TransformationOrchestrator, Settings]:
    global _orchestrator, _settings
    if _orchestrator is None or _settings is None:
        _settings = Settings()
        configure_logging(
            log_level=_settings.log_level,
            json_output=(_settings.app_env == "production"),
        )
        _orchestrator = build_orchestrator(_settings)
    return _orchestrator, _settings


def _cancellation_for(context: Any, settings: Settings) -> CancellationToken:
    """Derive the job deadline from the runtime context when it offers one."""
    remaining = getattr(context, "get_remaining_time_in_millis", None)
    if callable(remaining):
        return CancellationToken.from_remaining_millis(
            remaining(), settings.deadline_safety_margin_seconds
        )
    return CancellationToken(settings.job_deadline_seconds)


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Transform one ingestion-job event and return the wire response."""
    orchestrator, settings = _get_orchestrator()
    logger: structlog.BoundLogger = get_logger(__name__)
    logger.info(
        "transformation_event_received",
        ingestion_job_id=event.get("ingestionJobId"),
        num_files=len(event.get("inputFiles") or []),
    )

    report = asyncio.run(orchestrator.run(event, _cancellation_for(context, settings)))
    return report.output.to_wire()
