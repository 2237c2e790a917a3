"""HTTP routes for codechunk.

    Endpoint                   Method  Description
    ──────────────────────────────────────────────────────────────────
    /api/v1/transformations    POST    Run one ingestion-job event
    /api/v1/chunks             POST    Chunk an inline document (no storage)
    /api/v1/health             GET     Health check

Service dependencies are read from ``app.state`` (populated in
``codechunk.main``) via ``Depends`` with the ``Annotated`` pattern.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from codechunk import __version__
from codechunk.api.schemas import ChunkRecord, ChunkRequest, ChunkResponse, HealthResponse
from codechunk.config.settings import Settings
from codechunk.models.chunk import SourceFile
from codechunk.models.transformation import TransformationEvent
from codechunk.pipeline.orchestrator import TransformationOrchestrator

router = APIRouter(prefix="/api/v1")


def _get_orchestrator(request: Request) -> TransformationOrchestrator:
    return request.app.state.orchestrator


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("/transformations", summary="Run a batch transformation job")
async def run_transformation(
    event: TransformationEvent,
    orchestrator: Annotated[TransformationOrchestrator, Depends(_get_orchestrator)],
) -> dict[str, Any]:
    output = await orchestrator.transform(event)
    return output.to_wire()


@router.post("/chunks", response_model=ChunkResponse, summary="Chunk one inline document")
async def chunk_document(
    body: ChunkRequest,
    orchestrator: Annotated[TransformationOrchestrator, Depends(_get_orchestrator)],
) -> ChunkResponse:
    language = orchestrator.registry.resolve(body.file_path)
    chunks = orchestrator.chunk_source(
        SourceFile(path=body.file_path, content=body.content, language=language)
    )
    return ChunkResponse(
        file_path=body.file_path,
        language=language.value,
        chunks=[
            ChunkRecord(content_body=chunk.content, content_metadata=chunk.to_content_metadata())
            for chunk in chunks
        ],
    )


@router.get("/health", response_model=HealthResponse, summary="Application health check")
async def health_check(
    orchestrator: Annotated[TransformationOrchestrator, Depends(_get_orchestrator)],
    settings: Annotated[Settings, Depends(_get_settings)],
) -> HealthResponse:
    bucket_ok = bool(settings.transformation_bucket)
    return HealthResponse(
        status="healthy" if bucket_ok else "degraded",
        version=__version__,
        storage_backend=settings.storage_backend,
        transformation_bucket_configured=bucket_ok,
        languages=orchestrator.registry.supported_languages,
    )
