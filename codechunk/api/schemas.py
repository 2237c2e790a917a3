"""Pydantic request/response schemas for the codechunk HTTP API.

The transformation endpoint reuses the wire models from
:mod:`codechunk.models.transformation` directly; the schemas here cover
the ad-hoc chunking endpoint, health and errors.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChunkRequest(BaseModel):
    """Inline document to chunk without touching storage."""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., min_length=1, alias="filePath")
    content: str


class ChunkRecord(BaseModel):
    """One chunk in persisted-batch shape."""

    model_config = ConfigDict(populate_by_name=True)

    content_body: str = Field(alias="contentBody")
    content_metadata: dict[str, str] = Field(alias="contentMetadata")


class ChunkResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    language: str
    chunks: list[ChunkRecord] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    storage_backend: str
    transformation_bucket_configured: bool
    languages: list[str]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
