"""Ingestion job models: one transformation invocation and its outcome.

An :class:`IngestionJob` is built from exactly one
:class:`~codechunk.models.transformation.TransformationEvent`, consumed
within one invocation, and never persisted beyond the response.  The
orchestrator walks it through :class:`JobPhase` in order:

    RECEIVED -> PROCESSING (per file) -> PERSISTED (per file) -> RESPONDED
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from codechunk.models.transformation import (
    ContentBatch,
    OriginalFileLocation,
    OutputFile,
    TransformationEvent,
    TransformationOutput,
)


class JobPhase(str, Enum):  # noqa: UP042
    RECEIVED = "RECEIVED"
    PROCESSING = "PROCESSING"
    PERSISTED = "PERSISTED"
    RESPONDED = "RESPONDED"


class InputFileRef(BaseModel):
    """One input file reference within a job."""

    model_config = ConfigDict(frozen=True)

    location_uri: str
    file_metadata: dict[str, str] | None = None
    content_batch_keys: list[str] = Field(default_factory=list)
    # Kept verbatim so the response echoes exactly what the scheduler sent.
    original_location: OriginalFileLocation


class IngestionJob(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_id: str
    bucket: str
    input_files: list[InputFileRef] = Field(default_factory=list)

    @classmethod
    def from_event(cls, event: TransformationEvent) -> IngestionJob:
        return cls(
            job_id=event.ingestion_job_id,
            bucket=event.bucket_name,
            input_files=[
                InputFileRef(
                    location_uri=item.original_file_location.s3_location.uri,
                    file_metadata=item.file_metadata,
                    content_batch_keys=[batch.key for batch in item.content_batches],
                    original_location=item.original_file_location,
                )
                for item in event.input_files
            ],
        )


class OutputFileDescriptor(BaseModel):
    """Response entry for one input file, in input order."""

    model_config = ConfigDict(frozen=True)

    original_location: OriginalFileLocation
    file_metadata: dict[str, str] | None = None
    content_batch_keys: list[str] = Field(default_factory=list)

    def to_output_file(self) -> OutputFile:
        return OutputFile(
            original_file_location=self.original_location,
            file_metadata=self.file_metadata,
            content_batches=[ContentBatch(key=key) for key in self.content_batch_keys],
        )


class FileFailure(BaseModel):
    """A per-file failure recorded when failure isolation is enabled."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    location_uri: str
    error_type: str
    message: str


class TransformationReport(BaseModel):
    """Everything the orchestrator learned while running one job."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    output: TransformationOutput
    # Chunks written per file, parallel to ``output.output_files``.
    chunk_counts: list[int] = Field(default_factory=list)
    failures: list[FileFailure] = Field(default_factory=list)
    elapsed_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def total_chunks(self) -> int:
        return sum(self.chunk_counts)
