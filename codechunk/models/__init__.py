"""Pydantic data models for chunks, transformation wire formats, and jobs."""

from codechunk.models.chunk import Chunk, ChunkKind, Language, Provenance, SourceFile
from codechunk.models.job import (
    FileFailure,
    IngestionJob,
    InputFileRef,
    JobPhase,
    OutputFileDescriptor,
    TransformationReport,
)
from codechunk.models.transformation import (
    ContentBatch,
    FileContent,
    FileContents,
    InputFile,
    OriginalFileLocation,
    OutputFile,
    S3Location,
    TransformationEvent,
    TransformationOutput,
)

__all__ = [
    "Chunk",
    "ChunkKind",
    "ContentBatch",
    "FileContent",
    "FileContents",
    "FileFailure",
    "IngestionJob",
    "InputFile",
    "InputFileRef",
    "JobPhase",
    "Language",
    "OriginalFileLocation",
    "OutputFile",
    "OutputFileDescriptor",
    "Provenance",
    "S3Location",
    "SourceFile",
    "TransformationEvent",
    "TransformationOutput",
    "TransformationReport",
]
