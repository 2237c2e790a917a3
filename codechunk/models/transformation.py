"""Wire models for the knowledge-base custom transformation contract.

The managed ingestion scheduler invokes the transformation step with a
:class:`TransformationEvent` and expects a :class:`TransformationOutput`
back.  Content moves between the two through object storage in the
:class:`FileContents` format, both for the raw batches the scheduler hands
in and for the chunk batches this service writes out.

Field names on the wire are camelCase (``inputFiles``, ``contentBatches``)
except ``s3_location``, which the scheduler sends in snake case.  Every model
accepts either the wire alias or the Python field name, and
:meth:`TransformationOutput.to_wire` renders aliases with absent optionals
dropped.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True)
# Locations are echoed back verbatim, including keys this service does not read.
_LOCATION_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


# ---------------------------------------------------------------------------
# Shared location / batch references
# ---------------------------------------------------------------------------
class S3Location(BaseModel):
    model_config = _LOCATION_CONFIG

    uri: str


class OriginalFileLocation(BaseModel):
    """Where the scheduler found the source file; echoed back untouched."""

    model_config = _LOCATION_CONFIG

    type: str = "S3"
    s3_location: S3Location


class ContentBatch(BaseModel):
    model_config = _WIRE_CONFIG

    key: str


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------
class InputFile(BaseModel):
    model_config = _WIRE_CONFIG

    original_file_location: OriginalFileLocation = Field(alias="originalFileLocation")
    file_metadata: dict[str, str] | None = Field(default=None, alias="fileMetadata")
    content_batches: list[ContentBatch] = Field(default_factory=list, alias="contentBatches")


class TransformationEvent(BaseModel):
    """One batch-transformation request from the ingestion scheduler."""

    model_config = _WIRE_CONFIG

    version: str = "1.0"
    knowledge_base_id: str = Field(default="", alias="knowledgeBaseId")
    data_source_id: str = Field(default="", alias="dataSourceId")
    ingestion_job_id: str = Field(alias="ingestionJobId")
    bucket_name: str = Field(alias="bucketName")
    prior_task: str = Field(default="", alias="priorTask")
    input_files: list[InputFile] = Field(default_factory=list, alias="inputFiles")


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------
class OutputFile(BaseModel):
    model_config = _WIRE_CONFIG

    original_file_location: OriginalFileLocation = Field(alias="originalFileLocation")
    file_metadata: dict[str, str] | None = Field(default=None, alias="fileMetadata")
    content_batches: list[ContentBatch] = Field(default_factory=list, alias="contentBatches")


class TransformationOutput(BaseModel):
    """Response returned to the ingestion scheduler."""

    model_config = _WIRE_CONFIG

    output_files: list[OutputFile] = Field(default_factory=list, alias="outputFiles")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Persisted batch
# ---------------------------------------------------------------------------
class FileContent(BaseModel):
    model_config = _WIRE_CONFIG

    content_body: str = Field(alias="contentBody")
    content_type: str = Field(default="TEXT", alias="contentType")
    content_metadata: dict[str, str] = Field(default_factory=dict, alias="contentMetadata")


class FileContents(BaseModel):
    """A content batch document: the JSON object stored under one batch key."""

    model_config = _WIRE_CONFIG

    file_contents: list[FileContent] = Field(default_factory=list, alias="fileContents")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    def joined_body(self) -> str:
        """Concatenate every ``contentBody`` with newlines."""
        return "\n".join(item.content_body for item in self.file_contents)
