"""Chunk data models: the unit handed to downstream embedding and indexing.

Defines Pydantic v2 models for source files, chunks, and the provenance tags
derived from a file's storage path.  All models are frozen; enrichment
produces new instances via ``model_copy(update={...})``.

A chunk is one contiguous slice of a single source file:

    - Code files are chunked structurally (one chunk per class, function,
      method ... declaration).  A method inside a class yields its own chunk
      in addition to the class chunk, so chunks can overlap.
    - Documents, and code the grammar cannot handle, are chunked by
      paragraph into size-bounded text chunks.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Language(str, Enum):  # noqa: UP042
    """Content language detected from a file extension."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    JAVA = "java"
    CSHARP = "csharp"
    TEXT = "text"
    UNSUPPORTED = "unsupported"

    @property
    def is_code(self) -> bool:
        return self not in (Language.TEXT, Language.UNSUPPORTED)


class ChunkKind(str, Enum):  # noqa: UP042
    """Semantic role of a chunk, written to ``contentMetadata["type"]``."""

    CLASS = "class"
    FUNCTION = "function"
    INTERFACE = "interface"
    METHOD = "method"
    BLOCK = "block"
    TEXT = "text"


class Provenance(BaseModel):
    """Repository tags derived from a ``provider/org/repo/...`` path."""

    model_config = ConfigDict(frozen=True)

    provider: str
    organization: str
    repository: str


class SourceFile(BaseModel):
    """One input file after its content batches have been fetched."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
    language: Language


class Chunk(BaseModel):
    """A bounded slice of one source file plus its metadata."""

    model_config = ConfigDict(frozen=True)

    content: str
    language: str
    file_path: str
    kind: ChunkKind
    # None for nodes without a name field (e.g. export statements) and for
    # text chunks.
    name: str | None = None
    start_line: int = Field(ge=1)
    end_line: int = Field(ge=1)
    provenance: Provenance | None = None

    @model_validator(mode="after")
    def _check_line_range(self) -> Chunk:
        if self.end_line < self.start_line:
            raise ValueError(
                f"end_line ({self.end_line}) precedes start_line ({self.start_line})"
            )
        return self

    @property
    def is_code(self) -> bool:
        return self.kind is not ChunkKind.TEXT

    def with_provenance(self, provenance: Provenance | None) -> Chunk:
        """Return a copy of this chunk tagged with *provenance*."""
        return self.model_copy(update={"provenance": provenance})

    def to_content_metadata(self) -> dict[str, str]:
        """Render the string-only ``contentMetadata`` map for a persisted batch.

        Always carries ``filePath``, ``type``, ``startLine`` and ``endLine``.
        Code chunks add ``language`` and ``name`` (empty when anonymous);
        chunks with provenance add the three ``git*`` keys.
        """
        metadata: dict[str, str] = {
            "filePath": self.file_path,
            "type": self.kind.value,
            "startLine": str(self.start_line),
            "endLine": str(self.end_line),
        }
        if self.is_code:
            metadata["language"] = self.language
            metadata["name"] = self.name or ""
        if self.provenance is not None:
            metadata["gitProvider"] = self.provenance.provider
            metadata["gitOrganization"] = self.provenance.organization
            metadata["gitRepository"] = self.provenance.repository
        return metadata
