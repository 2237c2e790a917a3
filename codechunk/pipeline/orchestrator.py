"""Transformation orchestrator: one ingestion job in, one response out.

Coordinates the grammar registry, structural extractor, paragraph chunker
and provenance enricher for every input file of a
:class:`~codechunk.models.transformation.TransformationEvent`, persists one
chunk batch per file, and assembles the
:class:`~codechunk.models.transformation.TransformationOutput`.

Per file, in request order:

    1. Parse the location URI (``scheme://bucket/key``); the key is the
       file path used for language detection, provenance and output naming.
    2. Fetch and concatenate the file's content batches.
    3. Resolve the language and chunk: structural extraction for code (with
       paragraph fallback on ParseError or zero chunks), paragraph chunking
       for text, nothing for unsupported files.
    4. Tag every chunk with provenance from the path.
    5. Write all chunks in a single put to
       ``{output_prefix}/{jobId}/{filePath}.json``.
    6. Emit an output descriptor pointing at the new batch.

Files may be processed concurrently (``max_concurrent_files``) but the
response always preserves input order.  By default any InputError or
StorageError aborts the job; with ``isolate_file_failures`` an InputError
only empties that file's output.
"""

from __future__ import annotations

import asyncio
import re
import time
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from codechunk.config.settings import Settings
from codechunk.interfaces.object_store import IObjectStore
from codechunk.models.chunk import Chunk, Language, SourceFile
from codechunk.models.job import (
    FileFailure,
    IngestionJob,
    InputFileRef,
    JobPhase,
    OutputFileDescriptor,
    TransformationReport,
)
from codechunk.models.transformation import (
    FileContent,
    FileContents,
    TransformationEvent,
    TransformationOutput,
)
from codechunk.pipeline.cancellation import CancellationToken
from codechunk.services.ingestion.grammar_registry import GrammarRegistry
from codechunk.services.ingestion.paragraph_chunker import ParagraphChunker
from codechunk.services.ingestion.provenance import derive_provenance, enrich_chunks
from codechunk.services.ingestion.structural_extractor import StructuralExtractor
from codechunk.utils.concurrency import retry_async, throttled_gather
from codechunk.utils.errors import ConfigurationError, InputError, ParseError, StorageError
from codechunk.utils.logging import get_logger

_LOCATION_URI = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*)://([^/]+)/(.+)$")


def parse_location_uri(uri: str) -> tuple[str, str]:
    """Split ``scheme://bucket/key`` into ``(bucket, key)``.

    Raises
    ------
    InputError
        If *uri* does not have that shape.
    """
    match = _LOCATION_URI.match(uri)
    if match is None:
        raise InputError(f"Invalid location URI: {uri!r}")
    return match.group(2), match.group(3)


@dataclass(frozen=True)
class _FileResult:
    descriptor: OutputFileDescriptor
    chunk_count: int
    failure: FileFailure | None = None


class TransformationOrchestrator:
    """Runs one ingestion job through the chunking engine.

    Parameters
    ----------
    object_store:
        Reads raw content batches and receives chunk batches.
    settings:
        Output bucket/prefix, chunk size and job execution knobs.
    registry, extractor, paragraph_chunker:
        Optional overrides; defaults are built from *settings*.
    """

    def __init__(
        self,
        object_store: IObjectStore,
        settings: Settings,
        registry: GrammarRegistry | None = None,
        extractor: StructuralExtractor | None = None,
        paragraph_chunker: ParagraphChunker | None = None,
    ) -> None:
        self._store = object_store
        self._settings = settings
        self._registry = registry or GrammarRegistry()
        self._extractor = extractor or StructuralExtractor(self._registry)
        self._paragraph_chunker = paragraph_chunker or ParagraphChunker(settings.max_chunk_size)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def registry(self) -> GrammarRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def transform(self, event: TransformationEvent | dict[str, Any]) -> TransformationOutput:
        """Run the job described by *event* and return only the response."""
        report = await self.run(event)
        return report.output

    async def run(
        self,
        event: TransformationEvent | dict[str, Any],
        cancellation: CancellationToken | None = None,
    ) -> TransformationReport:
        """Run the job described by *event* and return a full report.

        Raises
        ------
        ConfigurationError
            If no transformation bucket is configured.
        InputError
            On a malformed event, location URI or content batch (unless
            failures are isolated).
        StorageError
            When storage keeps failing after the configured retries.
        JobCancelledError
            When *cancellation* fires before the job completes.
        """
        if not self._settings.transformation_bucket:
            raise ConfigurationError("TRANSFORMATION_BUCKET is not configured")

        event = self._coerce_event(event)
        job = IngestionJob.from_event(event)
        token = cancellation or CancellationToken(self._settings.job_deadline_seconds)
        start = time.monotonic()

        with structlog.contextvars.bound_contextvars(job_id=job.job_id):
            self._logger.info(
                "job_phase",
                phase=JobPhase.RECEIVED.value,
                num_files=len(job.input_files),
                source_bucket=job.bucket,
            )

            semaphore = asyncio.Semaphore(self._settings.max_concurrent_files)
            results: list[_FileResult] = await throttled_gather(
                [self._process_file(job, index, ref, token) for index, ref in enumerate(job.input_files)],
                semaphore,
            )

            report = TransformationReport(
                job_id=job.job_id,
                output=TransformationOutput(
                    output_files=[result.descriptor.to_output_file() for result in results]
                ),
                chunk_counts=[result.chunk_count for result in results],
                failures=[result.failure for result in results if result.failure is not None],
                elapsed_seconds=round(time.monotonic() - start, 3),
            )

            self._logger.info(
                "job_phase",
                phase=JobPhase.RESPONDED.value,
                num_files=len(results),
                total_chunks=report.total_chunks,
                failures=len(report.failures),
                elapsed_s=report.elapsed_seconds,
            )
        return report

    def chunk_source(self, source: SourceFile) -> list[Chunk]:
        """Chunk one fetched file and tag the chunks with provenance."""
        if source.language is Language.UNSUPPORTED:
            self._logger.info("unsupported_file_skipped", file_path=source.path)
            chunks: list[Chunk] = []
        elif source.language is Language.TEXT:
            chunks = self._paragraph_chunker.chunk_text(source.content, source.path)
        else:
            chunks = self._chunk_code(source)

        return enrich_chunks(chunks, derive_provenance(source.path))

    def output_key(self, job_id: str, file_path: str) -> str:
        prefix = self._settings.output_prefix.strip("/")
        return f"{prefix}/{job_id}/{file_path}.json" if prefix else f"{job_id}/{file_path}.json"

    # ------------------------------------------------------------------
    # Per-file processing
    # ------------------------------------------------------------------

    async def _process_file(
        self,
        job: IngestionJob,
        index: int,
        ref: InputFileRef,
        token: CancellationToken,
    ) -> _FileResult:
        token.raise_if_cancelled(f"file {index}")
        self._logger.debug("job_phase", phase=JobPhase.PROCESSING.value, index=index, uri=ref.location_uri)

        file_path: str | None = None
        try:
            _, file_path = parse_location_uri(ref.location_uri)
            content = await self._fetch_content(job.bucket, ref.content_batch_keys)
        except InputError as exc:
            if not self._settings.isolate_file_failures:
                raise
            return await self._isolated_failure(job, index, ref, file_path, exc, token)

        source = SourceFile(path=file_path, content=content, language=self._registry.resolve(file_path))
        self._logger.info(
            "file_retrieved",
            file_path=file_path,
            language=source.language.value,
            num_chars=len(content),
        )

        chunks = self.chunk_source(source)
        key = await self._persist(job.job_id, file_path, chunks, token)
        self._logger.info(
            "job_phase",
            phase=JobPhase.PERSISTED.value,
            index=index,
            file_path=file_path,
            num_chunks=len(chunks),
            key=key,
        )

        return _FileResult(
            descriptor=OutputFileDescriptor(
                original_location=ref.original_location,
                file_metadata=ref.file_metadata,
                content_batch_keys=[key],
            ),
            chunk_count=len(chunks),
        )

    def _chunk_code(self, source: SourceFile) -> list[Chunk]:
        try:
            chunks = self._extractor.extract(source.content, source.path, source.language)
        except ParseError as exc:
            self._logger.warning(
                "structural_extraction_failed",
                file_path=source.path,
                language=source.language.value,
                error=str(exc),
            )
            chunks = []

        if not chunks:
            self._logger.info("falling_back_to_text_chunking", file_path=source.path)
            chunks = self._paragraph_chunker.chunk_text(source.content, source.path)
        return chunks

    async def _fetch_content(self, bucket: str, batch_keys: list[str]) -> str:
        """Concatenate the bodies of every content batch, in listed order."""
        parts: list[str] = []
        for batch_key in batch_keys:
            raw = await self._with_retry(
                lambda k=batch_key: self._store.get_object(bucket, k),
                operation="get_object",
            )
            try:
                batch = FileContents.model_validate_json(raw)
            except ValidationError as exc:
                raise InputError(f"Malformed content batch {bucket}/{batch_key}: {exc}") from exc
            parts.append(batch.joined_body())
        return "".join(parts)

    async def _persist(
        self,
        job_id: str,
        file_path: str,
        chunks: list[Chunk],
        token: CancellationToken,
    ) -> str:
        """Write every chunk of one file in a single put and return its key."""
        token.raise_if_cancelled(f"persisting {file_path}")

        key = self.output_key(job_id, file_path)
        body = FileContents(
            file_contents=[
                FileContent(content_body=chunk.content, content_metadata=chunk.to_content_metadata())
                for chunk in chunks
            ]
        ).to_json().encode("utf-8")

        bucket = self._settings.transformation_bucket
        await self._with_retry(
            lambda: self._store.put_object(bucket, key, body, "application/json"),
            operation="put_object",
        )
        return key

    async def _isolated_failure(
        self,
        job: IngestionJob,
        index: int,
        ref: InputFileRef,
        file_path: str | None,
        exc: InputError,
        token: CancellationToken,
    ) -> _FileResult:
        """Record *exc* for one file and emit an empty-chunk descriptor."""
        self._logger.warning(
            "file_failed_isolated",
            index=index,
            uri=ref.location_uri,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        keys: list[str] = []
        if file_path is not None:
            keys.append(await self._persist(job.job_id, file_path, [], token))

        return _FileResult(
            descriptor=OutputFileDescriptor(
                original_location=ref.original_location,
                file_metadata=ref.file_metadata,
                content_batch_keys=keys,
            ),
            chunk_count=0,
            failure=FileFailure(
                index=index,
                location_uri=ref.location_uri,
                error_type=type(exc).__name__,
                message=str(exc),
            ),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _with_retry(self, fn, operation: str):  # noqa: ANN001, ANN202
        return await retry_async(
            fn,
            attempts=self._settings.storage_max_attempts,
            backoff_seconds=self._settings.storage_retry_backoff_seconds,
            retry_on=(StorageError,),
            operation=operation,
            logger=self._logger,
        )

    @staticmethod
    def _coerce_event(event: TransformationEvent | dict[str, Any]) -> TransformationEvent:
        if isinstance(event, TransformationEvent):
            return event
        try:
            return TransformationEvent.model_validate(event)
        except ValidationError as exc:
            raise InputError(f"Malformed transformation event: {exc}") from exc
