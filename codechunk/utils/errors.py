"""Custom exception hierarchy for codechunk.

All application exceptions inherit from :class:`CodeChunkError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend (e.g. "s3", "local", "tree-sitter") caused the failure.

The hierarchy is organized by where in a transformation job the failure
happens:

    CodeChunkError  (base -- catch-all for any codechunk error)
    +-- InputError          (malformed location URI or content batch)
    +-- StorageError        (object-store get/put failure)
    +-- ParseError          (grammar could not parse code content)
    +-- ConfigurationError  (startup / missing config)
    +-- PipelineError       (job orchestration)
        +-- JobCancelledError  (deadline reached before the job finished)

An unsupported file type is not an error: such files simply yield no chunks.
"""


class CodeChunkError(Exception):
    """Base exception for all codechunk errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[s3] GetObject failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Input / storage errors
# ---------------------------------------------------------------------------

class InputError(CodeChunkError):
    """Raised for a malformed location URI or malformed content-batch JSON."""

    def __init__(
        self,
        message: str = "Invalid transformation input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StorageError(CodeChunkError):
    """Raised when reading from or writing to object storage fails.

    The orchestrator retries these a bounded number of times before letting
    them propagate to the scheduler, which owns the job-level retry policy.
    """

    def __init__(
        self,
        message: str = "Object storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Chunking errors
# ---------------------------------------------------------------------------

class ParseError(CodeChunkError):
    """Raised when a grammar cannot parse code content.

    Never aborts a file: the orchestrator falls back to paragraph chunking.
    """

    def __init__(
        self,
        message: str = "Source code could not be parsed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Orchestration / configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(CodeChunkError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PipelineError(CodeChunkError):
    """Raised when job orchestration fails."""

    def __init__(
        self,
        message: str = "Transformation job failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class JobCancelledError(PipelineError):
    """Raised when a job's deadline passes before all files are processed."""

    def __init__(
        self,
        message: str = "Transformation job cancelled",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
