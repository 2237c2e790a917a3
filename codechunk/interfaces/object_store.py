"""Abstract base class for object-storage providers.

The orchestrator reads raw content batches and writes chunk batches through
this contract only, so the core runs against S3 in production, a local
directory from the CLI, and an in-memory fake in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IObjectStore(ABC):
    """Contract for bucket/key object storage.

    Both operations are async so network-backed stores never block the event
    loop.  Implementations raise
    :class:`~codechunk.utils.errors.StorageError` for every backend failure,
    including a missing object.
    """

    @abstractmethod
    async def get_object(self, bucket: str, key: str) -> bytes:
        """Return the full body stored at *bucket*/*key*.

        Raises
        ------
        codechunk.utils.errors.StorageError
            If the object is missing or cannot be read.
        """

    @abstractmethod
    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/json",
    ) -> None:
        """Store *body* at *bucket*/*key*, replacing any existing object.

        The write is all-or-nothing: readers never observe a partial body.

        Raises
        ------
        codechunk.utils.errors.StorageError
            If the object cannot be written.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this backend (e.g. ``"s3"``)."""
