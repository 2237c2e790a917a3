"""Filesystem-backed object store for local runs and the CLI.

Each bucket is a directory under ``root`` and each key a relative path
inside it, so ``put_object("kb", "transformations/j1/a.json", ...)`` lands at
``<root>/kb/transformations/j1/a.json``.  Writes go to a temporary sibling
first and are moved into place with ``os.replace`` so a reader never sees a
half-written batch.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path, PurePosixPath

import structlog

from codechunk.interfaces.object_store import IObjectStore
from codechunk.utils.errors import StorageError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "local"


class LocalObjectStore(IObjectStore):
    """Directory-per-bucket implementation of :class:`IObjectStore`."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    async def get_object(self, bucket: str, key: str) -> bytes:
        path = self._resolve(bucket, key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StorageError(
                message=f"Cannot read {bucket}/{key}: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

    async def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/json",
    ) -> None:
        path = self._resolve(bucket, key)
        try:
            await asyncio.to_thread(self._write_atomic, path, body)
        except OSError as exc:
            raise StorageError(
                message=f"Cannot write {bucket}/{key}: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        logger.debug("local_object_written", path=str(path), size=len(body))

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def _resolve(self, bucket: str, key: str) -> Path:
        parts = PurePosixPath(key).parts
        if not bucket or not parts or PurePosixPath(key).is_absolute() or ".." in parts:
            raise StorageError(
                message=f"Refusing unsafe object path {bucket!r}/{key!r}",
                provider_name=_PROVIDER_NAME,
            )
        return self._root.joinpath(bucket, *parts)

    @staticmethod
    def _write_atomic(path: Path, body: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(body)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
