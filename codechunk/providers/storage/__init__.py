"""Object storage adapters plus the settings-driven factory."""

from __future__ import annotations

from codechunk.config.settings import Settings
from codechunk.interfaces.object_store import IObjectStore
from codechunk.providers.storage.local_store import LocalObjectStore
from codechunk.providers.storage.s3_store import S3ObjectStore


def build_object_store(settings: Settings) -> IObjectStore:
    """Return the object store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "local":
        return LocalObjectStore(settings.local_storage_root)
    return S3ObjectStore(region_name=settings.aws_region or None)


__all__ = ["LocalObjectStore", "S3ObjectStore", "build_object_store"]
