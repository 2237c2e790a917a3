"""Provenance tags from the repository path convention.

Source files are stored under ``provider/organization/repository/...``, e.g.
``github/acme/widgets/src/index.ts``.  The first three path segments are
taken positionally; nothing checks that they name a real provider or
repository.  Paths with fewer than three segments carry no provenance.
"""

from __future__ import annotations

import structlog

from codechunk.models.chunk import Chunk, Provenance

logger = structlog.get_logger(logger_name=__name__)


def derive_provenance(file_path: str) -> Provenance | None:
    """Return ``Provenance`` for *file_path*, or ``None`` below three segments."""
    parts = file_path.split("/")
    if len(parts) < 3:
        logger.info("provenance_unavailable", file_path=file_path, segments=len(parts))
        return None
    return Provenance(provider=parts[0], organization=parts[1], repository=parts[2])


def enrich_chunks(chunks: list[Chunk], provenance: Provenance | None) -> list[Chunk]:
    """Tag every chunk of one file with the same *provenance*."""
    if provenance is None:
        return list(chunks)
    return [chunk.with_provenance(provenance) for chunk in chunks]
