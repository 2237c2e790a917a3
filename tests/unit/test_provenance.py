"""Unit tests for provenance derivation from repository paths."""

from __future__ import annotations

from codechunk.models.chunk import Chunk, ChunkKind, Provenance
from codechunk.services.ingestion.provenance import derive_provenance, enrich_chunks


def _chunk(path: str = "a/b/c/d.ts") -> Chunk:
    return Chunk(
        content="x",
        language="typescript",
        file_path=path,
        kind=ChunkKind.FUNCTION,
        name="f",
        start_line=1,
        end_line=1,
    )


class TestDeriveProvenance:
    def test_full_path(self) -> None:
        assert derive_provenance("github/acme/widgets/src/index.ts") == Provenance(
            provider="github", organization="acme", repository="widgets"
        )

    def test_exactly_three_segments(self) -> None:
        prov = derive_provenance("gitlab/team/README.md")
        assert prov is not None
        assert prov.repository == "README.md"

    def test_short_paths_have_none(self) -> None:
        assert derive_provenance("index.ts") is None
        assert derive_provenance("src/index.ts") is None

    def test_segments_are_positional(self) -> None:
        prov = derive_provenance("not-a-provider/x/y/z.java")
        assert prov is not None
        assert prov.provider == "not-a-provider"


class TestEnrichChunks:
    def test_tags_every_chunk(self) -> None:
        prov = Provenance(provider="github", organization="acme", repository="widgets")
        enriched = enrich_chunks([_chunk(), _chunk()], prov)
        assert all(c.provenance == prov for c in enriched)

    def test_none_leaves_chunks_untouched(self) -> None:
        original = [_chunk()]
        enriched = enrich_chunks(original, None)
        assert enriched == original
        assert enriched is not original
