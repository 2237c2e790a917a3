"""Unit tests for ParagraphChunker: size-bounded paragraph packing."""

from __future__ import annotations

import pytest

from codechunk.models.chunk import ChunkKind, Provenance
from codechunk.services.ingestion.paragraph_chunker import ParagraphChunker
from tests.conftest import MARKDOWN_DOC


def _paragraphs(count: int, width: int = 40) -> list[str]:
    return [f"p{i:02d} " + "x" * (width - 4) for i in range(count)]


class TestBasics:
    def test_blank_content_yields_nothing(self) -> None:
        chunker = ParagraphChunker()
        assert chunker.chunk_text("", "a.md") == []
        assert chunker.chunk_text("  \n\n \t\n", "a.md") == []

    def test_small_document_is_one_chunk(self) -> None:
        chunks = ParagraphChunker().chunk_text(MARKDOWN_DOC, "docs/README.md")

        assert len(chunks) == 1
        chunk = chunks[0]
        assert chunk.kind is ChunkKind.TEXT
        assert chunk.language == "text"
        assert chunk.name is None
        assert chunk.content == MARKDOWN_DOC.strip()
        assert (chunk.start_line, chunk.end_line) == (1, 6)

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            ParagraphChunker(max_chunk_size=0)

    def test_provenance_is_attached(self) -> None:
        prov = Provenance(provider="github", organization="acme", repository="widgets")
        chunks = ParagraphChunker().chunk_text("hello", "x.md", provenance=prov)
        assert chunks[0].provenance == prov


class TestFlushRule:
    def test_flushes_when_next_paragraph_would_overflow(self) -> None:
        # 10 + 10 > 15: the second paragraph starts a new chunk.
        chunks = ParagraphChunker(max_chunk_size=15).chunk_text(
            "aaaaaaaaaa\n\nbbbbbbbbbb", "n.txt"
        )
        assert [c.content for c in chunks] == ["aaaaaaaaaa", "bbbbbbbbbb"]

    def test_packs_while_under_budget(self) -> None:
        chunks = ParagraphChunker(max_chunk_size=20).chunk_text(
            "aaaaaaaaaa\n\nbbbbbbbbbb", "n.txt"
        )
        # Joiner length is not counted: 10 + 10 is not > 20.
        assert [c.content for c in chunks] == ["aaaaaaaaaa\n\nbbbbbbbbbb"]

    def test_oversized_paragraph_is_not_split(self) -> None:
        big = "y" * 50
        chunks = ParagraphChunker(max_chunk_size=10).chunk_text(f"small\n\n{big}\n\ntail", "n.txt")
        assert [c.content for c in chunks] == ["small", big, "tail"]


class TestTotality:
    def test_every_paragraph_appears_once_in_order(self) -> None:
        paragraphs = _paragraphs(25)
        content = "\n\n".join(paragraphs)
        chunks = ParagraphChunker(max_chunk_size=200).chunk_text(content, "n.txt")

        assert len(chunks) > 1
        rebuilt = [p for chunk in chunks for p in chunk.content.split("\n\n")]
        assert rebuilt == paragraphs

    def test_whitespace_only_separator_lines(self) -> None:
        chunks = ParagraphChunker(max_chunk_size=5).chunk_text("one\n   \n\t\ntwo", "n.txt")
        assert [c.content for c in chunks] == ["one", "two"]


class TestLineNumbers:
    def test_exact_lines_per_chunk(self) -> None:
        content = "alpha\nbeta\n\n\ngamma\n\ndelta\nepsilon\n"
        chunks = ParagraphChunker(max_chunk_size=5).chunk_text(content, "n.txt")

        assert [(c.content, c.start_line, c.end_line) for c in chunks] == [
            ("alpha\nbeta", 1, 2),
            ("gamma", 5, 5),
            ("delta\nepsilon", 7, 8),
        ]

    def test_leading_blank_lines_are_skipped(self) -> None:
        chunks = ParagraphChunker().chunk_text("\n\n  hello\nworld\n", "n.txt")
        assert (chunks[0].start_line, chunks[0].end_line) == (3, 4)
        assert chunks[0].content == "hello\nworld"

    def test_single_paragraph_file_spans_all_lines(self) -> None:
        content = "\n".join(f"line {i}" for i in range(1, 8))
        chunks = ParagraphChunker().chunk_text(content, "n.txt")
        assert (chunks[0].start_line, chunks[0].end_line) == (1, 7)

    def test_lines_are_monotonic(self) -> None:
        content = "\n\n".join(_paragraphs(30))
        chunks = ParagraphChunker(max_chunk_size=100).chunk_text(content, "n.txt")
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.end_line < current.start_line
        for chunk in chunks:
            assert 1 <= chunk.start_line <= chunk.end_line
