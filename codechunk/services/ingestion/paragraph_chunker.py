"""Paragraph-based text chunking with size-bounded accumulation.

Used for documents (Markdown, JSON, YAML ...) and as the safety net for code
that could not be chunked structurally.

The algorithm:

1. Split the content on blank-line boundaries (one or more lines holding
   only whitespace) and drop empty paragraphs.
2. Greedily pack paragraphs into a buffer joined by ``"\\n\\n"``.  Before a
   paragraph is appended, if the buffer is non-empty and
   ``len(buffer) + len(paragraph) > max_chunk_size``, the buffer is flushed
   as a chunk and the paragraph starts a new buffer.
3. Flush whatever remains.

A paragraph larger than ``max_chunk_size`` is never split; it becomes a
chunk on its own.  Line numbers are exact: a chunk starts on the line of the
first non-blank character of its first paragraph and ends on the line of
the last non-blank character of its last paragraph.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import structlog

from codechunk.models.chunk import Chunk, ChunkKind, Language, Provenance

logger = structlog.get_logger(logger_name=__name__)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_PARAGRAPH_JOINER = "\n\n"

DEFAULT_MAX_CHUNK_SIZE = 1000


@dataclass(frozen=True)
class _Paragraph:
    text: str
    start_line: int
    end_line: int


class _LineCounter:
    """Maps increasing character offsets to 1-based line numbers in O(n) total."""

    def __init__(self, content: str) -> None:
        self._content = content
        self._pos = 0
        self._line = 1

    def line_at(self, offset: int) -> int:
        self._line += self._content.count("\n", self._pos, offset)
        self._pos = offset
        return self._line


class ParagraphChunker:
    """Splits plain text into paragraph-aligned chunks.

    Parameters
    ----------
    max_chunk_size:
        Character budget that triggers a flush (default 1000).
    """

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> None:
        if max_chunk_size < 1:
            raise ValueError("max_chunk_size must be positive")
        self._max_chunk_size = max_chunk_size

    @property
    def max_chunk_size(self) -> int:
        return self._max_chunk_size

    def chunk_text(
        self,
        content: str,
        file_path: str,
        provenance: Provenance | None = None,
    ) -> list[Chunk]:
        """Split *content* into ``kind=text`` chunks.

        Returns an empty list when *content* is blank.
        """
        if not content.strip():
            return []

        chunks: list[Chunk] = []
        buffer = ""
        start_line = end_line = 1

        for paragraph in self._split_paragraphs(content):
            if buffer and len(buffer) + len(paragraph.text) > self._max_chunk_size:
                chunks.append(self._make_chunk(buffer, file_path, start_line, end_line, provenance))
                buffer = ""

            if buffer:
                buffer += _PARAGRAPH_JOINER + paragraph.text
            else:
                buffer = paragraph.text
                start_line = paragraph.start_line
            end_line = paragraph.end_line

        if buffer.strip():
            chunks.append(self._make_chunk(buffer, file_path, start_line, end_line, provenance))

        logger.debug(
            "paragraph_chunking_complete",
            file_path=file_path,
            num_chunks=len(chunks),
            max_chunk_size=self._max_chunk_size,
        )
        return chunks

    @staticmethod
    def _split_paragraphs(content: str) -> list[_Paragraph]:
        """Split on blank lines, keeping each paragraph's exact line span."""
        lines = _LineCounter(content)
        paragraphs: list[_Paragraph] = []

        boundaries = [(m.start(), m.end()) for m in _PARAGRAPH_BREAK.finditer(content)]
        boundaries.append((len(content), len(content)))

        seg_start = 0
        for seg_end, next_start in boundaries:
            segment = content[seg_start:seg_end]
            if segment.strip():
                first = seg_start + (len(segment) - len(segment.lstrip()))
                last = seg_start + len(segment.rstrip()) - 1
                paragraphs.append(
                    _Paragraph(
                        text=segment,
                        start_line=lines.line_at(first),
                        end_line=lines.line_at(last),
                    )
                )
            seg_start = next_start

        return paragraphs

    @staticmethod
    def _make_chunk(
        buffer: str,
        file_path: str,
        start_line: int,
        end_line: int,
        provenance: Provenance | None,
    ) -> Chunk:
        return Chunk(
            content=buffer.strip(),
            language=Language.TEXT.value,
            file_path=file_path,
            kind=ChunkKind.TEXT,
            start_line=start_line,
            end_line=end_line,
            provenance=provenance,
        )
