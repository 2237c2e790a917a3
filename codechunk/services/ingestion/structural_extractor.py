"""Structural code chunking over tree-sitter syntax trees.

Every node whose type is in the language's interesting set (class, method,
function, interface ... declarations) becomes one chunk covering that
node's exact source range.  The walk does not stop at a match: a method
inside a class produces its own chunk next to the class chunk, so chunks
from one file can overlap.

A tree containing syntax errors is rejected with
:class:`~codechunk.utils.errors.ParseError`; the orchestrator then falls
back to paragraph chunking for the whole file.
"""

from __future__ import annotations

import structlog
from tree_sitter import Node

from codechunk.models.chunk import Chunk, ChunkKind, Language
from codechunk.services.ingestion.grammar_registry import GrammarRegistry
from codechunk.utils.errors import ParseError

logger = structlog.get_logger(logger_name=__name__)

ANONYMOUS_NAME = "<anonymous>"

# Checked in order; the first substring found in the node type wins.
_KIND_MARKERS: tuple[tuple[str, ChunkKind], ...] = (
    ("class", ChunkKind.CLASS),
    ("function", ChunkKind.FUNCTION),
    ("method", ChunkKind.METHOD),
    ("interface", ChunkKind.INTERFACE),
)


def kind_for_node_type(node_type: str) -> ChunkKind:
    """Map a grammar node type to a :class:`ChunkKind`.

    ``method_definition`` -> method, ``arrow_function`` -> function,
    ``enum_declaration`` -> block.
    """
    for marker, kind in _KIND_MARKERS:
        if marker in node_type:
            return kind
    return ChunkKind.BLOCK


class StructuralExtractor:
    """Extracts declaration-level chunks from code.

    Parameters
    ----------
    registry:
        Supplies the parser and interesting node types per language.
    """

    def __init__(self, registry: GrammarRegistry) -> None:
        self._registry = registry

    def extract(self, source_text: str, file_path: str, language: Language) -> list[Chunk]:
        """Return one chunk per interesting node of *source_text*, in pre-order.

        Raises
        ------
        ParseError
            If *language* has no grammar or the source does not parse cleanly.
        """
        grammar = self._registry.grammar_for(language, file_path)
        if grammar is None:
            raise ParseError(f"No grammar registered for {language.value}", provider_name="tree-sitter")

        parser = self._registry.parser_for(language, file_path)
        source = source_text.encode("utf-8")
        tree = parser.parse(source)
        if tree is None:
            raise ParseError(f"Parser returned no tree for {file_path}", provider_name="tree-sitter")

        root = tree.root_node
        if root.has_error:
            raise ParseError(f"Syntax errors in {file_path}", provider_name="tree-sitter")

        chunks: list[Chunk] = []
        # Explicit stack: deeply nested sources must not hit the recursion limit.
        stack: list[Node] = [root]
        while stack:
            node = stack.pop()
            if node.type in grammar.interesting_node_types:
                chunks.append(self._to_chunk(node, source, file_path, language))
            stack.extend(reversed(node.children))

        logger.debug(
            "structural_extraction_complete",
            file_path=file_path,
            language=language.value,
            num_chunks=len(chunks),
        )
        return chunks

    def _to_chunk(self, node: Node, source: bytes, file_path: str, language: Language) -> Chunk:
        return Chunk(
            content=_node_text(node, source),
            language=language.value,
            file_path=file_path,
            kind=kind_for_node_type(node.type),
            name=self._extract_name(node, source),
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )

    @staticmethod
    def _extract_name(node: Node, source: bytes) -> str | None:
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            return _node_text(name_node, source)
        if "function" in node.type or "arrow" in node.type:
            return ANONYMOUS_NAME
        return None


def _node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
