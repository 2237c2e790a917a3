"""Unit tests for StructuralExtractor: declaration chunks from tree-sitter trees."""

from __future__ import annotations

import pytest

from codechunk.models.chunk import ChunkKind, Language
from codechunk.services.ingestion.grammar_registry import GrammarRegistry
from codechunk.services.ingestion.structural_extractor import (
    ANONYMOUS_NAME,
    StructuralExtractor,
    kind_for_node_type,
)
from codechunk.utils.errors import ParseError
from tests.conftest import CSHARP_WIDGET, JAVA_FOO, JAVA_TWO_METHODS, TS_ARROW, TS_EXPORTED


@pytest.fixture(scope="module")
def extractor() -> StructuralExtractor:
    return StructuralExtractor(GrammarRegistry())


class TestKindMapping:
    @pytest.mark.parametrize(
        ("node_type", "expected"),
        [
            ("class_declaration", ChunkKind.CLASS),
            ("function_declaration", ChunkKind.FUNCTION),
            ("arrow_function", ChunkKind.FUNCTION),
            ("method_definition", ChunkKind.METHOD),
            ("method_declaration", ChunkKind.METHOD),
            ("interface_declaration", ChunkKind.INTERFACE),
            ("enum_declaration", ChunkKind.BLOCK),
            ("export_statement", ChunkKind.BLOCK),
            ("constructor_declaration", ChunkKind.BLOCK),
        ],
    )
    def test_kind_for_node_type(self, node_type: str, expected: ChunkKind) -> None:
        assert kind_for_node_type(node_type) is expected


class TestJava:
    def test_class_with_one_method(self, extractor: StructuralExtractor) -> None:
        chunks = extractor.extract(JAVA_FOO, "Foo.java", Language.JAVA)

        assert [(c.kind, c.name) for c in chunks] == [
            (ChunkKind.CLASS, "Foo"),
            (ChunkKind.METHOD, "bar"),
        ]
        assert (chunks[0].start_line, chunks[0].end_line) == (1, 4)
        assert (chunks[1].start_line, chunks[1].end_line) == (2, 3)
        assert chunks[0].content.startswith("public class Foo")
        assert chunks[1].content.startswith("public void bar()")

    def test_class_range_contains_method_ranges(self, extractor: StructuralExtractor) -> None:
        chunks = extractor.extract(JAVA_TWO_METHODS, "Calculator.java", Language.JAVA)

        assert len(chunks) >= 3
        class_chunk = chunks[0]
        assert class_chunk.kind is ChunkKind.CLASS
        methods = [c for c in chunks if c.kind is ChunkKind.METHOD]
        assert [m.name for m in methods] == ["add", "sub"]
        for method in methods:
            assert class_chunk.start_line <= method.start_line
            assert method.end_line <= class_chunk.end_line

    def test_chunk_metadata_fields(self, extractor: StructuralExtractor) -> None:
        chunks = extractor.extract(JAVA_FOO, "github/acme/widgets/Foo.java", Language.JAVA)
        for chunk in chunks:
            assert chunk.language == "java"
            assert chunk.file_path == "github/acme/widgets/Foo.java"
            assert chunk.provenance is None
            assert 1 <= chunk.start_line <= chunk.end_line

    def test_malformed_source_raises(self, extractor: StructuralExtractor) -> None:
        with pytest.raises(ParseError):
            extractor.extract("public class { void ( }", "Broken.java", Language.JAVA)

    def test_no_declarations_returns_empty(self, extractor: StructuralExtractor) -> None:
        assert extractor.extract("package demo;\n", "package-info.java", Language.JAVA) == []


class TestTypeScript:
    def test_arrow_function_is_anonymous(self, extractor: StructuralExtractor) -> None:
        chunks = extractor.extract(TS_ARROW, "src/add.ts", Language.TYPESCRIPT)

        assert len(chunks) == 1
        assert chunks[0].kind is ChunkKind.FUNCTION
        assert chunks[0].name == ANONYMOUS_NAME
        assert chunks[0].start_line == chunks[0].end_line == 1

    def test_export_and_interface(self, extractor: StructuralExtractor) -> None:
        chunks = extractor.extract(TS_EXPORTED, "src/greet.ts", Language.TYPESCRIPT)
        summary = [(c.kind, c.name) for c in chunks]

        # export_statement has no name field, the wrapped declaration does.
        assert summary == [
            (ChunkKind.BLOCK, None),
            (ChunkKind.FUNCTION, "greet"),
            (ChunkKind.INTERFACE, "Shape"),
        ]
        assert chunks[0].start_line == chunks[1].start_line == 1
        assert chunks[2].start_line == 5

    def test_javascript_class_method(self, extractor: StructuralExtractor) -> None:
        source = "class Counter {\n  inc() {\n    return 1;\n  }\n}\n"
        chunks = extractor.extract(source, "counter.js", Language.JAVASCRIPT)

        assert [(c.kind, c.name) for c in chunks] == [
            (ChunkKind.CLASS, "Counter"),
            (ChunkKind.METHOD, "inc"),
        ]
        assert all(c.language == "javascript" for c in chunks)

    def test_tsx_component_with_jsx(self, extractor: StructuralExtractor) -> None:
        source = (
            "import React from 'react';\n"
            "export function Button(props: { label: string }) {\n"
            "  return <button>{props.label}</button>;\n"
            "}\n"
            "class Panel extends React.Component {\n"
            "  render() {\n"
            "    return <div>hi</div>;\n"
            "  }\n"
            "}\n"
        )
        chunks = extractor.extract(source, "src/Button.tsx", Language.TYPESCRIPT)
        summary = [(c.kind, c.name) for c in chunks]

        assert (ChunkKind.FUNCTION, "Button") in summary
        assert (ChunkKind.CLASS, "Panel") in summary
        assert (ChunkKind.METHOD, "render") in summary
        assert all(c.language == "typescript" for c in chunks)

    def test_ts_angle_bracket_assertion_still_parses(self, extractor: StructuralExtractor) -> None:
        source = "function id<T>(x: unknown): T {\n  return <T>x;\n}\n"
        chunks = extractor.extract(source, "src/id.ts", Language.TYPESCRIPT)

        assert [(c.kind, c.name) for c in chunks] == [(ChunkKind.FUNCTION, "id")]


class TestCSharp:
    def test_class_and_method(self, extractor: StructuralExtractor) -> None:
        chunks = extractor.extract(CSHARP_WIDGET, "Widget.cs", Language.CSHARP)

        assert [(c.kind, c.name) for c in chunks] == [
            (ChunkKind.CLASS, "Widget"),
            (ChunkKind.METHOD, "Size"),
        ]
        assert (chunks[0].start_line, chunks[0].end_line) == (3, 9)


class TestErrors:
    def test_text_language_raises(self, extractor: StructuralExtractor) -> None:
        with pytest.raises(ParseError):
            extractor.extract("hello", "notes.md", Language.TEXT)
