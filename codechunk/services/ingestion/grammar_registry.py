"""Grammar registry: file extension -> language -> tree-sitter grammar.

Language detection is purely extension based (case-insensitive) over a
closed table.  Document-like extensions resolve to ``text``; anything else
resolves to ``unsupported``, which is a valid classification rather than an
error.

Each :class:`LanguageGrammar` variant names the tree-sitter grammar a set
of extensions parses with and the node types worth turning into chunks.
One language may have several variants: ``.ts`` and ``.tsx`` are both
``typescript`` but only the ``tsx`` grammar reads JSX, so the grammar is
picked per extension.  Adding a language means adding a variant to
``DEFAULT_GRAMMARS``; nothing else in the pipeline branches on language.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

import structlog
from tree_sitter import Parser
from tree_sitter_language_pack import get_language

from codechunk.models.chunk import Language
from codechunk.utils.errors import ParseError

logger = structlog.get_logger(logger_name=__name__)

_TS_JS_NODES = frozenset(
    {
        "class_declaration",
        "function_declaration",
        "method_definition",
        "interface_declaration",
        "type_alias_declaration",
        "arrow_function",
        "export_statement",
    }
)

_JAVA_NODES = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "method_declaration",
        "constructor_declaration",
        "enum_declaration",
    }
)

_CSHARP_NODES = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "method_declaration",
        "constructor_declaration",
        "struct_declaration",
        "enum_declaration",
    }
)

TEXT_EXTENSIONS = frozenset({"md", "txt", "json", "yaml", "yml", "xml", "html", "css"})


@dataclass(frozen=True)
class LanguageGrammar:
    """One grammar variant of a supported code language.

    Attributes:
        language: Language tag written to chunk metadata.
        grammar_name: Name understood by ``tree_sitter_language_pack``.
        extensions: Lower-case extensions without the dot.
        interesting_node_types: Node types that become chunks.
    """

    language: Language
    grammar_name: str
    extensions: frozenset[str]
    interesting_node_types: frozenset[str]


# The first variant listed for a language is its default grammar.
DEFAULT_GRAMMARS: tuple[LanguageGrammar, ...] = (
    LanguageGrammar(Language.TYPESCRIPT, "typescript", frozenset({"ts"}), _TS_JS_NODES),
    LanguageGrammar(Language.TYPESCRIPT, "tsx", frozenset({"tsx"}), _TS_JS_NODES),
    LanguageGrammar(Language.JAVASCRIPT, "javascript", frozenset({"js", "jsx"}), _TS_JS_NODES),
    LanguageGrammar(Language.JAVA, "java", frozenset({"java"}), _JAVA_NODES),
    LanguageGrammar(Language.CSHARP, "csharp", frozenset({"cs"}), _CSHARP_NODES),
)


def file_extension(file_path: str) -> str:
    """Return the lower-case text after the last dot of the file name.

    ``src/App.TSX`` -> ``tsx``, ``docs/.md`` -> ``md``, ``Makefile`` -> ``""``.
    """
    name = PurePosixPath(file_path).name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


class GrammarRegistry:
    """Maps file paths to languages and grammars, and grammars to cached parsers."""

    def __init__(
        self,
        grammars: tuple[LanguageGrammar, ...] = DEFAULT_GRAMMARS,
        text_extensions: frozenset[str] = TEXT_EXTENSIONS,
    ) -> None:
        self._by_extension: dict[str, LanguageGrammar] = {}
        self._by_language: dict[Language, LanguageGrammar] = {}
        for grammar in grammars:
            self._by_language.setdefault(grammar.language, grammar)
            for ext in grammar.extensions:
                self._by_extension[ext] = grammar
        self._text_extensions = frozenset(text_extensions) - set(self._by_extension)
        self._parsers: dict[str, Parser] = {}

    def resolve(self, file_path: str) -> Language:
        """Classify *file_path* by its extension.

        ``src/App.TSX`` -> typescript, ``docs/readme.md`` -> text,
        ``Makefile`` -> unsupported.
        """
        ext = file_extension(file_path)
        grammar = self._by_extension.get(ext)
        if grammar is not None:
            return grammar.language
        if ext in self._text_extensions:
            return Language.TEXT
        return Language.UNSUPPORTED

    def grammar_for(self, language: Language, file_path: str | None = None) -> LanguageGrammar | None:
        """Return the variant that parses *file_path*, else *language*'s default.

        The extension only wins when its variant belongs to *language*.
        """
        if file_path is not None:
            grammar = self._by_extension.get(file_extension(file_path))
            if grammar is not None and grammar.language is language:
                return grammar
        return self._by_language.get(language)

    def parser_for(self, language: Language, file_path: str | None = None) -> Parser:
        """Return a cached parser for a code *language*.

        Parsers are cached per grammar, so ``.ts`` and ``.tsx`` files get
        different parsers.

        Raises:
            ParseError: If no grammar is registered for *language* or the
                grammar cannot be loaded.
        """
        grammar = self.grammar_for(language, file_path)
        if grammar is None:
            raise ParseError(f"No grammar registered for {language.value}", provider_name="tree-sitter")

        parser = self._parsers.get(grammar.grammar_name)
        if parser is not None:
            return parser

        try:
            parser = Parser(get_language(grammar.grammar_name))
        except Exception as exc:  # noqa: BLE001
            raise ParseError(
                f"Failed to load {grammar.grammar_name} grammar: {exc}",
                provider_name="tree-sitter",
            ) from exc

        logger.debug("grammar_loaded", language=language.value, grammar=grammar.grammar_name)
        self._parsers[grammar.grammar_name] = parser
        return parser

    @property
    def supported_languages(self) -> list[str]:
        return sorted(language.value for language in self._by_language)

    def extension_table(self) -> dict[str, str]:
        """Return ``{extension: language}`` for every known extension."""
        table = {ext: grammar.language.value for ext, grammar in self._by_extension.items()}
        table.update({ext: Language.TEXT.value for ext in self._text_extensions})
        return dict(sorted(table.items()))
