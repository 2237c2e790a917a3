"""Chunking engine for knowledge-base ingestion.

Per file, the stages run in this order:

1. **Resolve** (grammar_registry.py / GrammarRegistry) -- classify the file
   by extension as a code language, ``text``, or ``unsupported``.

2. **Extract** (structural_extractor.py / StructuralExtractor) -- walk the
   tree-sitter syntax tree of code files and emit one chunk per declaration.

3. **Fall back** (paragraph_chunker.py / ParagraphChunker) -- split documents,
   and code that yielded nothing structurally, into paragraph chunks.

4. **Enrich** (provenance.py) -- tag every chunk with the provider,
   organization and repository taken from the file's path.

The TransformationOrchestrator in ``codechunk/pipeline/`` drives these
stages for every file of an ingestion job.
"""

from codechunk.services.ingestion.grammar_registry import GrammarRegistry, LanguageGrammar
from codechunk.services.ingestion.paragraph_chunker import ParagraphChunker
from codechunk.services.ingestion.provenance import derive_provenance, enrich_chunks
from codechunk.services.ingestion.structural_extractor import StructuralExtractor

__all__ = [
    "GrammarRegistry",
    "LanguageGrammar",
    "ParagraphChunker",
    "StructuralExtractor",
    "derive_provenance",
    "enrich_chunks",
]
