"""Command-line interface for local chunking runs.

Usage::

    python -m codechunk.cli chunk src/Foo.java --as-path github/acme/widgets/src/Foo.java

    python -m codechunk.cli transform event.json --storage-root ./data/objects

    python -m codechunk.cli languages

``chunk`` prints one JSON line per chunk in the persisted-batch entry shape.
``transform`` runs a full job against the filesystem object store, so the
event's content batches must already exist under ``<storage-root>/<bucket>/``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from codechunk.config.loader import load_settings
from codechunk.config.settings import Settings
from codechunk.handler import build_orchestrator
from codechunk.models.chunk import SourceFile
from codechunk.models.transformation import FileContent
from codechunk.providers.storage.local_store import LocalObjectStore
from codechunk.services.ingestion.grammar_registry import GrammarRegistry
from codechunk.utils.errors import CodeChunkError
from codechunk.utils.logging import configure_logging


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _handle_chunk(args: argparse.Namespace, app_settings: Settings) -> int:
    source_path = Path(args.file)
    try:
        content = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {source_path}: {exc}", file=sys.stderr)
        return 1

    if args.max_chunk_size is not None:
        app_settings = app_settings.model_copy(update={"max_chunk_size": args.max_chunk_size})

    orchestrator = build_orchestrator(
        app_settings, LocalObjectStore(app_settings.local_storage_root)
    )
    file_path = args.as_path or source_path.as_posix()
    chunks = orchestrator.chunk_source(
        SourceFile(
            path=file_path,
            content=content,
            language=orchestrator.registry.resolve(file_path),
        )
    )

    for chunk in chunks:
        entry = FileContent(content_body=chunk.content, content_metadata=chunk.to_content_metadata())
        print(entry.model_dump_json(by_alias=True))
    return 0


async def _handle_transform(args: argparse.Namespace, app_settings: Settings) -> int:
    event_path = Path(args.event)
    try:
        event = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error: cannot load event {event_path}: {exc}", file=sys.stderr)
        return 1

    overrides: dict[str, object] = {"storage_backend": "local"}
    if args.storage_root:
        overrides["local_storage_root"] = args.storage_root
    if args.output_bucket:
        overrides["transformation_bucket"] = args.output_bucket
    app_settings = app_settings.model_copy(update=overrides)

    orchestrator = build_orchestrator(
        app_settings, LocalObjectStore(app_settings.local_storage_root)
    )
    report = await orchestrator.run(event)

    print(json.dumps(report.output.to_wire(), indent=2))
    print(
        f"Processed {len(report.chunk_counts)} file(s), "
        f"{report.total_chunks} chunk(s), {len(report.failures)} failure(s) "
        f"in {report.elapsed_seconds:.2f}s",
        file=sys.stderr,
    )
    return 0


def _handle_languages() -> int:
    registry = GrammarRegistry()
    for extension, language in registry.extension_table().items():
        print(f"  {extension:<8} {language}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m codechunk.cli",
        description="Chunk source code and documents for knowledge-base ingestion.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Path to the YAML configuration file (default: config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- chunk --
    chunk_parser = subparsers.add_parser("chunk", help="Chunk a single local file")
    chunk_parser.add_argument("file", help="Path to the file to chunk")
    chunk_parser.add_argument(
        "--as-path",
        dest="as_path",
        help="Repository key to use for language detection and provenance",
    )
    chunk_parser.add_argument(
        "--max-chunk-size",
        dest="max_chunk_size",
        type=_positive_int,
        help="Paragraph chunker budget in characters",
    )

    # -- transform --
    transform_parser = subparsers.add_parser(
        "transform", help="Run a transformation event against the local object store"
    )
    transform_parser.add_argument("event", help="Path to the event JSON file")
    transform_parser.add_argument(
        "--storage-root",
        dest="storage_root",
        help="Directory holding one sub-directory per bucket",
    )
    transform_parser.add_argument(
        "--output-bucket",
        dest="output_bucket",
        help="Bucket receiving chunk batches (overrides TRANSFORMATION_BUCKET)",
    )

    # -- languages --
    subparsers.add_parser("languages", help="List supported file extensions")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse *argv*, dispatch to the subcommand and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "languages":
        return _handle_languages()

    try:
        app_settings = load_settings(args.config)
        configure_logging(log_level=app_settings.log_level, stream=sys.stderr)

        if args.command == "chunk":
            return _handle_chunk(args, app_settings)
        return asyncio.run(_handle_transform(args, app_settings))
    except CodeChunkError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
