# src/main.py — v2
"""CLI entry point — analyze, test, cache, test-gemini commands.

Usage:
    docmeta analyze <file> [--model MODEL] [--no-cache]
    docmeta test [--limit N]
    docmeta cache [--clear | --list]
    docmeta test-gemini [--model MODEL]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from docmeta.version import __version__

if TYPE_CHECKING:
    from docmeta.config.settings import Settings
    from docmeta.core.models import AnalysisResult

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from docmeta.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except (ConfigurationError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="docmeta",
        description=f"docmeta v{__version__} — Extract metadata from PDF and EPUB files using Google Gemini",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Analyze a PDF or EPUB file and extract metadata",
    )
    p_analyze.add_argument("file", type=Path, help="Path to document")
    p_analyze.add_argument(
        "-m", "--model", default=None,
        help="Gemini model to use (default: from settings, gemini-2.0-flash)",
    )
    p_analyze.add_argument(
        "--no-cache", dest="use_cache", action="store_false",
        help="Skip cache and force re-analysis",
    )
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- test ---
    p_test = subparsers.add_parser(
        "test", help="Test with sample files from Downloads and Desktop",
    )
    p_test.add_argument(
        "--limit", type=_positive_int, default=None,
        help="Number of files to analyze (default: 3)",
    )
    p_test.set_defaults(func=_cmd_test)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Manage cache")
    group = p_cache.add_mutually_exclusive_group()
    group.add_argument("--clear", action="store_true", help="Clear all cached results")
    group.add_argument("--list", action="store_true", help="List all cached files")
    p_cache.set_defaults(func=_cmd_cache)

    # --- test-gemini ---
    p_gemini = subparsers.add_parser("test-gemini", help="Test Gemini API connection")
    p_gemini.add_argument("-m", "--model", default=None, help="Gemini model to use")
    p_gemini.set_defaults(func=_cmd_test_gemini)

    return parser


async def _cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    """Execute single-document analysis."""
    from docmeta.api.facade import analyze_document, create_context
    from docmeta.batch.scanner import detect_format, log_unparseable
    from docmeta.core.errors import ResponseUnparseable

    file_path: Path = args.file.expanduser().resolve()
    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        return 1

    if detect_format(file_path) is None:
        logger.error("Unsupported file type. Only PDF and EPUB files are supported.")
        return 1

    context = create_context(settings)
    model = args.model or context.settings.default_model
    if args.use_cache:
        logger.debug("Checking cache for %s", file_path.name)
    else:
        logger.info("Skipping cache lookup (--no-cache)")

    logger.info("Analyzing %s with %s...", file_path.name, model)
    try:
        result = await analyze_document(
            file_path, model=model, use_cache=args.use_cache, context=context,
        )
    except ResponseUnparseable as exc:
        log_unparseable(exc)
        return 1
    _print_result(result)
    return 0


async def _cmd_test(args: argparse.Namespace, settings: Settings) -> int:
    """Analyze the first few PDF/EPUB files found in sample directories."""
    from docmeta.api.facade import create_context
    from docmeta.batch.scanner import BatchScanner

    context = create_context(settings)
    scanner = BatchScanner(orchestrator=context.orchestrator())
    entries = scanner.scan(context.settings.sample_dirs_list)

    if not entries:
        print("No PDF or EPUB files found in Downloads or Desktop directories.")
        return 0

    print(f"Found {len(entries)} test files:")
    for entry in entries:
        print(f"  - {entry.filename}")

    limit = args.limit if args.limit is not None else context.settings.sample_limit
    print(f"\nTesting first {min(limit, len(entries))} files...")
    batch = await scanner.process(entries, limit=limit)

    for result in batch.results:
        print(f"\n--- {Path(result.file_path).name} ---")
        _print_result(result)

    print("\nBatch complete:")
    print(f"  Analyzed:  {batch.processed}")
    print(f"  Cached:    {batch.cached}")
    print(f"  Errors:    {batch.errors}")
    print(f"  Duration:  {batch.duration_seconds:.1f}s")
    return 0


async def _cmd_cache(args: argparse.Namespace, settings: Settings) -> int:
    """Clear or list the result cache."""
    from docmeta.api.facade import clear_cache, create_context, list_cache

    context = create_context(settings)

    if args.clear:
        clear_cache(context)
        print("Cache cleared")
    elif args.list:
        files = list_cache(context)
        if not files:
            print("No cached files")
        else:
            print("Cached files:")
            for file in files:
                print(f"  - {Path(file).name}")
    else:
        print("Use --clear to clear cache or --list to list cached files")
    return 0


async def _cmd_test_gemini(args: argparse.Namespace, settings: Settings) -> int:
    """Run the connectivity check."""
    from docmeta.api.facade import check_connection, create_context
    from docmeta.core.errors import DocMetaError

    context = create_context(settings)
    try:
        response = await check_connection(model=args.model, context=context)
    except DocMetaError as exc:
        logger.error("Gemini API test failed: %s", exc)
        print("Gemini API test failed!")
        return 1

    print(f"Response: {response.content}")
    print("Gemini API test passed!")
    return 0


def _positive_int(value: str) -> int:
    """argparse type: an integer >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _print_result(result: AnalysisResult) -> None:
    """Print the four metadata fields with their confidences."""
    if result.from_cache:
        print("Using cached results:")
    else:
        print("Analysis complete:")
    metadata = result.metadata
    print(f"  Title:   {metadata.title.value} (confidence: {metadata.title.confidence})")
    print(f"  Author:  {metadata.author.value} (confidence: {metadata.author.confidence})")
    print(f"  Type:    {metadata.document_type.value} (confidence: {metadata.document_type.confidence})")
    print(f"  Summary: {metadata.summary.value} (confidence: {metadata.summary.confidence})")


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from docmeta.logging.logger import setup_logging

    level = "DEBUG" if verbose else settings.log_level
    setup_logging(
        level=level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
