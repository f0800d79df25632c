"""Main argument parser for Vector Manager CLI."""

import argparse
from pathlib import Path

from vectormanager import __version__


def create_main_parser() -> argparse.ArgumentParser:
    """Create and configure the main argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="vector-manager",
        description="Retrieval-augmented context for chat transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vector-manager preview --chat chat.jsonl --layers 1-20
  vector-manager vectorize --chat chat.jsonl --store-path ./vectors.json
  vector-manager query --chat chat.jsonl --store-path ./vectors.json
  vector-manager query --chat chat.jsonl --text "the lighthouse" --threshold 0.5
  vector-manager list --chat chat.jsonl --host-url http://127.0.0.1:8000
  vector-manager purge --chat chat.jsonl --store-path ./vectors.json --yes
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"vector-manager {__version__}",
    )

    return parser


def setup_subparsers(parser: argparse.ArgumentParser) -> argparse._SubParsersAction:
    """Set up subparsers for the main parser.

    Args:
        parser: Main argument parser

    Returns:
        Subparsers action for adding command parsers
    """
    return parser.add_subparsers(dest="command", help="Available commands")


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by every command.

    Args:
        parser: Parser to add arguments to
    """
    parser.add_argument(
        "--chat",
        type=Path,
        required=True,
        help="Chat transcript file (JSONL, one message per line)",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file path (JSON or YAML)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON",
    )


def add_layer_argument(parser: argparse.ArgumentParser) -> None:
    """Add the layer range argument to a parser."""
    parser.add_argument(
        "--layers",
        help="Layer range to select, 1 = oldest message (e.g. 1-10)",
    )


def add_embedding_arguments(parser: argparse.ArgumentParser) -> None:
    """Add embedding endpoint arguments to a parser.

    Args:
        parser: Parser to add arguments to
    """
    parser.add_argument(
        "--endpoint",
        choices=["openai", "azure", "custom"],
        help="Embedding endpoint kind (default: openai)",
    )

    parser.add_argument(
        "--custom-url",
        help="Request URL for azure and custom endpoints",
    )

    parser.add_argument(
        "--model",
        help="Embedding model to use",
    )

    parser.add_argument(
        "--api-key",
        help="API key for the embedding endpoint (uses env var if not specified)",
    )

    parser.add_argument(
        "--batch-size",
        type=int,
        help="Texts per embedding request",
    )

    parser.add_argument(
        "--no-embeddings",
        action="store_true",
        help="Let the vector store compute embeddings",
    )


def add_store_arguments(parser: argparse.ArgumentParser) -> None:
    """Add vector store arguments to a parser.

    Args:
        parser: Parser to add arguments to
    """
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--store-path",
        type=Path,
        help="JSON file for the local vector store",
    )
    group.add_argument(
        "--host-url",
        help="Base URL of the host's vector API",
    )


__all__ = [
    "create_main_parser",
    "setup_subparsers",
    "add_common_arguments",
    "add_layer_argument",
    "add_embedding_arguments",
    "add_store_arguments",
]
