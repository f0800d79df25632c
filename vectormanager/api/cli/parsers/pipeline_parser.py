"""Pipeline command argument parsers for Vector Manager CLI."""

import argparse
from typing import Any, cast

from .main_parser import (
    add_common_arguments,
    add_embedding_arguments,
    add_layer_argument,
    add_store_arguments,
)


def add_preview_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add preview command subparser."""
    preview_parser = subparsers.add_parser(
        "preview",
        help="Show the messages vectorize would ingest",
        description="Select, classify and clean the layer range without embedding anything.",
    )
    add_common_arguments(preview_parser)
    add_layer_argument(preview_parser)
    return cast(argparse.ArgumentParser, preview_parser)


def add_vectorize_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add vectorize command subparser."""
    vectorize_parser = subparsers.add_parser(
        "vectorize",
        help="Chunk, embed and store the selected messages",
        description="Ingest the selected layer range into the chat's vector collection.",
    )
    add_common_arguments(vectorize_parser)
    add_layer_argument(vectorize_parser)
    add_embedding_arguments(vectorize_parser)
    add_store_arguments(vectorize_parser)
    return cast(argparse.ArgumentParser, vectorize_parser)


def add_query_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add query command subparser."""
    query_parser = subparsers.add_parser(
        "query",
        help="Retrieve relevant context and show the injected text",
        description="Run the pre-generation retrieval path against the chat's collection.",
    )
    add_common_arguments(query_parser)
    add_embedding_arguments(query_parser)
    add_store_arguments(query_parser)

    query_parser.add_argument(
        "--text",
        help="Query text (defaults to the most recent messages)",
    )
    query_parser.add_argument(
        "--threshold",
        type=float,
        help="Minimum similarity score",
    )
    query_parser.add_argument(
        "--max-results",
        type=int,
        help="Maximum number of results",
    )
    return cast(argparse.ArgumentParser, query_parser)


def add_list_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add list command subparser."""
    list_parser = subparsers.add_parser(
        "list",
        help="List record hashes in the chat's collection",
    )
    add_common_arguments(list_parser)
    add_store_arguments(list_parser)
    return cast(argparse.ArgumentParser, list_parser)


def add_purge_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add purge command subparser."""
    purge_parser = subparsers.add_parser(
        "purge",
        help="Delete every record in the chat's collection",
    )
    add_common_arguments(purge_parser)
    add_store_arguments(purge_parser)
    purge_parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip the confirmation prompt",
    )
    return cast(argparse.ArgumentParser, purge_parser)


__all__ = [
    "add_preview_subparser",
    "add_vectorize_subparser",
    "add_query_subparser",
    "add_list_subparser",
    "add_purge_subparser",
]
