"""Argument parser utilities for Vector Manager CLI commands."""

from .main_parser import create_main_parser, setup_subparsers
from .pipeline_parser import (
    add_list_subparser,
    add_preview_subparser,
    add_purge_subparser,
    add_query_subparser,
    add_vectorize_subparser,
)

__all__ = [
    "create_main_parser",
    "setup_subparsers",
    "add_preview_subparser",
    "add_vectorize_subparser",
    "add_query_subparser",
    "add_list_subparser",
    "add_purge_subparser",
]
