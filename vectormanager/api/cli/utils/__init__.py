"""Shared utilities for Vector Manager CLI commands."""

from .config_helpers import args_to_config
from .output import OutputFormatter, format_ingestion_stats
from .validation import exit_on_validation_error, validate_chat_file, validate_embedding_config

__all__ = [
    "OutputFormatter",
    "args_to_config",
    "exit_on_validation_error",
    "format_ingestion_stats",
    "validate_chat_file",
    "validate_embedding_config",
]
