"""Vector Manager CLI commands package - modular command implementations."""

from .pipeline import list_command, preview_command, purge_command, query_command, vectorize_command

__all__ = [
    "preview_command",
    "vectorize_command",
    "query_command",
    "list_command",
    "purge_command",
]
