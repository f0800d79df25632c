"""Vector Manager CLI API package - modular command-line interface."""

# Commands are imported lazily in main.py when needed

__all__ = [
    "preview_command",
    "vectorize_command",
    "query_command",
    "list_command",
    "purge_command",
]
