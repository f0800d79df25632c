"""Validation utilities for Vector Manager CLI arguments."""

import sys
from pathlib import Path

from loguru import logger

from vectormanager.core.config import VectorManagerConfig


def validate_chat_file(path: Path) -> bool:
    """Validate the chat transcript path.

    Args:
        path: JSONL chat file

    Returns:
        True if valid, False otherwise
    """
    if not path.exists():
        logger.error(f"Chat file does not exist: {path}")
        return False

    if not path.is_file():
        logger.error(f"Chat path is not a file: {path}")
        return False

    return True


def validate_embedding_config(config: VectorManagerConfig) -> bool:
    """Check that embedding settings are complete when embedding is enabled."""
    missing = config.get_missing_config()
    for item in missing:
        logger.error(f"Missing configuration: {item}")
    return not missing


def exit_on_validation_error(message: str) -> None:
    """Log a validation error and exit."""
    logger.error(f"Validation failed: {message}")
    sys.exit(1)
