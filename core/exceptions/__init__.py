"""Vector Manager Core Exceptions Package - Core exception classes for error handling.

This package contains the exception hierarchy for the Vector Manager system. These
exceptions provide clear error categorization and enable proper error handling
throughout the application.

The exception hierarchy is designed to:
- Provide specific exception types for different error categories
- Let the pipeline boundary turn any failure into one notification
- Support structured error messages and context
"""

from .core import (
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    ProviderError,
    ValidationError,
    VectorManagerError,
    VectorStoreError,
)

__all__ = [
    # Base exception
    "VectorManagerError",

    # Domain-specific exceptions
    "ValidationError",
    "EmbeddingError",
    "DimensionMismatchError",
    "VectorStoreError",
    "ConfigurationError",
    "ProviderError",
]
