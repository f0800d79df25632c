"""Vector Manager Core Package - Domain models, types, and exceptions.

This package contains the core domain models and types that form the foundation
of the Vector Manager architecture. These models are independent of
infrastructure concerns and provide a clean separation between pipeline logic
and provider implementations.

Modules:
    models: Domain models for messages, chunks, records and pipeline events
    types: Common type definitions and aliases
    exceptions: Core exception classes for error handling
"""

from .exceptions import (
    DimensionMismatchError,
    ProviderError,
    ValidationError,
    VectorManagerError,
    VectorStoreError,
)
from .models import ChatMessage, Chunk, QueryResult, RerankedResult, VectorRecord
from .types import EndpointKind, MessageKind, RoleType

__all__ = [
    # Domain Models
    "ChatMessage",
    "Chunk",
    "VectorRecord",
    "QueryResult",
    "RerankedResult",

    # Types
    "MessageKind",
    "RoleType",
    "EndpointKind",

    # Exceptions
    "VectorManagerError",
    "ValidationError",
    "ProviderError",
    "DimensionMismatchError",
    "VectorStoreError",
]

__version__ = "1.0.0"
