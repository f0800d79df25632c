"""Vector Manager Core Types Package - Common type definitions and aliases.

This package contains type definitions, enums, and type aliases used throughout
the Vector Manager system. These types provide better code clarity, IDE support,
and runtime type checking capabilities.

The types are organized into logical groups:
- Message classification and injection role enumerations
- Provider, endpoint and search strategy enumerations
- Common aliases for better readability
"""

from .common import (
    ChunkHash,
    CollectionId,
    EmbeddingSource,
    EmbeddingVector,
    EndpointKind,
    MessageIndex,
    MessageKind,
    Offset,
    RoleType,
    Score,
    SearchStrategy,
    Timestamp,
)

__all__ = [
    # Enums
    "MessageKind",
    "RoleType",
    "EndpointKind",
    "EmbeddingSource",
    "SearchStrategy",

    # String types
    "CollectionId",
    "ChunkHash",

    # Numeric types
    "MessageIndex",
    "Offset",
    "Score",

    # Complex types
    "EmbeddingVector",
    "Timestamp",
]
