"""Vector Manager Core Types - Common type definitions and aliases.

This module contains type definitions, enums, and type aliases used throughout
the Vector Manager system. These types provide better code clarity, IDE support,
and runtime type checking capabilities.
"""

from enum import Enum
from typing import List, NewType, Union


# String-based type aliases for better semantic clarity
CollectionId = NewType("CollectionId", str)    # e.g., "vm_alice_chat-1"
ChunkHash = NewType("ChunkHash", str)          # base36 content hash

# Numeric type aliases
MessageIndex = NewType("MessageIndex", int)    # 0-based index in the transcript
Offset = NewType("Offset", int)                # character offset in source text
Score = NewType("Score", float)                # similarity or relevance score

# Complex types
EmbeddingVector = List[float]                  # Vector embedding representation
Timestamp = Union[str, int, float, None]       # Host send_date (string or epoch)


class MessageKind(Enum):
    """Closed classification of a chat message, produced once by the selector."""

    USER = "user"
    AI = "ai"
    HIDDEN = "hidden"
    SPECIAL_SYSTEM = "special_system"
    UNKNOWN = "unknown"


class RoleType(Enum):
    """Conversational role the injected context block assumes."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def from_string(cls, value: str) -> "RoleType":
        """Convert string to RoleType, accepting host aliases and defaulting to SYSTEM."""
        aliases = {
            "character": cls.ASSISTANT,
            "model": cls.ASSISTANT,
            "ai": cls.ASSISTANT,
        }
        normalized = (value or "").strip().lower()
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return cls.SYSTEM


class EndpointKind(Enum):
    """Named embedding endpoint kinds, each with its own URL and auth header rule."""

    OPENAI = "openai"
    AZURE = "azure"
    CUSTOM = "custom"

    @property
    def uses_bearer_auth(self) -> bool:
        """Return True if the key goes into an Authorization: Bearer header."""
        return self in {self.OPENAI, self.CUSTOM}

    @property
    def requires_url(self) -> bool:
        """Return True if the caller must supply the request URL."""
        return self in {self.AZURE, self.CUSTOM}


class EmbeddingSource(Enum):
    """Whether embeddings are precomputed by us or computed by the vector store."""

    PRECOMPUTED = "precomputed"
    STORE = "store"


class SearchStrategy(Enum):
    """Similarity search strategies."""

    LOCAL = "local"
    DELEGATED = "delegated"
