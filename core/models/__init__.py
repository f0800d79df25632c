"""Vector Manager Core Models Package - Domain model definitions.

This package contains the core domain models that represent the fundamental
entities in the Vector Manager system. These models are designed to be
independent of infrastructure concerns and provide a clean, typed interface
for working with messages, chunks, records and pipeline diagnostics.

The models follow these principles:
- Immutable data structures using dataclasses with frozen=True
- Rich type hints for better IDE support and runtime validation
- Dictionary round-tripping for host and store payloads
"""

from .chunk import Chunk, content_hash
from .embedding import cosine_similarity, dot_product, magnitude
from .event import EventLog, PipelineEvent, PipelineResult, PipelineStatus
from .message import ChatMessage, ClassifiedMessage, ExtractedPassage
from .record import (
    DEFAULT_COLLECTION_ID,
    Collection,
    QueryResult,
    RerankedResult,
    VectorRecord,
    sort_by_score,
)

__all__ = [
    "ChatMessage",
    "ClassifiedMessage",
    "ExtractedPassage",
    "Chunk",
    "content_hash",
    "cosine_similarity",
    "dot_product",
    "magnitude",
    "Collection",
    "DEFAULT_COLLECTION_ID",
    "VectorRecord",
    "QueryResult",
    "RerankedResult",
    "sort_by_score",
    "PipelineEvent",
    "PipelineResult",
    "PipelineStatus",
    "EventLog",
]
