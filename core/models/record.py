"""Vector Manager Record Domain Models - Stored records and query results.

This module contains the models that live in, or come back from, a vector
collection: the Collection identity, VectorRecord, QueryResult and
RerankedResult.
"""

import hashlib
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import ValidationError
from ..types import ChunkHash, CollectionId, EmbeddingVector, Score, Timestamp

DEFAULT_COLLECTION_ID = CollectionId("vm_default")

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


@dataclass(frozen=True)
class Collection:
    """Per-conversation bucket of vector records.

    Attributes:
        character_id: Host character (or group) identifier
        chat_id: Host chat identifier
    """

    character_id: Optional[str] = None
    chat_id: Optional[str] = None

    @property
    def is_default(self) -> bool:
        """True when the conversation identity is incomplete."""
        return not self.character_id or not self.chat_id

    @property
    def id(self) -> CollectionId:
        """Stable collection id derived from the conversation identity.

        Parts made only of letters, digits and ``-`` are used verbatim as
        ``vm_<character>_<chat>``. Any other part is sanitised and the id gets a
        digest suffix of the raw identity, so distinct conversations never
        share a collection.
        """
        if self.is_default:
            return DEFAULT_COLLECTION_ID
        parts = [str(self.character_id), str(self.chat_id)]
        safe = [_UNSAFE_ID_CHARS.sub("_", part) for part in parts]
        if safe == parts and not any("_" in part for part in parts):
            return CollectionId(f"vm_{safe[0]}_{safe[1]}")
        digest = hashlib.sha1(json.dumps(parts).encode("utf-8")).hexdigest()[:10]
        return CollectionId(f"vm_{safe[0]}_{safe[1]}_{digest}")


@dataclass(frozen=True)
class VectorRecord:
    """A stored chunk with its embedding.

    Attributes:
        hash: Content hash, unique within a collection
        text: Chunk text
        index: Sequence index within the ingestion run
        collection_id: Owning collection
        embedding: Embedding vector (None when the store computes it)
        timestamp: Send date of the source message
        speaker: Speaker of the source message
    """

    hash: ChunkHash
    text: str
    index: int
    collection_id: CollectionId
    embedding: Optional[EmbeddingVector] = field(default=None, compare=False)
    timestamp: Timestamp = None
    speaker: Optional[str] = None

    def __post_init__(self):
        if not self.hash:
            raise ValidationError("hash", self.hash, "Record hash cannot be empty")
        if not self.text:
            raise ValidationError("text", self.text, "Record text cannot be empty")

    @property
    def dims(self) -> int:
        """Embedding dimensions (0 when no embedding is attached)."""
        return len(self.embedding) if self.embedding else 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], collection_id: CollectionId) -> "VectorRecord":
        """Create a VectorRecord from a stored dictionary."""
        try:
            return cls(
                hash=ChunkHash(str(data["hash"])),
                text=str(data["text"]),
                index=int(data.get("index", 0)),
                collection_id=collection_id,
                embedding=data.get("embedding"),
                timestamp=data.get("timestamp"),
                speaker=data.get("speaker"),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ValidationError("data", data, f"Invalid record format: {e}")

    def to_dict(self, include_vector: bool = True) -> Dict[str, Any]:
        """Convert VectorRecord to dictionary."""
        result: Dict[str, Any] = {
            "hash": self.hash,
            "text": self.text,
            "index": self.index,
            "timestamp": self.timestamp,
            "speaker": self.speaker,
        }
        if include_vector and self.embedding is not None:
            result["embedding"] = list(self.embedding)
        return result


@dataclass(frozen=True)
class QueryResult:
    """One retrieved record with its similarity score."""

    text: str
    score: Score
    hash: Optional[ChunkHash] = None
    timestamp: Timestamp = None
    speaker: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QueryResult":
        """Create a QueryResult from a delegated store response item."""
        try:
            return cls(
                text=str(data["text"]),
                score=Score(float(data.get("score", 0.0))),
                hash=data.get("hash"),
                timestamp=data.get("timestamp"),
                speaker=data.get("speaker", data.get("name")),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ValidationError("data", data, f"Invalid query result format: {e}")

    @property
    def similarity_percentage(self) -> int:
        """Similarity as a rounded percentage."""
        return int(round(self.score * 100))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "score": self.score,
            "hash": self.hash,
            "timestamp": self.timestamp,
            "speaker": self.speaker,
        }


@dataclass(frozen=True)
class RerankedResult(QueryResult):
    """A QueryResult reordered by a relevance model.

    Attributes:
        rerank_score: Relevance score from the rerank provider
        hybrid_score: Weighted blend of rerank and similarity scores (informational,
            ordering follows the rerank provider)
    """

    rerank_score: Score = Score(0.0)
    hybrid_score: Optional[Score] = None

    @classmethod
    def from_result(
        cls,
        result: QueryResult,
        rerank_score: float,
        hybrid_weight: float,
    ) -> "RerankedResult":
        """Annotate a QueryResult with rerank and hybrid scores."""
        hybrid = hybrid_weight * rerank_score + (1.0 - hybrid_weight) * result.score
        return cls(
            text=result.text,
            score=result.score,
            hash=result.hash,
            timestamp=result.timestamp,
            speaker=result.speaker,
            rerank_score=Score(rerank_score),
            hybrid_score=Score(hybrid),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["rerank_score"] = self.rerank_score
        result["hybrid_score"] = self.hybrid_score
        return result


def sort_by_score(results: List[QueryResult]) -> List[QueryResult]:
    """Sort results by descending similarity score (stable)."""
    return sorted(results, key=lambda r: r.score, reverse=True)
