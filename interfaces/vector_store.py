"""VectorStore protocol for Vector Manager - abstract interface for collection storage."""

from typing import Optional, Protocol

from core.models import QueryResult, VectorRecord
from core.types import CollectionId, EmbeddingSource, EmbeddingVector


class VectorStore(Protocol):
    """Abstract protocol for vector stores.

    Every operation is addressed by a collection id. When ``source`` is
    PRECOMPUTED the caller supplies vectors (on the records for insert, in the
    ``embeddings`` map keyed by text for query); when it is STORE the store
    computes embeddings itself.
    """

    @property
    def name(self) -> str:
        """Store name (e.g., 'local', 'host')."""
        ...

    @property
    def supports_local_search(self) -> bool:
        """True if list_records returns stored vectors for local similarity."""
        ...

    async def insert(
        self,
        collection_id: CollectionId,
        records: list[VectorRecord],
        source: EmbeddingSource = EmbeddingSource.PRECOMPUTED,
    ) -> int:
        """Insert records and return the number stored."""
        ...

    async def query(
        self,
        collection_id: CollectionId,
        text: str,
        top_k: int,
        threshold: float,
        source: EmbeddingSource = EmbeddingSource.PRECOMPUTED,
        embeddings: Optional[dict[str, EmbeddingVector]] = None,
    ) -> list[QueryResult]:
        """Run the store's own similarity search and return ranked results."""
        ...

    async def list_hashes(self, collection_id: CollectionId) -> list[str]:
        """List record hashes in a collection."""
        ...

    async def list_records(self, collection_id: CollectionId) -> list[VectorRecord]:
        """List records with their vectors (for local similarity search)."""
        ...

    async def delete(self, collection_id: CollectionId, hashes: list[str]) -> int:
        """Delete records by hash and return the number removed."""
        ...

    async def purge(self, collection_id: CollectionId) -> None:
        """Remove every record in a collection."""
        ...
