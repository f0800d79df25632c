"""Embedding service for Vector Manager - turns chunks into stored vector records."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from core.exceptions import EmbeddingError
from core.models import Chunk, EventLog, VectorRecord
from core.types import CollectionId, EmbeddingSource
from interfaces.embedding_provider import EmbeddingProvider, ProgressCallback
from interfaces.vector_store import VectorStore
from .base_service import BaseService


@dataclass
class IngestionStats:
    """Counts for one ingestion run."""

    total: int = 0
    inserted: int = 0
    skipped_existing: int = 0
    skipped_duplicate: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "inserted": self.inserted,
            "skipped_existing": self.skipped_existing,
            "skipped_duplicate": self.skipped_duplicate,
        }


class EmbeddingService(BaseService):
    """Service for embedding new chunks and inserting them into a collection."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_provider: Optional[EmbeddingProvider] = None,
    ):
        """Initialize embedding service.

        Args:
            vector_store: Vector store for persistence
            embedding_provider: Embedding provider (None: the store computes embeddings)
        """
        super().__init__(vector_store)
        self._embedding_provider = embedding_provider

    @property
    def source(self) -> EmbeddingSource:
        """Where embeddings for new records come from."""
        return EmbeddingSource.STORE if self._embedding_provider is None else EmbeddingSource.PRECOMPUTED

    async def filter_new_chunks(
        self,
        collection_id: CollectionId,
        chunks: Sequence[Chunk],
        stats: IngestionStats,
    ) -> List[Chunk]:
        """Drop chunks already stored in the collection and duplicates within the run."""
        existing = set(await self._store.list_hashes(collection_id))
        seen = set()
        new_chunks = []

        for chunk in chunks:
            if chunk.hash in existing:
                stats.skipped_existing += 1
            elif chunk.hash in seen:
                stats.skipped_duplicate += 1
            else:
                seen.add(chunk.hash)
                new_chunks.append(chunk)

        return new_chunks

    async def ingest(
        self,
        collection_id: CollectionId,
        chunks: Sequence[Chunk],
        progress: Optional[ProgressCallback] = None,
        events: Optional[EventLog] = None,
    ) -> IngestionStats:
        """Embed and insert chunks not yet in the collection.

        All vectors are acquired before anything is inserted, so a provider
        failure leaves the collection as it was.

        Args:
            collection_id: Target collection
            chunks: Chunks from the current selection
            progress: Called with (done, total) after each embedding batch
            events: Diagnostics sink

        Returns:
            Ingestion counts
        """
        events = events if events is not None else EventLog()
        stats = IngestionStats(total=len(chunks))

        new_chunks = await self.filter_new_chunks(collection_id, chunks, stats)
        if stats.skipped_existing or stats.skipped_duplicate:
            events.record(
                "ingestion", "info",
                f"Skipped {stats.skipped_existing} stored and {stats.skipped_duplicate} duplicate chunks",
                collection=collection_id,
            )

        if not new_chunks:
            logger.info(f"No new chunks for {collection_id}")
            return stats

        vectors: List[Optional[List[float]]] = [None] * len(new_chunks)
        if self._embedding_provider is not None:
            texts = [chunk.text for chunk in new_chunks]
            vectors = await self._embedding_provider.embed_batch(texts, progress=progress)
            if len(vectors) != len(new_chunks):
                raise EmbeddingError(
                    provider=self._embedding_provider.name,
                    model=self._embedding_provider.model,
                    operation="embed_batch",
                    reason=f"Expected {len(new_chunks)} vectors, received {len(vectors)}",
                )

        records = [
            VectorRecord(
                hash=chunk.hash,
                text=chunk.text,
                index=index,
                collection_id=collection_id,
                embedding=vector,
                timestamp=chunk.timestamp,
                speaker=chunk.speaker,
            )
            for index, (chunk, vector) in enumerate(zip(new_chunks, vectors))
        ]

        stats.inserted = await self._store.insert(collection_id, records, source=self.source)
        logger.info(f"Inserted {stats.inserted} records into {collection_id} ({self.source.value})")
        return stats
