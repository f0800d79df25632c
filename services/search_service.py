"""Search service for Vector Manager - similarity retrieval over a collection."""

from typing import List, Optional, Sequence

from loguru import logger

from core.exceptions import DimensionMismatchError
from core.models import EventLog, QueryResult, cosine_similarity, sort_by_score
from core.types import CollectionId, EmbeddingSource, Score, SearchStrategy
from interfaces.embedding_provider import EmbeddingProvider
from interfaces.vector_store import VectorStore
from .base_service import BaseService


def apply_threshold_and_limit(
    results: Sequence[QueryResult],
    threshold: float,
    max_results: int,
) -> List[QueryResult]:
    """Sort by descending score, keep scores >= threshold and truncate."""
    kept = [r for r in sort_by_score(list(results)) if r.score >= threshold]
    return kept[:max(0, max_results)]


class SearchService(BaseService):
    """Service for retrieving the records most similar to a query text."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_provider: Optional[EmbeddingProvider] = None
    ):
        """Initialize search service.

        Args:
            vector_store: Vector store holding the collections
            embedding_provider: Embedding provider (None when the store computes embeddings)
        """
        super().__init__(vector_store)
        self._embedding_provider = embedding_provider

    def resolve_strategy(self, strategy: SearchStrategy) -> SearchStrategy:
        """Fall back to delegated search when local scoring is impossible."""
        if strategy is SearchStrategy.LOCAL and (
            self._embedding_provider is None or not self._store.supports_local_search
        ):
            return SearchStrategy.DELEGATED
        return strategy

    async def search(
        self,
        collection_id: CollectionId,
        query: str,
        threshold: float,
        max_results: int,
        strategy: SearchStrategy = SearchStrategy.LOCAL,
        events: Optional[EventLog] = None,
    ) -> List[QueryResult]:
        """Retrieve results for a query text.

        Args:
            collection_id: Collection to search
            query: Query text
            threshold: Minimum similarity score kept
            max_results: Maximum number of results
            strategy: Requested search strategy
            events: Diagnostics sink

        Returns:
            Results sorted by descending score
        """
        events = events if events is not None else EventLog()
        if not query.strip():
            return []

        resolved = self.resolve_strategy(strategy)
        if resolved is not strategy:
            events.record(
                "retriever", "info",
                "Local search unavailable, delegating to the vector store",
                requested=strategy.value,
            )

        if resolved is SearchStrategy.LOCAL:
            results = await self._search_local(collection_id, query, events)
        else:
            results = await self._search_delegated(collection_id, query, threshold, max_results)

        final = apply_threshold_and_limit(results, threshold, max_results)
        logger.info(f"Search completed: {len(final)} of {len(results)} results kept ({resolved.value})")
        return final

    async def _search_local(
        self,
        collection_id: CollectionId,
        query: str,
        events: EventLog,
    ) -> List[QueryResult]:
        query_vector = await self._embedding_provider.embed(query)
        records = await self._store.list_records(collection_id)

        results = []
        for record in records:
            if not record.embedding:
                continue
            try:
                score = cosine_similarity(query_vector, record.embedding)
            except DimensionMismatchError as e:
                events.record(
                    "retriever", "error", f"Query aborted: {e}",
                    collection=collection_id, hash=record.hash,
                )
                return []

            results.append(
                QueryResult(
                    text=record.text,
                    score=Score(score),
                    hash=record.hash,
                    timestamp=record.timestamp,
                    speaker=record.speaker,
                )
            )
        return results

    async def _search_delegated(
        self,
        collection_id: CollectionId,
        query: str,
        threshold: float,
        max_results: int,
    ) -> List[QueryResult]:
        if self._embedding_provider is not None:
            query_vector = await self._embedding_provider.embed(query)
            return await self._store.query(
                collection_id, query, max_results, threshold,
                source=EmbeddingSource.PRECOMPUTED,
                embeddings={query: query_vector},
            )

        return await self._store.query(
            collection_id, query, max_results, threshold,
            source=EmbeddingSource.STORE,
        )
