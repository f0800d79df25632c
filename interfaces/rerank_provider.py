"""RerankProvider protocol for Vector Manager - abstract interface for relevance reranking."""

from typing import Optional, Protocol


class RerankProvider(Protocol):
    """Abstract protocol for relevance-reranking providers."""

    @property
    def name(self) -> str:
        """Provider name (e.g., 'cohere')."""
        ...

    @property
    def model(self) -> str:
        """Rerank model name."""
        ...

    async def rerank(
        self,
        query: str,
        documents: list[str],
        top_n: int,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> list[tuple[int, float]]:
        """Rank documents against a query.

        Returns:
            (document index, relevance score) pairs in ranked order

        Raises:
            ProviderError: On transport failure, non-2xx status or malformed payload
        """
        ...
