"""Rerank service for Vector Manager - optional relevance reordering that fails open."""

from typing import List, Optional, Sequence

from loguru import logger

from core.exceptions import ConfigurationError, ProviderError
from core.models import EventLog, QueryResult, RerankedResult
from interfaces.rerank_provider import RerankProvider


class RerankService:
    """Reorders retrieved results with a relevance model.

    Any provider failure returns the input unchanged and records a warning
    event; reranking never fails a retrieval.
    """

    def __init__(
        self,
        provider: Optional[RerankProvider] = None,
        enabled: bool = False,
        top_n: int = 5,
        hybrid_weight: float = 0.5,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ):
        """Initialize rerank service.

        Args:
            provider: Rerank provider implementation
            enabled: Whether reranking is switched on
            top_n: Results requested from the provider
            hybrid_weight: Weight of the rerank score in the reported hybrid score
            api_key: Per-call API key override
            model: Per-call model override
        """
        self._provider = provider
        self._enabled = enabled
        self._top_n = top_n
        self._hybrid_weight = hybrid_weight
        self._api_key = api_key
        self._model = model

    @property
    def is_active(self) -> bool:
        """True when enabled, a provider is set and a key is available."""
        if not self._enabled or self._provider is None:
            return False
        if self._api_key:
            return True
        is_available = getattr(self._provider, "is_available", None)
        return bool(is_available()) if callable(is_available) else False

    async def rerank(
        self,
        query: str,
        results: Sequence[QueryResult],
        events: Optional[EventLog] = None,
    ) -> List[QueryResult]:
        """Rerank results against the query.

        The provider's order is authoritative. Each result also carries a
        hybrid score blending rerank and similarity scores by ``hybrid_weight``;
        it is reported in the result payload and never used for ordering.

        Returns:
            Provider-ordered RerankedResults on success, otherwise the input as-is
        """
        events = events if events is not None else EventLog()
        if not self.is_active or not results:
            return list(results)

        try:
            ranked = await self._provider.rerank(
                query,
                [r.text for r in results],
                self._top_n,
                api_key=self._api_key,
                model=self._model,
            )
        except (ProviderError, ConfigurationError) as e:
            events.record("rerank", "warning", f"Rerank failed, keeping original order: {e}")
            return list(results)

        if not ranked:
            events.record("rerank", "warning", "Rerank returned no results, keeping original order")
            return list(results)

        if any(not 0 <= index < len(results) for index, _ in ranked):
            events.record("rerank", "warning", "Rerank returned an out-of-range index, keeping original order")
            return list(results)

        reranked = [
            RerankedResult.from_result(results[index], score, self._hybrid_weight)
            for index, score in ranked
        ]
        logger.info(f"Reranked {len(results)} results into {len(reranked)}")
        return reranked
