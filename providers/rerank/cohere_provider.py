"""Cohere rerank provider for Vector Manager - relevance reordering over HTTP."""

import asyncio
import os
from typing import Any, Optional

import aiohttp
from loguru import logger

from core.exceptions import ConfigurationError, ProviderError

DEFAULT_RERANK_URL = "https://api.cohere.ai/v1/rerank"


class CohereRerankProvider:
    """Rerank provider for Cohere-compatible ``/v1/rerank`` endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "rerank-multilingual-v2.0",
        url: Optional[str] = None,
        timeout: int = 30,
    ):
        """Initialize rerank provider.

        Args:
            api_key: Cohere API key (falls back to COHERE_API_KEY)
            model: Rerank model name
            url: Endpoint URL (defaults to the hosted Cohere endpoint)
            timeout: Request timeout in seconds
        """
        self._api_key = api_key or os.getenv("COHERE_API_KEY")
        self._model = model
        self._url = url or DEFAULT_RERANK_URL
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "cohere"

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return self._url

    def is_available(self) -> bool:
        return bool(self._api_key)

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
            (document index, relevance score) pairs in the provider's order
        """
        key = api_key or self._api_key
        if not key:
            raise ConfigurationError("rerank.api_key", None, "Rerank API key is not set")
        if not documents:
            return []

        payload = {
            "model": model or self._model,
            "query": query,
            "documents": documents,
            "top_n": max(1, min(top_n, len(documents))),
        }
        headers = {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

        logger.debug(f"Reranking {len(documents)} documents with {payload['model']}")

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout)) as session:
                async with session.post(self._url, headers=headers, json=payload) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        raise ProviderError(
                            provider=self.name,
                            service="rerank",
                            status_code=response.status,
                            reason=f"HTTP {response.status}: {error_text[:200]}",
                        )
                    data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ProviderError(self.name, "rerank", reason=f"Request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderError(self.name, "rerank", reason="Request timed out") from e
        except ValueError as e:
            raise ProviderError(self.name, "rerank", reason=f"Invalid JSON response: {e}") from e

        return self._parse_results(data, len(documents))

    def _parse_results(self, data: Any, document_count: int) -> list[tuple[int, float]]:
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise ProviderError(self.name, "rerank", reason="Invalid response format: missing 'results' field")

        ranked = []
        for item in results:
            try:
                index = int(item["index"])
                score = float(item["relevance_score"])
            except (KeyError, TypeError, ValueError) as e:
                raise ProviderError(self.name, "rerank", reason=f"Malformed result entry: {item!r}") from e

            if not 0 <= index < document_count:
                raise ProviderError(
                    self.name, "rerank",
                    reason=f"Result index {index} out of range for {document_count} documents",
                )
            ranked.append((index, score))

        return ranked
