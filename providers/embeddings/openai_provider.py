"""OpenAI-style embedding provider for Vector Manager - batched HTTP embedding requests."""

import asyncio
import functools
import os
from collections.abc import Awaitable, Callable
from typing import Any, Dict, List, Optional, Union

import aiohttp
from loguru import logger

from core.exceptions import ConfigurationError, ProviderError
from core.types import EndpointKind
from interfaces.embedding_provider import EmbeddingConfig, ProgressCallback

from .batch_utils import call_with_retry, split_into_batches

DEFAULT_OPENAI_URL = "https://api.openai.com/v1/embeddings"


class OpenAIEmbeddingProvider:
    """Embedding provider for OpenAI-compatible ``/embeddings`` endpoints.

    One class serves every endpoint kind; the kind only decides the request
    URL and how the API key is sent:

    - ``openai``: hosted endpoint, ``Authorization: Bearer <key>``
    - ``azure``: caller-supplied deployment URL, ``api-key: <key>``
    - ``custom``: caller-supplied URL, bearer token when a key is set
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-ada-002",
        endpoint: Union[EndpointKind, str] = EndpointKind.OPENAI,
        custom_url: Optional[str] = None,
        batch_size: int = 50,
        batch_delay: float = 1.0,
        timeout: int = 30,
        max_retries: int = 0,
        retry_delay: float = 1.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """Initialize embedding provider.

        Args:
            api_key: API key (hosted endpoint falls back to OPENAI_API_KEY)
            model: Model name sent with every request
            endpoint: Endpoint kind deciding URL and auth header
            custom_url: Request URL for azure/custom endpoints
            batch_size: Texts per request
            batch_delay: Seconds awaited between successive batch requests
            timeout: Request timeout in seconds
            max_retries: Extra attempts for retryable failures (0 disables retry)
            retry_delay: Base backoff delay between retry attempts
            sleep: Awaitable sleep used for delays (defaults to asyncio.sleep)
        """
        self._endpoint = EndpointKind(endpoint)
        self._custom_url = custom_url.rstrip('/') if custom_url else None

        if self._endpoint.requires_url and not self._custom_url:
            raise ConfigurationError(
                "custom_url", custom_url,
                f"{self._endpoint.value} endpoint requires a request URL"
            )

        if api_key is None and self._endpoint is EndpointKind.OPENAI:
            api_key = os.getenv("OPENAI_API_KEY")

        self._api_key = api_key
        self._model = model
        self._batch_size = max(1, batch_size)
        self._batch_delay = max(0.0, batch_delay)
        self._timeout = timeout
        self._max_retries = max(0, max_retries)
        self._retry_delay = retry_delay
        self._sleep = sleep or asyncio.sleep

        self._usage_stats = {
            "requests_made": 0,
            "embeddings_generated": 0,
            "errors": 0,
        }

        logger.debug(
            f"Embedding provider initialized: endpoint={self._endpoint.value}, "
            f"model={self._model}, url={self.url}"
        )

    @property
    def name(self) -> str:
        return self._endpoint.value

    @property
    def model(self) -> str:
        return self._model

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def url(self) -> str:
        """Request URL for the configured endpoint kind."""
        if self._endpoint is EndpointKind.OPENAI:
            return self._custom_url or DEFAULT_OPENAI_URL
        return self._custom_url  # type: ignore[return-value]

    @property
    def config(self) -> EmbeddingConfig:
        return EmbeddingConfig(
            provider=self.name,
            model=self.model,
            url=self.url,
            batch_size=self._batch_size,
            batch_delay=self._batch_delay,
            timeout=self._timeout,
            max_retries=self._max_retries,
            api_key=self._api_key,
        )

    def is_available(self) -> bool:
        """Hosted and azure endpoints need a key; custom endpoints may be open."""
        if self._endpoint is EndpointKind.CUSTOM:
            return True
        return bool(self._api_key)

    def get_request_headers(self, api_key: Optional[str] = None) -> Dict[str, str]:
        """Build request headers for the configured endpoint kind."""
        key = api_key or self._api_key
        headers = {"Content-Type": "application/json"}
        if not key:
            return headers

        if self._endpoint.uses_bearer_auth:
            headers["Authorization"] = f"Bearer {key}"
        else:
            headers["api-key"] = key
        return headers

    def get_usage_stats(self) -> Dict[str, Any]:
        """Get usage statistics."""
        return self._usage_stats.copy()

    async def embed(
        self,
        texts: Union[str, List[str]],
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> Union[List[float], List[List[float]]]:
        """Embed a single text or a list of texts."""
        single = isinstance(texts, str)
        items = [texts] if single else list(texts)
        if not items:
            return []

        vectors = await self.embed_batch(items, api_key=api_key, model=model)
        return vectors[0] if single else vectors

    async def embed_batch(
        self,
        texts: List[str],
        batch_size: Optional[int] = None,
        progress: Optional[ProgressCallback] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> List[List[float]]:
        """Embed texts in sequential batches with a fixed delay between requests.

        Any failed batch aborts the whole call; vectors from earlier batches
        are discarded with it.
        """
        if not texts:
            return []

        key = api_key or self._api_key
        if not key and self._endpoint is not EndpointKind.CUSTOM:
            raise ConfigurationError("api_key", None, f"{self.name} endpoint requires an API key")

        batches = split_into_batches(texts, batch_size or self._batch_size)
        request_model = model or self._model
        all_embeddings: List[List[float]] = []
        done = 0

        logger.debug(f"Embedding {len(texts)} texts in {len(batches)} batches using {request_model}")

        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout)) as session:
            for batch_idx, batch in enumerate(batches):
                # Respect upstream throughput limits between requests
                if batch_idx > 0 and self._batch_delay > 0:
                    await self._sleep(self._batch_delay)

                request = functools.partial(self._request_batch, session, batch, key, request_model)
                try:
                    batch_embeddings = await call_with_retry(
                        request,
                        max_retries=self._max_retries,
                        retry_delay=self._retry_delay,
                        sleep=self._sleep,
                        description=f"Embedding batch {batch_idx + 1}/{len(batches)}",
                    )
                except ProviderError as e:
                    self._usage_stats["errors"] += 1
                    e.add_context("batch", f"{batch_idx + 1}/{len(batches)}")
                    logger.error(f"Embedding batch {batch_idx + 1}/{len(batches)} failed: {e}")
                    raise

                all_embeddings.extend(batch_embeddings)
                done += len(batch)

                if progress is not None:
                    progress(done, len(texts))

        logger.info(f"Generated {len(all_embeddings)} embeddings using {request_model}")
        return all_embeddings

    async def _request_batch(
        self,
        session: aiohttp.ClientSession,
        batch: List[str],
        api_key: Optional[str],
        model: str,
    ) -> List[List[float]]:
        """Submit one batch and parse the ``data[].embedding`` payload."""
        payload = {"input": batch, "model": model}

        try:
            async with session.post(self.url, headers=self.get_request_headers(api_key), json=payload) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    raise ProviderError(
                        provider=self.name,
                        service="embeddings",
                        status_code=response.status,
                        reason=f"HTTP {response.status}: {error_text[:200]}",
                    )
                response_data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise ProviderError(self.name, "embeddings", reason=f"Request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderError(self.name, "embeddings", reason="Request timed out") from e
        except ValueError as e:
            raise ProviderError(self.name, "embeddings", reason=f"Invalid JSON response: {e}") from e

        self._usage_stats["requests_made"] += 1
        embeddings = self._parse_embeddings(response_data)

        if len(embeddings) != len(batch):
            raise ProviderError(
                self.name, "embeddings",
                reason=f"Expected {len(batch)} embeddings, received {len(embeddings)}",
            )

        self._usage_stats["embeddings_generated"] += len(embeddings)
        return embeddings

    def _parse_embeddings(self, response_data: Any) -> List[List[float]]:
        items = response_data.get("data") if isinstance(response_data, dict) else None
        if not isinstance(items, list):
            raise ProviderError(self.name, "embeddings", reason="Invalid response format: missing 'data' field")

        # OpenAI returns an explicit index per item; keep input order when present
        if all(isinstance(item, dict) and "index" in item for item in items):
            try:
                items = sorted(items, key=lambda item: int(item["index"]))
            except (TypeError, ValueError) as e:
                raise ProviderError(self.name, "embeddings", reason=f"Invalid response format: bad index ({e})") from e

        embeddings = []
        for item in items:
            vector = item.get("embedding") if isinstance(item, dict) else None
            if not isinstance(vector, list):
                raise ProviderError(self.name, "embeddings", reason="Invalid response format: missing 'embedding'")
            try:
                embeddings.append([float(x) for x in vector])
            except (TypeError, ValueError) as e:
                raise ProviderError(self.name, "embeddings", reason=f"Invalid response format: non-numeric embedding ({e})") from e
        return embeddings
