"""Host vector store for Vector Manager - delegates collections to the host's vector API."""

import asyncio
import json
from typing import Any, Dict, List, Optional

import aiohttp
from loguru import logger

from core.exceptions import ValidationError, VectorStoreError
from core.models import QueryResult, VectorRecord
from core.types import CollectionId, EmbeddingSource, EmbeddingVector


class HostVectorStore:
    """VectorStore implementation over the host's ``/api/vector/*`` endpoints.

    Every request body carries ``collectionId`` and ``source``; with
    ``source="store"`` the host computes embeddings itself and no vectors are
    sent.
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: int = 30,
    ):
        """Initialize host store.

        Args:
            base_url: Host base URL (e.g., "http://127.0.0.1:8000")
            headers: Extra request headers (e.g., a CSRF token)
            timeout: Request timeout in seconds
        """
        self._base_url = base_url.rstrip('/')
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "host"

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def supports_local_search(self) -> bool:
        return True

    async def _post(self, operation: str, collection_id: CollectionId, body: Dict[str, Any]) -> Any:
        """POST a body to ``/api/vector/<operation>`` and return the decoded JSON (or None)."""
        url = f"{self._base_url}/api/vector/{operation}"
        payload = {"collectionId": collection_id, **body}

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout)) as session:
                async with session.post(url, headers=self._headers, json=payload) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        raise VectorStoreError(
                            operation, collection_id,
                            f"HTTP {response.status}: {error_text[:200]}",
                            context={"status_code": response.status},
                        )
                    text = await response.text()
        except aiohttp.ClientError as e:
            raise VectorStoreError(operation, collection_id, f"Request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise VectorStoreError(operation, collection_id, "Request timed out") from e

        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise VectorStoreError(operation, collection_id, f"Invalid JSON response: {e}") from e

    async def insert(
        self,
        collection_id: CollectionId,
        records: List[VectorRecord],
        source: EmbeddingSource = EmbeddingSource.PRECOMPUTED,
    ) -> int:
        if not records:
            return 0

        body: Dict[str, Any] = {
            "source": source.value,
            "items": [record.to_dict(include_vector=False) for record in records],
        }
        if source is EmbeddingSource.PRECOMPUTED:
            missing = [r.hash for r in records if r.embedding is None]
            if missing:
                raise VectorStoreError(
                    "insert", collection_id,
                    f"{len(missing)} records have no vector for a precomputed insert",
                )
            body["embeddings"] = {record.text: list(record.embedding) for record in records}

        await self._post("insert", collection_id, body)
        logger.debug(f"Inserted {len(records)} records into host collection {collection_id}")
        return len(records)

    async def query(
        self,
        collection_id: CollectionId,
        text: str,
        top_k: int,
        threshold: float,
        source: EmbeddingSource = EmbeddingSource.PRECOMPUTED,
        embeddings: Optional[Dict[str, EmbeddingVector]] = None,
    ) -> List[QueryResult]:
        body: Dict[str, Any] = {
            "source": source.value,
            "searchText": text,
            "topK": top_k,
            "threshold": threshold,
        }
        if embeddings:
            body["embeddings"] = embeddings

        data = await self._post("query", collection_id, body)
        items = data.get("results", []) if isinstance(data, dict) else (data or [])

        try:
            return [QueryResult.from_dict(item) for item in items]
        except ValidationError as e:
            raise VectorStoreError("query", collection_id, f"Malformed query result: {e}") from e

    async def list_hashes(self, collection_id: CollectionId) -> List[str]:
        data = await self._post("list", collection_id, {"source": EmbeddingSource.PRECOMPUTED.value})
        hashes = data.get("hashes", []) if isinstance(data, dict) else (data or [])
        return [str(h) for h in hashes]

    async def list_records(self, collection_id: CollectionId) -> List[VectorRecord]:
        data = await self._post(
            "list", collection_id,
            {"source": EmbeddingSource.PRECOMPUTED.value, "includeVectors": True},
        )
        items = data.get("records", []) if isinstance(data, dict) else []

        try:
            return [VectorRecord.from_dict(item, collection_id) for item in items]
        except ValidationError as e:
            raise VectorStoreError("list", collection_id, f"Malformed record: {e}") from e

    async def delete(self, collection_id: CollectionId, hashes: List[str]) -> int:
        if not hashes:
            return 0
        await self._post("delete", collection_id, {"source": EmbeddingSource.PRECOMPUTED.value, "hashes": hashes})
        return len(hashes)

    async def purge(self, collection_id: CollectionId) -> None:
        await self._post("purge", collection_id, {"source": EmbeddingSource.PRECOMPUTED.value})
        logger.info(f"Purged host collection {collection_id}")
