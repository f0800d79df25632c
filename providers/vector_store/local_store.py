"""Local vector store for Vector Manager - in-process collections with optional JSON persistence."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from core.exceptions import DimensionMismatchError, ValidationError, VectorStoreError
from core.models import QueryResult, VectorRecord, cosine_similarity, sort_by_score
from core.types import CollectionId, EmbeddingSource, EmbeddingVector, Score


class LocalVectorStore:
    """In-process implementation of the VectorStore protocol.

    Collections are plain record lists keyed by hash. When a path is given the
    whole store is written to one JSON file after every mutation and loaded
    lazily on first access.
    """

    def __init__(self, path: Optional[Union[Path, str]] = None):
        """Initialize local store.

        Args:
            path: JSON file used for persistence (None keeps everything in memory)
        """
        self._path = Path(path).expanduser() if path else None
        self._collections: Dict[str, Dict[str, VectorRecord]] = {}
        self._loaded = False

    @property
    def name(self) -> str:
        return "local"

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def supports_local_search(self) -> bool:
        return True

    def _ensure_loaded(self) -> None:
        """Load the persisted collections once.

        A file that cannot be read or parsed leaves the store unloaded, so every
        later call raises again instead of saving over the file.
        """
        if self._loaded:
            return

        if self._path is None or not self._path.exists():
            self._loaded = True
            return

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise VectorStoreError("load", reason=f"Cannot read {self._path}: {e}") from e

        collections: Dict[str, Dict[str, VectorRecord]] = {}
        try:
            for collection_id, records in data.get("collections", {}).items():
                cid = CollectionId(collection_id)
                loaded = (VectorRecord.from_dict(record, cid) for record in records)
                collections[cid] = {record.hash: record for record in loaded}
        except (ValidationError, AttributeError, TypeError) as e:
            raise VectorStoreError("load", reason=f"Invalid store file {self._path}: {e}") from e

        self._collections = collections
        self._loaded = True
        logger.debug(f"Loaded {len(self._collections)} collections from {self._path}")

    def _save(self) -> None:
        if self._path is None:
            return
        if not self._loaded:
            raise VectorStoreError("save", reason=f"Refusing to overwrite {self._path}: it was never loaded")

        data = {
            "collections": {
                collection_id: [record.to_dict() for record in records.values()]
                for collection_id, records in self._collections.items()
            }
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as e:
            raise VectorStoreError("save", reason=f"Cannot write {self._path}: {e}") from e

    async def insert(
        self,
        collection_id: CollectionId,
        records: List[VectorRecord],
        source: EmbeddingSource = EmbeddingSource.PRECOMPUTED,
    ) -> int:
        """Insert records, replacing any stored record with the same hash."""
        self._ensure_loaded()

        missing = [r.hash for r in records if r.embedding is None]
        if missing:
            raise VectorStoreError(
                "insert", collection_id,
                f"Local store cannot compute embeddings; {len(missing)} records have no vector",
            )

        collection = self._collections.setdefault(collection_id, {})
        for record in records:
            collection[record.hash] = record

        self._save()
        logger.debug(f"Inserted {len(records)} records into {collection_id}")
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
        """Score every record against the precomputed query vector."""
        self._ensure_loaded()

        query_vector = (embeddings or {}).get(text)
        if query_vector is None:
            raise VectorStoreError("query", collection_id, "Local store requires a precomputed query embedding")

        results = []
        for record in self._collections.get(collection_id, {}).values():
            try:
                score = cosine_similarity(query_vector, record.embedding or [])
            except DimensionMismatchError as e:
                raise VectorStoreError("query", collection_id, str(e)) from e
            if score >= threshold:
                results.append(_to_result(record, score))

        return sort_by_score(results)[:max(0, top_k)]

    async def list_hashes(self, collection_id: CollectionId) -> List[str]:
        self._ensure_loaded()
        return list(self._collections.get(collection_id, {}).keys())

    async def list_records(self, collection_id: CollectionId) -> List[VectorRecord]:
        self._ensure_loaded()
        return list(self._collections.get(collection_id, {}).values())

    async def delete(self, collection_id: CollectionId, hashes: List[str]) -> int:
        """Delete records by hash; unknown hashes are ignored."""
        self._ensure_loaded()
        collection = self._collections.get(collection_id, {})
        removed = 0
        for chunk_hash in hashes:
            if collection.pop(chunk_hash, None) is not None:
                removed += 1

        if removed:
            self._save()
        logger.debug(f"Deleted {removed} records from {collection_id}")
        return removed

    async def purge(self, collection_id: CollectionId) -> None:
        self._ensure_loaded()
        if self._collections.pop(collection_id, None) is not None:
            self._save()
        logger.info(f"Purged collection {collection_id}")

    def get_stats(self) -> Dict[str, Any]:
        """Get record counts per collection."""
        self._ensure_loaded()
        return {
            "collections": len(self._collections),
            "records": {cid: len(records) for cid, records in self._collections.items()},
        }


def _to_result(record: VectorRecord, score: float) -> QueryResult:
    return QueryResult(
        text=record.text,
        score=Score(score),
        hash=record.hash,
        timestamp=record.timestamp,
        speaker=record.speaker,
    )
