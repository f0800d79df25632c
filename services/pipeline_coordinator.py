"""Pipeline coordinator for Vector Manager - orchestrates ingestion and retrieval for a chat."""

from typing import Any, Dict, List, Optional

from loguru import logger

from core.models import (
    Collection,
    EventLog,
    ExtractedPassage,
    PipelineResult,
    PipelineStatus,
    RerankedResult,
)
from core.types import CollectionId
from interfaces.embedding_provider import EmbeddingProvider
from interfaces.host_adapter import HostAdapter
from interfaces.rerank_provider import RerankProvider
from interfaces.vector_store import VectorStore
from vectormanager.chunker import Chunker
from vectormanager.core.config import VectorManagerConfig
from vectormanager.message_selector import (
    classify_messages,
    filter_messages_by_type,
    select_layer_range,
)
from vectormanager.text_extractor import build_query_text, extract_passages, format_preview
from .base_service import BaseService
from .embedding_service import EmbeddingService
from .injection_service import InjectionService, format_results
from .rerank_service import RerankService
from .search_service import SearchService


class _EmptySelection(Exception):
    """Raised internally when a selection stage leaves nothing to process."""


class PipelineCoordinator(BaseService):
    """Coordinates the ingestion, preview and retrieval paths for the active chat.

    Every public operation returns a PipelineResult. Errors never escape: each
    one becomes a single error notification to the host plus an error event.
    """

    def __init__(
        self,
        config: VectorManagerConfig,
        host: HostAdapter,
        vector_store: VectorStore,
        embedding_provider: Optional[EmbeddingProvider] = None,
        rerank_provider: Optional[RerankProvider] = None,
        chunker: Optional[Chunker] = None,
    ):
        """Initialize pipeline coordinator.

        Args:
            config: Validated configuration
            host: Host adapter for transcript, identity and notifications
            vector_store: Vector store holding the collections
            embedding_provider: Embedding provider (ignored when embedding is disabled)
            rerank_provider: Optional rerank provider
            chunker: Optional chunker instance
        """
        super().__init__(vector_store)
        self._config = config
        self._host = host
        self._embedding_provider = embedding_provider if config.embedding.enabled else None
        self._chunker = chunker or Chunker(config.vectorization.chunk_size, config.vectorization.overlap)

        self._embedding_service = EmbeddingService(vector_store, self._embedding_provider)
        self._search_service = SearchService(vector_store, self._embedding_provider)
        self._rerank_service = RerankService(
            rerank_provider,
            enabled=config.rerank.enabled,
            top_n=config.rerank.top_n,
            hybrid_weight=config.rerank.hybrid_weight,
            api_key=config.rerank.get_api_key(),
            model=config.rerank.model,
        )
        self._injection_service = InjectionService(host)

        self._collection_id: Optional[CollectionId] = None

    @property
    def config(self) -> VectorManagerConfig:
        return self._config

    @property
    def collection_id(self) -> CollectionId:
        """Collection of the active conversation, cached until the chat changes."""
        if self._collection_id is None:
            character_id, chat_id = self._host.get_conversation_identity()
            self._collection_id = Collection(character_id, chat_id).id
            logger.debug(f"Resolved collection id {self._collection_id}")
        return self._collection_id

    def on_chat_changed(self) -> None:
        """Reset the cached collection identity and drop the previous chat's injection."""
        self._collection_id = None
        self._injection_service.clear()

    def save_settings(self) -> None:
        """Hand the current settings (without secrets) to the host."""
        self._host.persist_settings(self._config.to_dict())

    def _fail(self, operation: str, error: Exception, events: EventLog) -> PipelineResult:
        message = f"{operation.capitalize()} failed: {error}"
        events.record(operation, "error", message, error_type=type(error).__name__)
        self._host.notify(message, "error")
        return PipelineResult(PipelineStatus.ERROR, message, events=list(events), error=error)

    def _empty(self, message: str, events: EventLog, notify: bool = True) -> PipelineResult:
        events.record("coordinator", "warning", message)
        if notify:
            self._host.notify(message, "warning")
        return PipelineResult(PipelineStatus.EMPTY, message, events=list(events))

    def _select_passages(
        self,
        events: EventLog,
        layer_start: Optional[int] = None,
        layer_end: Optional[int] = None,
    ) -> List[ExtractedPassage]:
        """Run selection, classification, filtering and extraction.

        Raises:
            _EmptySelection: When a stage leaves nothing to process
        """
        settings = self._config.vectorization
        start = settings.layer_start if layer_start is None else layer_start
        end = settings.layer_end if layer_end is None else layer_end

        transcript = self._host.get_transcript()
        selection = select_layer_range(transcript, start, end, events)
        if not selection:
            raise _EmptySelection(f"No messages in layer range {start}-{end} ({len(transcript)} messages in chat)")

        classified = classify_messages(selection, self._host.user_names, events)
        filtered = filter_messages_by_type(classified, settings.message_types.as_flags())
        if not filtered:
            raise _EmptySelection("No messages match the selected message types")

        passages = extract_passages(filtered)
        if not passages:
            raise _EmptySelection("Selected messages contain no text")

        return passages

    async def preview(
        self,
        layer_start: Optional[int] = None,
        layer_end: Optional[int] = None,
    ) -> PipelineResult:
        """Show what vectorize would ingest, without embedding anything."""
        events = EventLog()
        try:
            if not self._config.vectorization.include_chat_messages:
                message = "Enable chat messages before previewing"
                events.record("coordinator", "warning", message)
                self._host.notify(message, "warning")
                return PipelineResult(PipelineStatus.SKIPPED, message, events=list(events))

            passages = self._select_passages(events, layer_start, layer_end)
            text = f"Preview ({len(passages)} messages):\n\n{format_preview(passages)}"
            return PipelineResult(
                PipelineStatus.SUCCESS,
                f"Previewing {len(passages)} messages",
                payload={"text": text, "passages": len(passages)},
                events=list(events),
            )
        except _EmptySelection as e:
            return self._empty(str(e), events)
        except Exception as e:
            return self._fail("preview", e, events)

    async def vectorize(
        self,
        layer_start: Optional[int] = None,
        layer_end: Optional[int] = None,
    ) -> PipelineResult:
        """Ingest the selected layers into the active collection."""
        events = EventLog()
        try:
            settings = self._config.vectorization
            if not settings.include_chat_messages:
                message = "Chat message vectorization is disabled"
                events.record("coordinator", "info", message)
                return PipelineResult(PipelineStatus.SKIPPED, message, events=list(events))

            passages = self._select_passages(events, layer_start, layer_end)

            chunks = self._chunker.chunk_passages(passages, settings.chunk_size, settings.overlap)
            events.extend(self._chunker.diagnostics)
            if not chunks:
                raise _EmptySelection("Selected messages produced no chunks")

            collection_id = self.collection_id

            def report_progress(done: int, total: int) -> None:
                self._host.notify(f"Vectorizing: {done}/{total}", "info")

            stats = await self._embedding_service.ingest(collection_id, chunks, report_progress, events)

            if stats.inserted:
                message = f"Vectorized {stats.inserted} chunks from {len(passages)} messages"
                self._host.notify(message, "success")
            else:
                message = f"All {len(chunks)} chunks are already vectorized"
                self._host.notify(message, "info")

            payload: Dict[str, Any] = {
                "collection_id": collection_id,
                "messages": len(passages),
                "chunks": [chunk.to_dict() for chunk in chunks],
                **stats.to_dict(),
            }
            return PipelineResult(PipelineStatus.SUCCESS, message, payload=payload, events=list(events))
        except _EmptySelection as e:
            return self._empty(str(e), events)
        except Exception as e:
            return self._fail("vectorize", e, events)

    async def on_before_generation(self, query_text: Optional[str] = None) -> PipelineResult:
        """Retrieve relevant context and inject it ahead of the next generation.

        Args:
            query_text: Explicit query (defaults to the recent transcript)
        """
        events = EventLog()
        try:
            retrieval = self._config.retrieval
            if not retrieval.enabled:
                message = "Retrieval is disabled"
                events.record("coordinator", "info", message)
                return PipelineResult(PipelineStatus.SKIPPED, message, events=list(events))

            query = query_text
            if query is None:
                query = build_query_text(self._host.get_transcript(), retrieval.query_message_count)
            if not query.strip():
                self._injection_service.clear()
                return self._empty("No query text available", events, notify=False)

            results = await self._search_service.search(
                self.collection_id,
                query,
                threshold=retrieval.score_threshold,
                max_results=retrieval.max_results,
                strategy=retrieval.search_strategy,
                events=events,
            )
            if not results:
                self._injection_service.clear()
                return self._empty("No relevant results found", events, notify=False)

            results = await self._rerank_results(query, results, events)

            injection = self._config.injection
            text = format_results(results, injection.template, events)
            delivery = self._injection_service.inject(text, injection.depth, injection.role_type, events)

            message = f"Injected {len(results)} relevant results"
            if retrieval.notify_success:
                self._host.notify(message, "success")

            return PipelineResult(
                PipelineStatus.SUCCESS,
                message,
                payload={
                    "query": query,
                    "text": text,
                    "delivery": delivery,
                    "results": [r.to_dict() for r in results],
                },
                events=list(events),
            )
        except Exception as e:
            self._clear_injection_after_error(events)
            return self._fail("retrieval", e, events)

    def _clear_injection_after_error(self, events: EventLog) -> None:
        try:
            self._injection_service.clear()
        except Exception as e:
            events.record("injection", "warning", f"Could not clear previous injection: {e}")

    async def _rerank_results(self, query: str, results: list, events: EventLog) -> list:
        if not self._rerank_service.is_active:
            return results

        reranked = await self._rerank_service.rerank(query, results, events)
        if self._config.rerank.notify:
            if reranked and isinstance(reranked[0], RerankedResult):
                self._host.notify(f"Rerank complete, {len(reranked)} results", "success")
            else:
                self._host.notify("Rerank failed, using similarity order", "warning")
        return reranked

    async def list_hashes(self) -> PipelineResult:
        """List record hashes in the active collection."""
        events = EventLog()
        try:
            hashes = await self._store.list_hashes(self.collection_id)
            return PipelineResult(
                PipelineStatus.SUCCESS if hashes else PipelineStatus.EMPTY,
                f"{len(hashes)} records in {self.collection_id}",
                payload={"collection_id": self.collection_id, "hashes": hashes},
                events=list(events),
            )
        except Exception as e:
            return self._fail("list", e, events)

    async def delete(self, hashes: List[str]) -> PipelineResult:
        """Delete records from the active collection by hash."""
        events = EventLog()
        try:
            removed = await self._store.delete(self.collection_id, list(hashes))
            message = f"Deleted {removed} records from {self.collection_id}"
            self._host.notify(message, "success")
            return PipelineResult(
                PipelineStatus.SUCCESS,
                message,
                payload={"collection_id": self.collection_id, "deleted": removed},
                events=list(events),
            )
        except Exception as e:
            return self._fail("delete", e, events)

    async def purge(self) -> PipelineResult:
        """Remove every record of the active collection."""
        events = EventLog()
        try:
            await self._store.purge(self.collection_id)
            message = f"Purged collection {self.collection_id}"
            self._host.notify(message, "success")
            return PipelineResult(
                PipelineStatus.SUCCESS,
                message,
                payload={"collection_id": self.collection_id},
                events=list(events),
            )
        except Exception as e:
            return self._fail("purge", e, events)

