"""Interfaces package for Vector Manager - abstract protocols for provider implementations."""

from .embedding_provider import EmbeddingConfig, EmbeddingProvider, ProgressCallback
from .host_adapter import HostAdapter
from .rerank_provider import RerankProvider
from .vector_store import VectorStore

__all__ = [
    "EmbeddingConfig",
    "EmbeddingProvider",
    "ProgressCallback",
    "HostAdapter",
    "RerankProvider",
    "VectorStore",
]
