"""Providers package for Vector Manager - concrete implementations of abstract interfaces."""

from .embeddings import OpenAIEmbeddingProvider
from .host import JsonlChatHost
from .rerank import CohereRerankProvider
from .vector_store import HostVectorStore, LocalVectorStore

__all__ = [
    # Embedding providers
    "OpenAIEmbeddingProvider",

    # Rerank providers
    "CohereRerankProvider",

    # Vector stores
    "HostVectorStore",
    "LocalVectorStore",

    # Host adapters
    "JsonlChatHost",
]
