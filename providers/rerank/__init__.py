"""Rerank providers package for Vector Manager."""

from .cohere_provider import DEFAULT_RERANK_URL, CohereRerankProvider

__all__ = [
    "DEFAULT_RERANK_URL",
    "CohereRerankProvider",
]
