"""Embedding providers package for Vector Manager - concrete embedding implementations."""

from .openai_provider import DEFAULT_OPENAI_URL, OpenAIEmbeddingProvider

__all__ = [
    "DEFAULT_OPENAI_URL",
    "OpenAIEmbeddingProvider",
]
