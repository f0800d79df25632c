"""Base service class for Vector Manager services."""

from abc import ABC

from interfaces.vector_store import VectorStore


class BaseService(ABC):
    """Base service class providing common functionality and dependency management."""

    def __init__(self, vector_store: VectorStore):
        """Initialize service with vector store dependency.

        Args:
            vector_store: Vector store implementation
        """
        self._store = vector_store

    @property
    def store(self) -> VectorStore:
        """Get vector store instance."""
        return self._store
