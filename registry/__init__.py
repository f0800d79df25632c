"""Provider registry and dependency injection container for Vector Manager."""

from pathlib import Path
from typing import Any, Callable, Dict, Optional

from loguru import logger

from interfaces.host_adapter import HostAdapter
from providers.embeddings.openai_provider import OpenAIEmbeddingProvider
from providers.rerank.cohere_provider import CohereRerankProvider
from providers.vector_store.host_store import HostVectorStore
from providers.vector_store.local_store import LocalVectorStore
from services.pipeline_coordinator import PipelineCoordinator
from vectormanager.chunker import Chunker
from vectormanager.core.config import VectorManagerConfig

ProviderFactory = Callable[[VectorManagerConfig], Any]


class ProviderRegistry:
    """Registry for managing provider implementations and dependency injection.

    Providers are registered as factories taking the configuration and are
    created once per registry on first use. A factory may return None to
    mark an optional provider as switched off.
    """

    def __init__(self, config: Optional[VectorManagerConfig] = None):
        """Initialize the provider registry.

        Args:
            config: Configuration used by the provider factories
        """
        self._config = config or VectorManagerConfig()
        self._factories: Dict[str, ProviderFactory] = {}
        self._instances: Dict[str, Any] = {}

        self._register_default_providers()

    @property
    def config(self) -> VectorManagerConfig:
        return self._config

    def configure(self, config: VectorManagerConfig) -> None:
        """Replace the configuration and drop already-created providers.

        Args:
            config: New configuration
        """
        self._config = config
        self._instances.clear()
        logger.info("Provider registry configured")

    def register_provider(self, name: str, implementation: Any) -> None:
        """Register a provider factory or a ready-made instance.

        Args:
            name: Provider name ("embedding", "rerank", "vector_store")
            implementation: Callable taking the config, or a provider instance
        """
        if callable(implementation) and not hasattr(implementation, "name"):
            self._factories[name] = implementation
        else:
            self._factories[name] = lambda _config: implementation
        self._instances.pop(name, None)
        logger.debug(f"Registered provider {name}")

    def get_provider(self, name: str) -> Any:
        """Get a provider instance for the specified name.

        Args:
            name: Provider name to get

        Returns:
            Provider instance, or None for a switched-off optional provider

        Raises:
            ValueError: If no provider is registered for the name
        """
        if name not in self._factories:
            raise ValueError(f"No provider registered for {name}")

        if name not in self._instances:
            self._instances[name] = self._factories[name](self._config)
        return self._instances[name]

    def create_pipeline_coordinator(self, host: HostAdapter) -> PipelineCoordinator:
        """Create a PipelineCoordinator with all dependencies.

        Args:
            host: Host adapter for the active chat

        Returns:
            Configured PipelineCoordinator instance
        """
        vectorization = self._config.vectorization
        return PipelineCoordinator(
            config=self._config,
            host=host,
            vector_store=self.get_provider("vector_store"),
            embedding_provider=self.get_provider("embedding"),
            rerank_provider=self.get_provider("rerank"),
            chunker=Chunker(vectorization.chunk_size, vectorization.overlap),
        )

    def _register_default_providers(self) -> None:
        """Register default provider implementations."""
        self.register_provider("embedding", _create_embedding_provider)
        self.register_provider("rerank", _create_rerank_provider)
        self.register_provider("vector_store", _create_vector_store)


def _create_embedding_provider(config: VectorManagerConfig) -> Optional[OpenAIEmbeddingProvider]:
    if not config.embedding.enabled:
        logger.debug("Embedding disabled, the vector store computes embeddings")
        return None

    params = config.embedding.get_provider_config()
    logger.debug(f"Creating embedding provider: {config.embedding!r}")
    return OpenAIEmbeddingProvider(**params)


def _create_rerank_provider(config: VectorManagerConfig) -> Optional[CohereRerankProvider]:
    if not config.rerank.enabled:
        return None
    return CohereRerankProvider(
        api_key=config.rerank.get_api_key(),
        model=config.rerank.model,
        url=config.rerank.url,
        timeout=config.rerank.timeout,
    )


def _create_vector_store(config: VectorManagerConfig) -> Any:
    store_config = config.vector_store
    if store_config.kind == "host":
        return HostVectorStore(store_config.base_url, timeout=store_config.timeout)
    return LocalVectorStore(Path(store_config.path) if store_config.path else None)


__all__ = [
    'ProviderRegistry',
    'ProviderFactory',
]
