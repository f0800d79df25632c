"""EmbeddingProvider protocol for Vector Manager - abstract interface for embedding implementations."""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Union

ProgressCallback = Callable[[int, int], None]


@dataclass
class EmbeddingConfig:
    """Resolved configuration for an embedding provider instance."""
    provider: str
    model: str
    url: str
    batch_size: int = 50
    batch_delay: float = 1.0
    timeout: int = 30
    max_retries: int = 0
    api_key: Optional[str] = None


class EmbeddingProvider(Protocol):
    """Abstract protocol for embedding providers.

    Defines the interface that all embedding implementations must follow.
    This enables pluggable embedding backends (hosted, Azure-style, custom URL).
    """

    @property
    def name(self) -> str:
        """Provider name (e.g., 'openai', 'azure', 'custom')."""
        ...

    @property
    def model(self) -> str:
        """Model name (e.g., 'text-embedding-ada-002')."""
        ...

    @property
    def batch_size(self) -> int:
        """Number of texts submitted per request."""
        ...

    @property
    def config(self) -> EmbeddingConfig:
        """Provider configuration."""
        ...

    async def embed(
        self,
        texts: Union[str, list[str]],
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> Union[list[float], list[list[float]]]:
        """Embed one text (returns a vector) or a list of texts (returns vectors).

        Raises:
            ProviderError: If the provider answers with a non-success response
        """
        ...

    async def embed_batch(
        self,
        texts: list[str],
        batch_size: Optional[int] = None,
        progress: Optional[ProgressCallback] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> list[list[float]]:
        """Embed texts in sequential, rate-limited batches.

        Args:
            texts: Texts to embed
            batch_size: Optional batch size override
            progress: Called with (done, total) after each successful batch
            api_key: Optional API key override
            model: Optional model override

        Returns:
            One vector per input text, in input order

        Raises:
            ProviderError: If any batch fails; no partial result is returned
        """
        ...

    def is_available(self) -> bool:
        """Check if the provider is properly configured."""
        ...
