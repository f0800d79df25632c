"""
Embedding configuration for Vector Manager.

This module provides the type-safe configuration of the embedding client:
endpoint kind, credentials, model and batching behaviour. It can be loaded
on its own from VECTOR_MANAGER_EMBEDDING_* variables or nested inside the
unified configuration.
"""

from typing import Any, Literal, Optional

from loguru import logger
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.types import EndpointKind

from .clamping import clamp_number


class EmbeddingConfig(BaseSettings):
    """
    Configuration for the embedding client.

    Environment Variable Examples:
        VECTOR_MANAGER_EMBEDDING_ENDPOINT=azure
        VECTOR_MANAGER_EMBEDDING_CUSTOM_URL=https://example.openai.azure.com/...
        VECTOR_MANAGER_EMBEDDING_API_KEY=sk-...
        VECTOR_MANAGER_EMBEDDING_BATCH_SIZE=20
    """

    model_config = SettingsConfigDict(
        env_prefix='VECTOR_MANAGER_EMBEDDING_',
        env_nested_delimiter='__',
        case_sensitive=False,
        validate_default=True,
        extra='ignore',
    )

    enabled: bool = Field(
        default=True,
        description="Compute embeddings locally (off: the vector store computes them)"
    )

    endpoint: Literal['openai', 'azure', 'custom'] = Field(
        default='openai',
        description="Embedding endpoint kind"
    )

    custom_url: Optional[str] = Field(
        default=None,
        description="Request URL for azure and custom endpoints"
    )

    api_key: Optional[SecretStr] = Field(
        default=None,
        description="API key for the embedding endpoint"
    )

    model: str = Field(
        default='text-embedding-ada-002',
        description="Embedding model name"
    )

    batch_size: int = Field(
        default=50,
        description="Texts per embedding request"
    )

    batch_delay: float = Field(
        default=1.0,
        description="Seconds to wait between successive batch requests"
    )

    timeout: int = Field(
        default=30,
        description="Request timeout in seconds"
    )

    max_retries: int = Field(
        default=0,
        description="Extra attempts for retryable failures (0 disables retry)"
    )

    retry_delay: float = Field(
        default=1.0,
        description="Base backoff delay between retries"
    )

    @field_validator('endpoint', mode='before')
    def normalize_endpoint(cls, v: Any) -> Any:
        """Accept any casing; unknown kinds fall back to the hosted endpoint."""
        if isinstance(v, EndpointKind):
            return v.value
        normalized = str(v or 'openai').strip().lower()
        if normalized not in {kind.value for kind in EndpointKind}:
            logger.warning(f"Unknown embedding endpoint {v!r}, using 'openai'")
            return 'openai'
        return normalized

    @field_validator('custom_url')
    def validate_custom_url(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the URL; an empty string means unset."""
        if v is None or not v.strip():
            return None
        return v.strip().rstrip('/')

    @field_validator('batch_size', mode='before')
    def clamp_batch_size(cls, v: Any) -> Any:
        return clamp_number('embedding.batch_size', v, low=1, cast=int)

    @field_validator('batch_delay', 'retry_delay', mode='before')
    def clamp_delays(cls, v: Any, info) -> Any:
        return clamp_number(f'embedding.{info.field_name}', v, low=0.0)

    @field_validator('timeout', mode='before')
    def clamp_timeout(cls, v: Any) -> Any:
        return clamp_number('embedding.timeout', v, low=1, cast=int)

    @field_validator('max_retries', mode='before')
    def clamp_max_retries(cls, v: Any) -> Any:
        return clamp_number('embedding.max_retries', v, low=0, high=10, cast=int)

    @property
    def endpoint_kind(self) -> EndpointKind:
        return EndpointKind(self.endpoint)

    def get_api_key(self) -> Optional[str]:
        """Get the API key as a plain string."""
        return self.api_key.get_secret_value() if self.api_key else None

    def get_missing_config(self) -> list[str]:
        """
        Get list of missing required configuration parameters.

        Returns:
            List of missing configuration parameter names
        """
        missing = []
        kind = self.endpoint_kind
        if kind.requires_url and not self.custom_url:
            missing.append('custom_url')
        if kind is not EndpointKind.CUSTOM and not self.api_key:
            missing.append('api_key')
        return missing

    def get_provider_config(self) -> dict[str, Any]:
        """Keyword arguments for OpenAIEmbeddingProvider."""
        return {
            'api_key': self.get_api_key(),
            'model': self.model,
            'endpoint': self.endpoint_kind,
            'custom_url': self.custom_url,
            'batch_size': self.batch_size,
            'batch_delay': self.batch_delay,
            'timeout': self.timeout,
            'max_retries': self.max_retries,
            'retry_delay': self.retry_delay,
        }

    def __repr__(self) -> str:
        """String representation hiding sensitive information."""
        api_key_display = "***" if self.api_key else None
        return (
            f"EmbeddingConfig("
            f"endpoint={self.endpoint}, "
            f"model={self.model}, "
            f"api_key={api_key_display}, "
            f"custom_url={self.custom_url})"
        )
