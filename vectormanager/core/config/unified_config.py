"""
Unified configuration system for Vector Manager.

This module provides a single, type-safe configuration model covering the
embedding client, retrieval, reranking, injection, vectorization and vector
store, with hierarchical loading from multiple sources.
"""

import json
from pathlib import Path
from typing import Any, Literal, Optional

from loguru import logger
from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.types import RoleType, SearchStrategy
from vectormanager.message_selector import parse_layer_range

from .clamping import clamp_number
from .embedding_config import EmbeddingConfig
from .settings_sources import deep_merge, load_config_file, load_discovered_files

DEFAULT_TEMPLATE = "Relevant context:\n{{text}}"


class RetrievalConfig(BaseModel):
    """Similarity query configuration."""

    enabled: bool = Field(
        default=True,
        description="Run retrieval before each generation"
    )

    strategy: Literal['local', 'delegated'] = Field(
        default='delegated',
        description="Score records locally or delegate to the vector store"
    )

    score_threshold: float = Field(
        default=0.7,
        description="Minimum similarity score kept"
    )

    query_message_count: int = Field(
        default=5,
        description="Recent messages joined into the query text"
    )

    max_results: int = Field(
        default=10,
        description="Maximum results injected"
    )

    notify_success: bool = Field(
        default=True,
        description="Notify when context was injected"
    )

    @field_validator('score_threshold', mode='before')
    def clamp_threshold(cls, v: Any) -> Any:
        return clamp_number('retrieval.score_threshold', v, low=0.0, high=1.0)

    @field_validator('query_message_count', 'max_results', mode='before')
    def clamp_counts(cls, v: Any, info) -> Any:
        return clamp_number(f'retrieval.{info.field_name}', v, low=1, cast=int)

    @property
    def search_strategy(self) -> SearchStrategy:
        return SearchStrategy(self.strategy)


class RerankConfig(BaseModel):
    """Relevance rerank configuration."""

    enabled: bool = Field(
        default=False,
        description="Rerank retrieved results"
    )

    notify: bool = Field(
        default=True,
        description="Notify when reranking fails"
    )

    api_key: Optional[SecretStr] = Field(
        default=None,
        description="Rerank provider API key"
    )

    model: str = Field(
        default='rerank-multilingual-v2.0',
        description="Rerank model name"
    )

    top_n: int = Field(
        default=5,
        description="Results requested from the rerank provider"
    )

    hybrid_weight: float = Field(
        default=0.5,
        description="Weight of the rerank score in the hybrid score"
    )

    url: Optional[str] = Field(
        default=None,
        description="Rerank endpoint URL (defaults to the hosted Cohere endpoint)"
    )

    timeout: int = Field(
        default=30,
        description="Request timeout in seconds"
    )

    @field_validator('top_n', 'timeout', mode='before')
    def clamp_positive(cls, v: Any, info) -> Any:
        return clamp_number(f'rerank.{info.field_name}', v, low=1, cast=int)

    @field_validator('hybrid_weight', mode='before')
    def clamp_hybrid_weight(cls, v: Any) -> Any:
        return clamp_number('rerank.hybrid_weight', v, low=0.0, high=1.0)

    def get_api_key(self) -> Optional[str]:
        return self.api_key.get_secret_value() if self.api_key else None


class InjectionConfig(BaseModel):
    """Prompt injection configuration."""

    template: str = Field(
        default=DEFAULT_TEMPLATE,
        description="Template with a single {{text}} placeholder"
    )

    depth: int = Field(
        default=1,
        description="Trailing turns kept after the injected block"
    )

    role: Literal['system', 'user', 'assistant'] = Field(
        default='system',
        description="Role of the injected block"
    )

    @model_validator(mode='before')
    @classmethod
    def accept_role_type(cls, data: Any) -> Any:
        """Accept the host's ``role_type`` key as an alias of ``role``."""
        if isinstance(data, dict) and 'role_type' in data and 'role' not in data:
            data = {**data, 'role': data['role_type']}
        return data

    @field_validator('role', mode='before')
    def normalize_role(cls, v: Any) -> str:
        if isinstance(v, RoleType):
            return v.value
        return RoleType.from_string(str(v or '')).value

    @field_validator('depth', mode='before')
    def clamp_depth(cls, v: Any) -> Any:
        return clamp_number('injection.depth', v, low=0, cast=int)

    @property
    def role_type(self) -> RoleType:
        return RoleType(self.role)


class MessageTypesConfig(BaseModel):
    """Message kinds selected for vectorization."""

    user: bool = True
    ai: bool = True
    hidden: bool = False

    def as_flags(self) -> dict[str, bool]:
        return {'user': self.user, 'ai': self.ai, 'hidden': self.hidden}


class VectorizationConfig(BaseModel):
    """Ingestion configuration."""

    include_chat_messages: bool = Field(
        default=True,
        description="Vectorize chat messages"
    )

    chunk_size: int = Field(
        default=512,
        description="Chunk window size in characters"
    )

    overlap: int = Field(
        default=50,
        description="Characters shared by consecutive chunks"
    )

    layer_start: int = Field(
        default=1,
        description="First layer (1 = oldest message)"
    )

    layer_end: int = Field(
        default=10,
        description="Last layer, inclusive"
    )

    message_types: MessageTypesConfig = Field(
        default_factory=MessageTypesConfig,
        description="Message kinds to vectorize"
    )

    @model_validator(mode='before')
    @classmethod
    def normalize_layers(cls, data: Any) -> Any:
        """Accept a ``layer_range`` string and clamp/swap the layer bounds."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        layer_range = data.pop('layer_range', None)
        if layer_range is not None:
            data['layer_start'], data['layer_end'] = parse_layer_range(str(layer_range))

        start = clamp_number('vectorization.layer_start', data.get('layer_start', 1), low=1, cast=int)
        end = clamp_number('vectorization.layer_end', data.get('layer_end', 10), low=1, cast=int)
        if isinstance(start, int) and isinstance(end, int) and start > end:
            logger.warning(f"Layer range {start}-{end} is reversed, using {end}-{start}")
            start, end = end, start

        data['layer_start'] = start
        data['layer_end'] = end
        return data

    @property
    def layer_range(self) -> str:
        return f"{self.layer_start}-{self.layer_end}"


class VectorStoreConfig(BaseModel):
    """Vector store configuration."""

    kind: Literal['local', 'host'] = Field(
        default='local',
        description="Bundled local store or the host's vector API"
    )

    base_url: str = Field(
        default='http://127.0.0.1:8000',
        description="Host base URL for the host store"
    )

    path: Optional[str] = Field(
        default=None,
        description="JSON file persisting the local store (None keeps it in memory)"
    )

    timeout: int = Field(
        default=30,
        description="Request timeout in seconds"
    )

    @field_validator('base_url')
    def validate_base_url(cls, v: str) -> str:
        v = v.rstrip('/')
        if not (v.startswith('http://') or v.startswith('https://')):
            raise ValueError('base_url must start with http:// or https://')
        return v


class VectorManagerConfig(BaseSettings):
    """
    Unified configuration for Vector Manager.

    Configuration Sources (in order of precedence):
    1. Runtime parameters (highest priority)
    2. Explicit config file (JSON or YAML)
    3. Project config file (.vector-manager.json)
    4. User config file (~/.vector-manager/config.json)
    5. Environment variables (VECTOR_MANAGER_*)
    6. Default values (lowest priority)

    Environment Variable Examples:
        VECTOR_MANAGER_EMBEDDING__API_KEY=sk-...
        VECTOR_MANAGER_EMBEDDING__ENDPOINT=custom
        VECTOR_MANAGER_RETRIEVAL__SCORE_THRESHOLD=0.6
        VECTOR_MANAGER_RERANK__ENABLED=true
        VECTOR_MANAGER_VECTOR_STORE__KIND=host
    """

    model_config = SettingsConfigDict(
        env_prefix='VECTOR_MANAGER_',
        env_nested_delimiter='__',
        case_sensitive=False,
        validate_default=True,
        extra='ignore',
        env_file=None,
    )

    embedding: EmbeddingConfig = Field(
        default_factory=EmbeddingConfig,
        description="Embedding client configuration"
    )

    retrieval: RetrievalConfig = Field(
        default_factory=RetrievalConfig,
        description="Retrieval configuration"
    )

    rerank: RerankConfig = Field(
        default_factory=RerankConfig,
        description="Rerank configuration"
    )

    injection: InjectionConfig = Field(
        default_factory=InjectionConfig,
        description="Injection configuration"
    )

    vectorization: VectorizationConfig = Field(
        default_factory=VectorizationConfig,
        description="Vectorization configuration"
    )

    vector_store: VectorStoreConfig = Field(
        default_factory=VectorStoreConfig,
        description="Vector store configuration"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    @classmethod
    def load_hierarchical(
        cls,
        project_dir: Path | None = None,
        config_file: Path | None = None,
        **override_values: Any,
    ) -> 'VectorManagerConfig':
        """
        Load configuration from hierarchical sources.

        Args:
            project_dir: Project directory to search for .vector-manager.json
            config_file: Explicit JSON or YAML configuration file
            **override_values: Runtime overrides, nested by section

        Returns:
            Loaded and validated configuration

        Raises:
            ConfigurationError: If the explicit config file cannot be loaded
        """
        config_data = load_discovered_files(project_dir)

        if config_file is not None:
            config_data = deep_merge(config_data, load_config_file(Path(config_file)))

        config_data = deep_merge(config_data, override_values)

        # Nested BaseSettings section needs explicit construction to keep its env support
        if isinstance(config_data.get('embedding'), dict):
            config_data['embedding'] = EmbeddingConfig(**config_data['embedding'])

        return cls(**config_data)

    def get_missing_config(self) -> list[str]:
        """
        Get list of missing required configuration parameters.

        Returns:
            List of missing configuration parameter names
        """
        if not self.embedding.enabled:
            return []
        return [f'embedding.{item}' for item in self.embedding.get_missing_config()]

    def is_fully_configured(self) -> bool:
        return not self.get_missing_config()

    def to_dict(self, include_secrets: bool = False) -> dict[str, Any]:
        """
        Convert configuration to dictionary format.

        Args:
            include_secrets: Reveal API keys instead of dropping them

        Returns:
            Configuration as dictionary
        """
        config_dict = self.model_dump(mode='json', exclude_none=True)

        for section, model in (('embedding', self.embedding), ('rerank', self.rerank)):
            if include_secrets and model.get_api_key():
                config_dict[section]['api_key'] = model.get_api_key()
            else:
                config_dict[section].pop('api_key', None)

        return config_dict

    def save_to_file(self, file_path: Path) -> None:
        """
        Save configuration to JSON file, without secrets.

        Args:
            file_path: Path to save configuration file
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def __repr__(self) -> str:
        """String representation hiding sensitive information."""
        return (
            f"VectorManagerConfig("
            f"embedding.endpoint={self.embedding.endpoint}, "
            f"embedding.model={self.embedding.model}, "
            f"embedding.api_key={'***' if self.embedding.api_key else None}, "
            f"retrieval.strategy={self.retrieval.strategy}, "
            f"rerank.enabled={self.rerank.enabled}, "
            f"vector_store.kind={self.vector_store.kind})"
        )
