"""
Configuration management package for Vector Manager.

This package provides a unified configuration system that supports:
- Multiple configuration sources (environment variables, JSON/YAML files, CLI args)
- Type-safe configuration validation using Pydantic
- Clamping of out-of-range settings instead of hard failures
- Secure handling of sensitive configuration data
"""

from .embedding_config import EmbeddingConfig
from .settings_sources import deep_merge, find_config_files, load_config_file
from .unified_config import (
    DEFAULT_TEMPLATE,
    InjectionConfig,
    MessageTypesConfig,
    RerankConfig,
    RetrievalConfig,
    VectorizationConfig,
    VectorManagerConfig,
    VectorStoreConfig,
)

__all__ = [
    "DEFAULT_TEMPLATE",
    "EmbeddingConfig",
    "InjectionConfig",
    "MessageTypesConfig",
    "RerankConfig",
    "RetrievalConfig",
    "VectorizationConfig",
    "VectorManagerConfig",
    "VectorStoreConfig",
    "deep_merge",
    "find_config_files",
    "load_config_file",
]
