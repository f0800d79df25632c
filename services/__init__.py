"""Service layer for Vector Manager - pipeline coordination and business logic."""

from .base_service import BaseService
from .embedding_service import EmbeddingService, IngestionStats
from .injection_service import InjectionService, format_results
from .pipeline_coordinator import PipelineCoordinator
from .rerank_service import RerankService
from .search_service import SearchService, apply_threshold_and_limit

__all__ = [
    'BaseService',
    'EmbeddingService',
    'IngestionStats',
    'InjectionService',
    'PipelineCoordinator',
    'RerankService',
    'SearchService',
    'apply_threshold_and_limit',
    'format_results',
]
