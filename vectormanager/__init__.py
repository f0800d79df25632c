"""Vector Manager - retrieval-augmented context for turn-based chat applications."""

__version__ = "1.0.0"
__description__ = "Retrieval-augmented context injection for chat transcripts"

__all__ = [
    "Chunker",
    "PipelineCoordinator",
    "VectorManagerConfig",
]


def __getattr__(name: str):
    """Lazy import to keep package import light."""
    if name == "Chunker":
        from .chunker import Chunker
        return Chunker
    elif name == "PipelineCoordinator":
        from services.pipeline_coordinator import PipelineCoordinator
        return PipelineCoordinator
    elif name == "VectorManagerConfig":
        from .core.config import VectorManagerConfig
        return VectorManagerConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
