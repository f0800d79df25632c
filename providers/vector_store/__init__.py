"""Vector store providers package for Vector Manager."""

from .host_store import HostVectorStore
from .local_store import LocalVectorStore

__all__ = [
    "HostVectorStore",
    "LocalVectorStore",
]
