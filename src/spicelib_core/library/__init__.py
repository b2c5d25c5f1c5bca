from .registry import Registry
from .index import LibraryIndex, IndexSummary

__all__ = [
    "Registry",
    "LibraryIndex",
    "IndexSummary",
]
