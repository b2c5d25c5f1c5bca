from .resolver import SubcircuitResolver
from .graph import build_connectivity_graph
from .exceptions import (
    ResolutionError,
    UnknownSubcircuitError,
    NodeCountMismatchError,
    DuplicateComponentError,
)

__all__ = [
    "SubcircuitResolver",
    "build_connectivity_graph",
    "ResolutionError",
    "UnknownSubcircuitError",
    "NodeCountMismatchError",
    "DuplicateComponentError",
]
