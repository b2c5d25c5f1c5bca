# src/spicelib_core/data_structures.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

import networkx as nx

from .parser.definitions import ComponentDefinition, ModelDefinition, SubcircuitDefinition

logger = logging.getLogger(__name__)

GROUND_NODE = "0"


@dataclass(frozen=True)
class RegisteredSubcircuit:
    """
    A subcircuit definition that has been bound into a circuit.

    Registration happens once per name per circuit; every instance of that
    name then refers to this object by `definition_name` instead of holding
    its own copy. `components` is the body parsed into component definitions
    and `graph` its net connectivity (nets are graph nodes, one edge per
    component terminal pair keyed by component name).
    """
    definition: SubcircuitDefinition
    components: Tuple[ComponentDefinition, ...]
    graph: nx.MultiGraph

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def pins(self) -> Tuple[str, ...]:
        return self.definition.nodes


@dataclass(frozen=True)
class SubcircuitInstance:
    """A validated placement of a registered subcircuit: pin -> net binding is positional."""
    name: str
    definition_name: str
    nodes: Tuple[str, ...]
    pin_map: Dict[str, str] = field(default_factory=dict)


@dataclass
class Circuit:
    """
    A circuit under construction.

    This object is a data container: the `SubcircuitResolver` and the
    `CircuitBuilder` own the rules for what may be added to it. Components are
    kept in insertion order.
    """
    name: str
    title: Optional[str] = None
    source_file: Optional[Path] = None
    components: Dict[str, ComponentDefinition] = field(default_factory=dict)
    models: Dict[str, ModelDefinition] = field(default_factory=dict)
    # Subcircuits defined in the netlist itself; consulted before the LibraryIndex.
    local_subcircuits: Dict[str, SubcircuitDefinition] = field(default_factory=dict)
    registered_subcircuits: Dict[str, RegisteredSubcircuit] = field(default_factory=dict)
    instances: Dict[str, SubcircuitInstance] = field(default_factory=dict)

    @property
    def nets(self) -> Set[str]:
        return {node for component in self.components.values() for node in component.nodes}

    @property
    def has_ground(self) -> bool:
        return GROUND_NODE in self.nets
