# src/spicelib_core/parser/definitions.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Tuple

# These frozen dataclasses are the contract between the parsers, the
# LibraryIndex and the SubcircuitResolver. Nothing downstream receives raw
# dictionaries or regex match objects: mapping fields are wrapped in
# read-only views when a definition is created.

MODEL_TYPES: Tuple[str, ...] = (
    "diode", "bjt_npn", "bjt_pnp", "mosfet_n", "mosfet_p",
    "jfet_n", "jfet_p", "voltage_switch", "current_switch", "other",
)

TS_PARAMETER_NAMES = frozenset({
    "FS", "QTS", "QES", "QMS", "VAS", "RE", "LE", "BL", "XMAX", "MMS", "CMS", "SD",
})


@dataclass(frozen=True)
class ModelDefinition:
    """A `.MODEL` statement: a named device model with numeric parameters."""
    name: str
    model_type: str
    parameters: Mapping[str, float] = field(default_factory=dict)
    type_keyword: str = ""
    source_file: Optional[Path] = None

    def __post_init__(self):
        _freeze_fields(self, "parameters")


@dataclass(frozen=True)
class SubcircuitDefinition:
    """
    A `.SUBCKT ... .ENDS` block. Pin order in `nodes` is significant: an
    instance binds its own nodes to these pins by position.
    """
    name: str
    nodes: Tuple[str, ...]
    definition_body: str
    metadata: Mapping[str, str] = field(default_factory=dict)
    ts_parameters: Mapping[str, float] = field(default_factory=dict)
    source_file: Optional[Path] = None

    def __post_init__(self):
        _freeze_fields(self, "metadata", "ts_parameters")
        if len(self.nodes) < 1:
            raise ValueError(f"Subcircuit '{self.name}' must declare at least one external node.")

    @property
    def pin_count(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class ComponentDefinition:
    """One component instance line of a netlist (or of a subcircuit body)."""
    name: str
    component_type: str
    nodes: Tuple[str, ...]
    value: Optional[float] = None
    model: Optional[str] = None
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        _freeze_fields(self, "parameters")

    @property
    def is_subcircuit_instance(self) -> bool:
        return self.component_type == "subcircuit"


@dataclass(frozen=True)
class ParsedLibrary:
    """Everything one library file contributed, in file order."""
    source_file: Optional[Path]
    models: List[ModelDefinition]
    subcircuits: List[SubcircuitDefinition]


@dataclass(frozen=True)
class ParsedNetlist:
    """A full circuit description: its components plus locally defined models and subcircuits."""
    components: List[ComponentDefinition]
    models: List[ModelDefinition]
    subcircuits: List[SubcircuitDefinition] = field(default_factory=list)
    title: Optional[str] = None
    source_file: Optional[Path] = None


def _freeze_fields(instance: Any, *names: str):
    for name in names:
        object.__setattr__(instance, name, MappingProxyType(dict(getattr(instance, name))))
