# src/spicelib_core/resolver/resolver.py
"""
Binds subcircuit instances to shared subcircuit definitions.

A definition is registered in a circuit the first time an instance needs it
and reused by every later instance of the same name. The node-count check
runs before registration, so a failed resolution leaves the circuit's
registries exactly as they were.
"""
import logging
import threading
from typing import Dict, Optional

from ..data_structures import Circuit, RegisteredSubcircuit, SubcircuitInstance
from ..library.index import LibraryIndex
from ..parser.definitions import ComponentDefinition, SubcircuitDefinition
from ..parser.netlist_parser import NetlistParser
from .exceptions import DuplicateComponentError, NodeCountMismatchError, UnknownSubcircuitError
from .graph import build_connectivity_graph, unconnected_pins

logger = logging.getLogger(__name__)


class SubcircuitResolver:
    def __init__(self, library_index: Optional[LibraryIndex] = None):
        self.library_index = library_index
        # Subcircuit bodies routinely use constructs outside the supported subset.
        self._body_parser = NetlistParser(strict=False, title_line=False)
        self._lock_table_guard = threading.Lock()
        # One lock per distinct subcircuit name ever requested; entries are never removed,
        # so the table grows with the number of names, not with the number of instances.
        self._name_locks: Dict[str, threading.Lock] = {}

    def add_component(self, circuit: Circuit, component: ComponentDefinition) -> Optional[SubcircuitInstance]:
        """
        Adds a component to the circuit, resolving it first when it is a
        subcircuit instance. Returns the instance for subcircuit components.
        """
        if component.name in circuit.components:
            raise DuplicateComponentError(component_name=component.name)

        instance = None
        if component.is_subcircuit_instance:
            instance = self.resolve(circuit, component)
            circuit.instances[instance.name] = instance
        circuit.components[component.name] = component
        return instance

    def resolve(self, circuit: Circuit, component: ComponentDefinition) -> SubcircuitInstance:
        if not component.is_subcircuit_instance or not component.model:
            raise ValueError(f"Component '{component.name}' is not a subcircuit instance.")
        subcircuit_name = component.model

        with self._lock_for(subcircuit_name):
            registered = circuit.registered_subcircuits.get(subcircuit_name)
            if registered is not None:
                definition = registered.definition
                self._check_node_count(component, definition)
                logger.debug("Reusing registered subcircuit '%s' for '%s'.", subcircuit_name, component.name)
            else:
                definition = self._find_definition(circuit, subcircuit_name)
                if definition is None:
                    raise UnknownSubcircuitError(instance_name=component.name, subcircuit_name=subcircuit_name)
                self._check_node_count(component, definition)
                self._register(circuit, definition)

        return SubcircuitInstance(
            name=component.name,
            definition_name=subcircuit_name,
            nodes=tuple(component.nodes),
            pin_map=dict(zip(definition.nodes, component.nodes)),
        )

    def _lock_for(self, subcircuit_name: str) -> threading.Lock:
        with self._lock_table_guard:
            lock = self._name_locks.get(subcircuit_name)
            if lock is None:
                lock = self._name_locks[subcircuit_name] = threading.Lock()
            return lock

    def _find_definition(self, circuit: Circuit, subcircuit_name: str) -> Optional[SubcircuitDefinition]:
        definition = circuit.local_subcircuits.get(subcircuit_name)
        if definition is None and self.library_index is not None:
            definition = self.library_index.get_subcircuit(subcircuit_name)
        return definition

    @staticmethod
    def _check_node_count(component: ComponentDefinition, definition: SubcircuitDefinition):
        if len(component.nodes) != len(definition.nodes):
            raise NodeCountMismatchError(
                instance_name=component.name,
                subcircuit_name=definition.name,
                expected=len(definition.nodes),
                actual=len(component.nodes),
            )

    def _register(self, circuit: Circuit, definition: SubcircuitDefinition) -> RegisteredSubcircuit:
        body = self._body_parser.parse_text(definition.definition_body, source=definition.source_file)
        graph = build_connectivity_graph(definition.nodes, body.components)
        registered = RegisteredSubcircuit(
            definition=definition,
            components=tuple(body.components),
            graph=graph,
        )
        circuit.registered_subcircuits[definition.name] = registered

        floating = unconnected_pins(graph, definition.nodes)
        if floating:
            logger.debug("Subcircuit '%s' has pin(s) not connected inside its body: %s", definition.name, floating)
        logger.debug("Registered subcircuit '%s' (%d pin(s), %d body component(s)).",
                     definition.name, definition.pin_count, len(registered.components))
        return registered
