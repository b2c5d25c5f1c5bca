# src/spicelib_core/validation/validator.py
import logging
from collections import defaultdict
from typing import Dict, List, Optional

from ..data_structures import GROUND_NODE, Circuit
from ..library.index import LibraryIndex
from ..parser.definitions import ComponentDefinition
from .issue_codes import CircuitIssueCode
from .issues import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)


class CircuitValidator:
    """
    Reports structural problems in a built circuit without raising.

    Model references resolve against the circuit's own models first and then,
    when one is given, against the LibraryIndex.
    """

    def __init__(self, circuit: Circuit, library_index: Optional[LibraryIndex] = None):
        if not isinstance(circuit, Circuit):
            raise TypeError("CircuitValidator requires a Circuit object.")
        self.circuit = circuit
        self.library_index = library_index
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        self.issues = []
        logger.info(f"Validating circuit '{self.circuit.name}'...")

        self._check_ground()
        self._check_single_connection_nets()
        self._check_model_references()

        if self.issues:
            warnings = sum(1 for i in self.issues if i.level == ValidationIssueLevel.WARNING)
            logger.info(f"Validation complete. Found {len(self.issues)} issue(s), {warnings} warning(s).")
        else:
            logger.info("Validation complete with no issues found.")
        return self.issues

    def _add_issue(self, level: ValidationIssueLevel, code_enum: CircuitIssueCode, component: Optional[str] = None, **kwargs):
        self.issues.append(ValidationIssue(
            level=level,
            code=code_enum.code,
            message=code_enum.format_message(**kwargs),
            component=component,
            details=kwargs,
        ))

    def _check_ground(self):
        if not self.circuit.has_ground:
            self._add_issue(ValidationIssueLevel.WARNING, CircuitIssueCode.GND_001, circuit_name=self.circuit.name)

    def _check_single_connection_nets(self):
        connections: Dict[str, List[str]] = defaultdict(list)
        for component in self.circuit.components.values():
            # A component tied to one net at both terminals still counts once.
            for net in dict.fromkeys(component.nodes):
                connections[net].append(component.name)

        for net, connected in connections.items():
            if net != GROUND_NODE and len(connected) == 1:
                self._add_issue(
                    ValidationIssueLevel.WARNING, CircuitIssueCode.NET_001,
                    component=connected[0], net_name=net, connected_to_component=connected[0],
                )

    def _check_model_references(self):
        for component in self.circuit.components.values():
            if not _references_model(component):
                continue
            if not self._model_exists(component.model):
                self._add_issue(
                    ValidationIssueLevel.WARNING, CircuitIssueCode.MODEL_001,
                    component=component.name, component_name=component.name, model_name=component.model,
                )

    def _model_exists(self, model_name: str) -> bool:
        if model_name in self.circuit.models:
            return True
        return self.library_index is not None and self.library_index.get_model(model_name) is not None


def _references_model(component: ComponentDefinition) -> bool:
    # X lines name a subcircuit in the same slot; everything else with a model names a .MODEL.
    return bool(component.model) and not component.is_subcircuit_instance
