# src/spicelib_core/resolver/exceptions.py
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


class ResolutionError(DiagnosableError):
    """Base class for failures while binding components into a circuit."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Subcircuit Resolution Error",
            details=str(self),
            suggestion="Check the subcircuit instances in the netlist against the available definitions.",
            context={}
        )


@dataclass(frozen=True)
class UnknownSubcircuitError(ResolutionError):
    """An instance references a subcircuit defined neither in the circuit nor in the LibraryIndex."""
    instance_name: str
    subcircuit_name: str

    def __str__(self) -> str:
        return (
            f"Subcircuit instance '{self.instance_name}' references unknown subcircuit "
            f"'{self.subcircuit_name}'."
        )

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Unknown Subcircuit",
            details=(
                f"No subcircuit named '{self.subcircuit_name}' is defined in the netlist "
                f"or in any indexed library."
            ),
            suggestion=(
                "Check the spelling (names are case-sensitive), define the subcircuit in the netlist, "
                "or add the library that provides it to the indexed directories."
            ),
            context={'component': self.instance_name, 'user_input': self.subcircuit_name}
        )


@dataclass(frozen=True)
class NodeCountMismatchError(ResolutionError):
    """An instance connects a different number of nodes than its definition declares pins."""
    instance_name: str
    subcircuit_name: str
    expected: int
    actual: int

    def __str__(self) -> str:
        return (
            f"Subcircuit instance '{self.instance_name}' connects {self.actual} node(s) but subcircuit "
            f"'{self.subcircuit_name}' declares {self.expected} pin(s)."
        )

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Subcircuit Node Count Mismatch",
            details=(
                f"Subcircuit '{self.subcircuit_name}' expects {self.expected} node(s), "
                f"but instance '{self.instance_name}' provides {self.actual}."
            ),
            suggestion="Connect exactly one net per pin, in the order the .SUBCKT header lists them.",
            context={'component': self.instance_name}
        )


@dataclass(frozen=True)
class DuplicateComponentError(ResolutionError):
    """A component name is already present in the circuit."""
    component_name: str

    def __str__(self) -> str:
        return f"Component '{self.component_name}' is already defined in this circuit."

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Duplicate Component",
            details=str(self),
            suggestion="Give every component in the netlist a unique reference designator.",
            context={'component': self.component_name}
        )
