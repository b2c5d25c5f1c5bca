# src/spicelib_core/errors.py
import logging
from typing import Any, Dict, Protocol, abstractmethod
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class SpiceLibError(Exception):
    """Base class for all custom, user-facing errors in spicelib_core."""
    pass

class CircuitBuildError(SpiceLibError):
    """
    Raised when turning a netlist into a circuit fails for any reason, from a
    malformed component line to an unresolvable subcircuit reference.
    The message is a pre-formatted, user-friendly diagnostic report.
    """
    pass

class ConfigurationError(SpiceLibError):
    """Raised when a library configuration file is missing, unreadable or invalid."""
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own diagnostic report.
    Code that only needs the report can depend on this instead of a concrete type.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    Common concrete base for internal exceptions that can describe themselves.

    It is a real `Exception`, so it can be caught by type, and it declares
    `get_diagnostic_report` abstract so every subclass has to provide a report.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """Subclasses MUST implement this."""
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    Formats the final multi-line report string so that every diagnostic raised
    by the library looks the same.

    Args:
        error_type: The high-level category of the error (e.g., "Unknown Subcircuit").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: Contextual information (component, source file, line number, user input).

    Returns:
        A formatted report string ready for display.
    """
    lines = [
        "\n",
        "============= spicelib_core: Actionable Diagnostic Report =============",
        f"Error Type:     {error_type}",
    ]
    if component := context.get('component'):
        lines.append(f"Component:      {component}")
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if line_number := context.get('line_number'):
        lines.append(f"Line:           {line_number}")
    if user_input := context.get('user_input'):
        lines.append(f"User Input:     '{user_input}'")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("========================================================================")
    return "\n".join(lines)
