# src/spicelib_core/parser/exceptions.py
"""
Diagnosable exceptions for netlist parsing.

Library files never raise these: a malformed library entry is skipped. A
netlist describes one coherent circuit, so a single line that cannot be
decomposed invalidates it and raises `NetlistSyntaxError` carrying the
offending text.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """Common base for every parsing error."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Parsing Error",
            details=str(self),
            suggestion="Please check the format and content of the SPICE netlist.",
            context={}
        )


@dataclass(frozen=True)
class ParsingError(BaseParsingError):
    """A netlist file could not be found or read."""
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Netlist File Error",
            details=self.details,
            suggestion="Ensure the file exists and has the correct read permissions.",
            context={'source_file': self.file_path}
        )


@dataclass(frozen=True)
class NetlistSyntaxError(BaseParsingError):
    """A netlist line that cannot be decomposed into a component."""
    details: str
    line_text: str
    line_number: Optional[int] = None
    source: Optional[Path] = None

    def __str__(self):
        location = f" at line {self.line_number}" if self.line_number else ""
        return f"Cannot parse netlist line{location}: '{self.line_text}' ({self.details})"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Netlist Syntax Error",
            details=self.details,
            suggestion=(
                "Check the reference designator, the number of nodes for this component type "
                "and the trailing value or model name."
            ),
            context={
                'source_file': self.source,
                'line_number': self.line_number,
                'user_input': self.line_text,
            }
        )
