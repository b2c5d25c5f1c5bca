# src/spicelib_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("spicelib_core package initialized.")

from .parser import (
    ComponentDefinition,
    ModelDefinition,
    SubcircuitDefinition,
    ParsedLibrary,
    ParsedNetlist,
    LibraryParser,
    NetlistParser,
    parse_spice_value,
    format_spice_value,
)
from .library import LibraryIndex, IndexSummary
from .data_structures import Circuit, RegisteredSubcircuit, SubcircuitInstance
from .resolver import SubcircuitResolver
from .circuit_builder import CircuitBuilder
from .netlist_writer import NetlistWriter
from .validation import CircuitValidator, ValidationIssue, ValidationIssueLevel
from .config import LibraryConfig
from .errors import SpiceLibError, CircuitBuildError, ConfigurationError

__all__ = [
    # Definitions
    "ComponentDefinition", "ModelDefinition", "SubcircuitDefinition",
    "ParsedLibrary", "ParsedNetlist",
    # Parsers
    "LibraryParser", "NetlistParser",
    "parse_spice_value", "format_spice_value",
    # Library Index
    "LibraryIndex", "IndexSummary", "LibraryConfig",
    # Circuit Construction
    "Circuit", "RegisteredSubcircuit", "SubcircuitInstance",
    "SubcircuitResolver", "CircuitBuilder",
    # Export and Validation
    "NetlistWriter", "CircuitValidator", "ValidationIssue", "ValidationIssueLevel",
    # Top-Level Errors (Actionable Diagnostics)
    "SpiceLibError", "CircuitBuildError", "ConfigurationError",
]
