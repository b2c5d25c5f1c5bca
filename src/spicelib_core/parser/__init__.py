from .definitions import (
    ComponentDefinition,
    ModelDefinition,
    ParsedLibrary,
    ParsedNetlist,
    SubcircuitDefinition,
)
from .tokenizer import LineTokenizer, LogicalLine
from .values import parse_spice_value, format_spice_value
from .model_parser import ModelBlockParser
from .metadata import MetadataExtractor
from .subcircuit_parser import SubcircuitBlockParser
from .library_parser import LibraryParser
from .netlist_parser import NetlistParser
from .exceptions import ParsingError, NetlistSyntaxError

__all__ = [
    # IR Data Structures
    "ComponentDefinition",
    "ModelDefinition",
    "ParsedLibrary",
    "ParsedNetlist",
    "SubcircuitDefinition",
    # Lexing and Values
    "LineTokenizer",
    "LogicalLine",
    "parse_spice_value",
    "format_spice_value",
    # Parsers
    "ModelBlockParser",
    "MetadataExtractor",
    "SubcircuitBlockParser",
    "LibraryParser",
    "NetlistParser",
    # Exceptions
    "ParsingError",
    "NetlistSyntaxError",
]
