# src/spicelib_core/circuit_builder.py
"""
Defines the CircuitBuilder, which turns a `ParsedNetlist` into a `Circuit`
whose subcircuit instances are all bound to registered definitions.

The builder is the top-level gatekeeper for build-time errors: any
`DiagnosableError` raised by the parser or the resolver is re-raised as a
single `CircuitBuildError` carrying the actionable diagnostic report.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .data_structures import Circuit
from .errors import CircuitBuildError, DiagnosableError, format_diagnostic_report
from .library.index import LibraryIndex
from .parser.definitions import ParsedNetlist
from .parser.netlist_parser import NetlistParser
from .resolver.resolver import SubcircuitResolver

logger = logging.getLogger(__name__)


class CircuitBuilder:
    def __init__(
        self,
        library_index: Optional[LibraryIndex] = None,
        resolver: Optional[SubcircuitResolver] = None,
        parser: Optional[NetlistParser] = None,
    ):
        self.resolver = resolver or SubcircuitResolver(library_index)
        self.parser = parser or NetlistParser()

    def build(self, parsed_netlist: ParsedNetlist, name: Optional[str] = None) -> Circuit:
        circuit_name = name or _default_name(parsed_netlist)
        logger.info(f"--- Starting circuit build for '{circuit_name}' ---")
        try:
            circuit = Circuit(
                name=circuit_name,
                title=parsed_netlist.title,
                source_file=parsed_netlist.source_file,
            )
            self._register_models(circuit, parsed_netlist)
            self._register_local_subcircuits(circuit, parsed_netlist)

            for component in parsed_netlist.components:
                self.resolver.add_component(circuit, component)

            logger.info(
                f"--- Circuit build for '{circuit_name}' successful: {len(circuit.components)} component(s), "
                f"{len(circuit.registered_subcircuits)} registered subcircuit(s). ---"
            )
            return circuit

        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e

        except Exception as e:
            report = format_diagnostic_report(
                error_type=f"An Unexpected Error Occurred ({type(e).__name__})",
                details=f"The circuit builder encountered an unexpected internal error: {str(e)}",
                suggestion="This may indicate a bug in spicelib_core. Please review the traceback.",
                context={}
            )
            raise CircuitBuildError(report) from e

    def build_from_text(self, text: str, name: Optional[str] = None) -> Circuit:
        try:
            parsed = self.parser.parse_text(text)
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e
        return self.build(parsed, name=name)

    def build_from_file(self, path: Union[str, Path], name: Optional[str] = None) -> Circuit:
        try:
            parsed = self.parser.parse_file(path)
        except DiagnosableError as e:
            raise CircuitBuildError(e.get_diagnostic_report()) from e
        return self.build(parsed, name=name)

    @staticmethod
    def _register_models(circuit: Circuit, parsed_netlist: ParsedNetlist):
        for model in parsed_netlist.models:
            if model.name in circuit.models:
                logger.warning(f"Model '{model.name}' is defined more than once; keeping the first definition.")
                continue
            circuit.models[model.name] = model

    @staticmethod
    def _register_local_subcircuits(circuit: Circuit, parsed_netlist: ParsedNetlist):
        for subcircuit in parsed_netlist.subcircuits:
            if subcircuit.name in circuit.local_subcircuits:
                logger.warning(f"Subcircuit '{subcircuit.name}' is defined more than once; keeping the first definition.")
                continue
            circuit.local_subcircuits[subcircuit.name] = subcircuit


def _default_name(parsed_netlist: ParsedNetlist) -> str:
    if parsed_netlist.title:
        return parsed_netlist.title
    if parsed_netlist.source_file is not None:
        return Path(parsed_netlist.source_file).stem
    return "circuit"
