# src/spicelib_core/parser/subcircuit_parser.py
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .definitions import SubcircuitDefinition
from .metadata import MetadataExtractor
from .tokenizer import LogicalLine

logger = logging.getLogger(__name__)


class _OpenBlock:
    """State for the `.SUBCKT` block currently being collected."""

    def __init__(self, header: LogicalLine, name: Optional[str], nodes: List[str]):
        self.header = header
        self.name = name
        self.nodes = nodes
        self.body_lines: List[str] = []

    @property
    def is_valid(self) -> bool:
        return self.name is not None and len(self.nodes) >= 1


class SubcircuitBlockParser:
    """
    Extracts `.SUBCKT <name> <node>+ ... .ENDS [name]` blocks.

    Body lines are kept verbatim (after continuation joining and comment
    removal). A `.SUBCKT` or `.MODEL` header met before `.ENDS` closes the
    open block implicitly; nested definitions are not supported. A header
    without a name or without nodes is malformed: the whole block is skipped
    and parsing carries on after it.
    """

    def __init__(self, metadata_extractor: Optional[MetadataExtractor] = None):
        self.metadata_extractor = metadata_extractor or MetadataExtractor()

    def parse_lines(self, lines: Iterable[LogicalLine], source_file: Optional[Path] = None) -> List[SubcircuitDefinition]:
        subcircuits: List[SubcircuitDefinition] = []
        block: Optional[_OpenBlock] = None

        for line in lines:
            keyword = line.keyword

            if keyword == ".SUBCKT":
                if block is not None:
                    logger.debug("Subcircuit header at line %d closes the block opened at line %d.",
                                 line.line_number, block.header.line_number)
                    self._close(block, subcircuits, source_file)
                block = self._open(line, source_file)
                continue

            if block is None:
                continue

            if keyword == ".ENDS":
                self._check_ends_name(block, line, source_file)
                self._close(block, subcircuits, source_file)
                block = None
            elif keyword == ".MODEL":
                logger.debug(".MODEL at line %d closes the block opened at line %d.",
                             line.line_number, block.header.line_number)
                self._close(block, subcircuits, source_file)
                block = None
            else:
                block.body_lines.append(line.text)

        if block is not None:
            if block.is_valid:
                logger.warning("Subcircuit '%s' opened at line %d%s has no .ENDS; keeping it as written.",
                               block.name, block.header.line_number, _in_file(source_file))
            self._close(block, subcircuits, source_file)

        return subcircuits

    def _open(self, header: LogicalLine, source_file: Optional[Path]) -> _OpenBlock:
        tokens = header.text.split()
        name = tokens[1] if len(tokens) > 1 else None
        nodes = self._header_nodes(tokens[2:])
        block = _OpenBlock(header, name, nodes)
        if not block.is_valid:
            logger.warning("Skipping malformed .SUBCKT header at line %d%s: '%s'",
                           header.line_number, _in_file(source_file), header.text)
        return block

    @staticmethod
    def _header_nodes(tokens: List[str]) -> List[str]:
        nodes: List[str] = []
        for token in tokens:
            # Parameter defaults (PARAMS: / k=v) end the pin list.
            if token.upper() in ("PARAMS:", "PARAMS") or "=" in token:
                break
            nodes.append(token)
        return nodes

    def _close(self, block: _OpenBlock, subcircuits: List[SubcircuitDefinition], source_file: Optional[Path]):
        if not block.is_valid:
            return
        metadata, ts_parameters = self.metadata_extractor.extract(block.header.leading_comments)
        subcircuits.append(SubcircuitDefinition(
            name=block.name,
            nodes=tuple(block.nodes),
            definition_body="\n".join(block.body_lines),
            metadata=metadata,
            ts_parameters=ts_parameters,
            source_file=source_file,
        ))
        logger.debug("Parsed subcircuit '%s' with %d pin(s) and %d body line(s).",
                     block.name, len(block.nodes), len(block.body_lines))

    @staticmethod
    def _check_ends_name(block: _OpenBlock, ends_line: LogicalLine, source_file: Optional[Path]):
        tokens = ends_line.text.split()
        if block.is_valid and len(tokens) > 1 and tokens[1].upper() != block.name.upper():
            logger.warning(".ENDS %s at line %d%s closes subcircuit '%s'.",
                           tokens[1], ends_line.line_number, _in_file(source_file), block.name)


def _in_file(source_file: Optional[Path]) -> str:
    return f" of {source_file}" if source_file else ""
