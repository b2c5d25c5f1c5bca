# src/spicelib_core/parser/library_parser.py
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from .definitions import ParsedLibrary
from .metadata import MetadataExtractor
from .model_parser import ModelBlockParser
from .subcircuit_parser import SubcircuitBlockParser
from .tokenizer import LineTokenizer

logger = logging.getLogger(__name__)


class LibraryParser:
    """
    Parses one library file into its `.MODEL` and `.SUBCKT` definitions.

    Library parsing is tolerant: malformed entries are logged and skipped.
    Only a failure to read the file itself propagates (as OSError).
    """

    def __init__(self, unit_suffixes: Optional[Sequence[str]] = None):
        self.tokenizer = LineTokenizer()
        self.model_parser = ModelBlockParser()
        self.subcircuit_parser = SubcircuitBlockParser(MetadataExtractor(unit_suffixes))

    def parse_text(self, text: str, source_file: Optional[Path] = None) -> ParsedLibrary:
        lines = self.tokenizer.tokenize(text)
        models = self.model_parser.parse_lines(lines, source_file)
        subcircuits = self.subcircuit_parser.parse_lines(lines, source_file)
        logger.debug("Parsed %s: %d model(s), %d subcircuit(s).",
                     source_file or "<text>", len(models), len(subcircuits))
        return ParsedLibrary(source_file=source_file, models=models, subcircuits=subcircuits)

    def parse_file(self, path: Union[str, Path]) -> ParsedLibrary:
        file_path = Path(path)
        # Vendor libraries are frequently not valid UTF-8; undecodable bytes are replaced.
        text = file_path.read_text(encoding="utf-8", errors="replace")
        return self.parse_text(text, source_file=file_path)
