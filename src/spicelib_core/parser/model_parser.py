# src/spicelib_core/parser/model_parser.py
import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .definitions import ModelDefinition
from .tokenizer import LogicalLine
from .values import parse_spice_value

logger = logging.getLogger(__name__)

# SPICE TYPE keyword -> internal model type. Anything else maps to 'other'.
MODEL_TYPE_MAP: Dict[str, str] = {
    "D": "diode",
    "NPN": "bjt_npn",
    "PNP": "bjt_pnp",
    "NMOS": "mosfet_n",
    "PMOS": "mosfet_p",
    "NJF": "jfet_n",
    "PJF": "jfet_p",
    "SW": "voltage_switch",
    "CSW": "current_switch",
}

_MODEL_HEADER_REGEX = re.compile(
    r"^\.MODEL\s+(?P<name>[^\s()=]+)\s+(?P<type>[A-Za-z_][A-Za-z0-9_]*)\s*(?P<params>.*)$",
    re.IGNORECASE,
)
_PARAMETER_REGEX = re.compile(r"(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>[^\s,()=]+)")


def map_model_type(type_keyword: str) -> str:
    return MODEL_TYPE_MAP.get(type_keyword.upper(), "other")


class ModelBlockParser:
    """
    Extracts `.MODEL <name> <TYPE> (<k=v> ...)` definitions.

    Parentheses around the parameter list are optional. Parameter keys are
    upper-cased; values that do not parse as numbers are dropped. A line that
    does not look like a model statement at all is skipped, so one bad entry
    never stops the rest of a library file from being read.
    """

    def parse_line(self, line: LogicalLine, source_file: Optional[Path] = None) -> Optional[ModelDefinition]:
        match = _MODEL_HEADER_REGEX.match(line.text)
        if not match:
            logger.warning(
                "Skipping malformed .MODEL statement at line %d%s: '%s'",
                line.line_number, f" of {source_file}" if source_file else "", line.text,
            )
            return None

        type_keyword = match.group("type").upper()
        parameters = self._parse_parameters(match.group("params"), match.group("name"))
        return ModelDefinition(
            name=match.group("name"),
            model_type=map_model_type(type_keyword),
            parameters=parameters,
            type_keyword=type_keyword,
            source_file=source_file,
        )

    def parse_lines(self, lines: Iterable[LogicalLine], source_file: Optional[Path] = None) -> List[ModelDefinition]:
        models: List[ModelDefinition] = []
        for line in lines:
            if not line.is_directive(".MODEL"):
                continue
            model = self.parse_line(line, source_file)
            if model is not None:
                models.append(model)
        return models

    def _parse_parameters(self, params_text: str, model_name: str) -> Dict[str, float]:
        parameters: Dict[str, float] = {}
        for match in _PARAMETER_REGEX.finditer(params_text):
            key = match.group("key").upper()
            value = parse_spice_value(match.group("value"))
            if value is None:
                logger.debug("Model '%s': ignoring non-numeric parameter %s=%s", model_name, key, match.group("value"))
                continue
            parameters[key] = value
        return parameters
