# src/spicelib_core/parser/netlist_parser.py
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .definitions import ComponentDefinition, ModelDefinition, ParsedNetlist
from .exceptions import NetlistSyntaxError, ParsingError
from .model_parser import ModelBlockParser
from .subcircuit_parser import SubcircuitBlockParser
from .tokenizer import LineTokenizer, LogicalLine
from .values import parse_spice_value

logger = logging.getLogger(__name__)

WAVEFORM_KEYWORDS = ("SIN", "PULSE", "PWL", "EXP", "SFFM", "AM")

# 'SIN (0 1 1k)' -> 'SIN(0 1 1k)' so a waveform survives tokenization as one token.
_WAVEFORM_SPACING_REGEX = re.compile(r"\b(" + "|".join(WAVEFORM_KEYWORDS) + r")\s+\(", re.IGNORECASE)
_WAVEFORM_REGEX = re.compile(r"^(" + "|".join(WAVEFORM_KEYWORDS) + r")\(.*\)$", re.IGNORECASE)
_ASSIGNMENT_SPACING_REGEX = re.compile(r"\s*=\s*")
_TOKEN_REGEX = re.compile(r"[^\s()]*\([^()]*\)|\S+")


@dataclass(frozen=True)
class DesignatorSpec:
    """How one reference-designator letter decomposes: its type, leading node count and trailing slots."""
    component_type: str
    node_count: int
    slots: str


# Slot layouts:
#   value_or_model  <value> | <model> [<value>]
#   model           <model>
#   model_area      <model> [<area>]
#   source          [DC] <v> | AC <mag> [<phase>] | <WAVEFORM>(...)
#   gain            <value>
#   controlled      <control_source> <value>
#   coupling        <inductor1> <inductor2> <value>
#   switch          <control_source> <model>
#   subcircuit      <node>+ <subcircuit_name>
DESIGNATORS: Dict[str, DesignatorSpec] = {
    "R": DesignatorSpec("resistor", 2, "value_or_model"),
    "C": DesignatorSpec("capacitor", 2, "value_or_model"),
    "L": DesignatorSpec("inductor", 2, "value_or_model"),
    "D": DesignatorSpec("diode", 2, "model_area"),
    "Q": DesignatorSpec("bjt", 3, "model_area"),
    "M": DesignatorSpec("mosfet", 4, "model"),
    "J": DesignatorSpec("jfet", 3, "model_area"),
    "V": DesignatorSpec("voltage_source", 2, "source"),
    "I": DesignatorSpec("current_source", 2, "source"),
    "E": DesignatorSpec("vcvs", 4, "gain"),
    "G": DesignatorSpec("vccs", 4, "gain"),
    "H": DesignatorSpec("ccvs", 2, "controlled"),
    "F": DesignatorSpec("cccs", 2, "controlled"),
    "K": DesignatorSpec("mutual_inductance", 0, "coupling"),
    "X": DesignatorSpec("subcircuit", 0, "subcircuit"),
    "S": DesignatorSpec("voltage_switch", 4, "model"),
    "W": DesignatorSpec("current_switch", 2, "switch"),
}

COMPONENT_TYPE_TO_PREFIX: Dict[str, str] = {spec.component_type: prefix for prefix, spec in DESIGNATORS.items()}


class _LineError(Exception):
    """Internal signal: the current line cannot be decomposed. Carries the reason only."""


def split_tokens(text: str) -> List[str]:
    """Splits a component line, keeping parenthesised groups and `k=v` pairs whole."""
    normalized = _WAVEFORM_SPACING_REGEX.sub(r"\1(", text)
    normalized = _ASSIGNMENT_SPACING_REGEX.sub("=", normalized)
    return _TOKEN_REGEX.findall(normalized)


class NetlistParser:
    """
    Parses a full SPICE netlist into component, model and local subcircuit
    definitions.

    A netlist describes one circuit, so by default a component line that
    cannot be decomposed aborts parsing with `NetlistSyntaxError`. With
    `strict=False` such lines are logged and skipped instead; this is the
    mode used to read subcircuit bodies, which routinely contain constructs
    outside the supported subset.

    The title comes from a `.TITLE` directive. With `title_line=True` the
    first code line is taken as the title whatever it contains, as in a
    classic SPICE deck; otherwise it is parsed like any other line.
    """

    def __init__(self, strict: bool = True, title_line: bool = False):
        self.strict = strict
        self.title_line = title_line
        self.tokenizer = LineTokenizer()
        self.model_parser = ModelBlockParser()
        self.subcircuit_parser = SubcircuitBlockParser()

    def parse_file(self, path: Union[str, Path]) -> ParsedNetlist:
        file_path = Path(path)
        logger.info(f"Parsing netlist file: {file_path}")
        if not file_path.is_file():
            raise ParsingError(details="Netlist file not found.", file_path=file_path)
        try:
            text = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ParsingError(details=f"Could not read netlist file: {e}", file_path=file_path) from e
        return self.parse_text(text, source=file_path)

    def parse_text(self, text: str, source: Optional[Path] = None) -> ParsedNetlist:
        lines = self.tokenizer.tokenize(text)
        components: List[ComponentDefinition] = []
        models: List[ModelDefinition] = []
        title: Optional[str] = None
        seen_code_line = False
        in_subcircuit = False

        for line in lines:
            keyword = line.keyword

            if keyword == ".SUBCKT":
                in_subcircuit = True
                continue
            if keyword == ".ENDS":
                in_subcircuit = False
                continue
            if keyword == ".MODEL":
                # A .MODEL header closes an open subcircuit block, as it does in library files.
                in_subcircuit = False
                model = self.model_parser.parse_line(line, source)
                if model is not None:
                    models.append(model)
                continue
            if in_subcircuit:
                continue
            if keyword == ".TITLE":
                parts = line.text.split(None, 1)
                title = parts[1].strip() if len(parts) > 1 else ""
                continue
            if keyword.startswith("."):
                logger.debug("Ignoring directive %s at line %d.", keyword, line.line_number)
                continue

            is_first_code_line = not seen_code_line
            seen_code_line = True
            if is_first_code_line and self.title_line and title is None:
                title = line.text
                continue

            component = self._parse_component_line(line, source)
            if component is not None:
                components.append(component)

        subcircuits = self.subcircuit_parser.parse_lines(lines, source)
        logger.debug("Parsed netlist %s: %d component(s), %d model(s), %d local subcircuit(s).",
                     source or "<text>", len(components), len(models), len(subcircuits))
        return ParsedNetlist(
            components=components,
            models=models,
            subcircuits=subcircuits,
            title=title,
            source_file=source,
        )

    def parse_component(self, text: str) -> ComponentDefinition:
        """Parses a single component line, always strictly."""
        try:
            return self._decompose(text.strip())
        except _LineError as e:
            raise NetlistSyntaxError(details=str(e), line_text=text.strip()) from None

    def _parse_component_line(self, line: LogicalLine, source: Optional[Path]) -> Optional[ComponentDefinition]:
        try:
            return self._decompose(line.text)
        except _LineError as e:
            error = NetlistSyntaxError(
                details=str(e), line_text=line.text, line_number=line.line_number, source=source
            )
            if self.strict:
                raise error from None
            logger.warning("Skipping unsupported line %d: %s", line.line_number, error)
            return None

    def _decompose(self, text: str) -> ComponentDefinition:
        tokens = split_tokens(text)
        if not tokens:
            raise _LineError("empty component line")

        name = tokens[0]
        spec = DESIGNATORS.get(name[0].upper())
        if spec is None:
            raise _LineError(f"unknown reference designator '{name[0]}'")

        positional: List[str] = []
        parameters: Dict[str, Any] = {}
        for token in tokens[1:]:
            if token.upper() in ("PARAMS:", "PARAMS"):
                continue
            if "=" in token and not token.startswith("=") and "(" not in token.split("=", 1)[0]:
                key, raw_value = token.split("=", 1)
                parameters[key.lower()] = _coerce(raw_value)
            else:
                positional.append(token)

        if spec.slots == "subcircuit":
            return self._decompose_subcircuit(name, positional, parameters)

        if len(positional) < spec.node_count:
            raise _LineError(
                f"{spec.component_type} requires {spec.node_count} node(s), found {len(positional)}"
            )
        nodes = tuple(positional[:spec.node_count])
        rest = positional[spec.node_count:]

        handler = getattr(self, f"_slots_{spec.slots}")
        value, model, slot_parameters, leftover = handler(spec, rest)
        if leftover:
            raise _LineError(f"unexpected trailing token(s) {leftover}")

        slot_parameters.update(parameters)
        return ComponentDefinition(
            name=name,
            component_type=spec.component_type,
            nodes=nodes,
            value=value,
            model=model,
            parameters=slot_parameters,
        )

    @staticmethod
    def _decompose_subcircuit(name: str, positional: List[str], parameters: Dict[str, Any]) -> ComponentDefinition:
        if len(positional) < 2:
            raise _LineError("subcircuit instance requires at least one node and a subcircuit name")
        subcircuit_name = positional[-1]
        return ComponentDefinition(
            name=name,
            component_type="subcircuit",
            nodes=tuple(positional[:-1]),
            model=subcircuit_name,
            parameters=parameters,
        )

    # --- Slot handlers: each returns (value, model, parameters, leftover tokens) ---

    @staticmethod
    def _slots_value_or_model(spec: DesignatorSpec, rest: List[str]):
        if not rest:
            raise _LineError(f"{spec.component_type} requires a value or a model name")
        value = parse_spice_value(rest[0])
        if value is not None:
            return value, None, {}, rest[1:]
        model = rest[0]
        if len(rest) > 1 and parse_spice_value(rest[1]) is not None:
            return parse_spice_value(rest[1]), model, {}, rest[2:]
        return None, model, {}, rest[1:]

    @staticmethod
    def _slots_model(spec: DesignatorSpec, rest: List[str]):
        if not rest:
            raise _LineError(f"{spec.component_type} requires a model name")
        if parse_spice_value(rest[0]) is not None:
            raise _LineError(f"expected a model name, found the value '{rest[0]}'")
        return None, rest[0], {}, rest[1:]

    @classmethod
    def _slots_model_area(cls, spec: DesignatorSpec, rest: List[str]):
        value, model, parameters, leftover = cls._slots_model(spec, rest)
        if leftover:
            area = parse_spice_value(leftover[0])
            if area is not None:
                parameters["area"] = area
                leftover = leftover[1:]
        return value, model, parameters, leftover

    @staticmethod
    def _slots_source(spec: DesignatorSpec, rest: List[str]):
        if not rest:
            raise _LineError(f"{spec.component_type} requires a DC value, an AC specification or a waveform")
        dc_value: Optional[float] = None
        parameters: Dict[str, Any] = {}
        index = 0
        while index < len(rest):
            token = rest[index]
            upper = token.upper()
            if upper == "DC":
                dc_value = _required_value(rest, index + 1, "DC value")
                index += 2
            elif upper == "AC":
                parameters["ac"] = _required_value(rest, index + 1, "AC magnitude")
                index += 2
                if index < len(rest):
                    phase = parse_spice_value(rest[index])
                    if phase is not None:
                        parameters["ac_phase"] = phase
                        index += 1
            elif _WAVEFORM_REGEX.match(token):
                parameters["waveform"] = token
                index += 1
            elif dc_value is None and parse_spice_value(token) is not None:
                dc_value = parse_spice_value(token)
                index += 1
            else:
                break
        return (dc_value if dc_value is not None else 0.0), None, parameters, rest[index:]

    @staticmethod
    def _slots_gain(spec: DesignatorSpec, rest: List[str]):
        return _required_value(rest, 0, f"{spec.component_type} gain"), None, {}, rest[1:]

    @staticmethod
    def _slots_controlled(spec: DesignatorSpec, rest: List[str]):
        if not rest:
            raise _LineError(f"{spec.component_type} requires a controlling voltage source name")
        gain = _required_value(rest, 1, f"{spec.component_type} gain")
        return gain, None, {"control_source": rest[0]}, rest[2:]

    @staticmethod
    def _slots_coupling(spec: DesignatorSpec, rest: List[str]):
        if len(rest) < 2:
            raise _LineError("mutual inductance requires two inductor names")
        coupling = _required_value(rest, 2, "coupling coefficient")
        return coupling, None, {"inductor1": rest[0], "inductor2": rest[1]}, rest[3:]

    @staticmethod
    def _slots_switch(spec: DesignatorSpec, rest: List[str]):
        if len(rest) < 2:
            raise _LineError(f"{spec.component_type} requires a controlling source name and a model name")
        return None, rest[1], {"control_source": rest[0]}, rest[2:]


def _required_value(tokens: List[str], index: int, what: str) -> float:
    if index >= len(tokens):
        raise _LineError(f"missing {what}")
    value = parse_spice_value(tokens[index])
    if value is None:
        raise _LineError(f"{what} '{tokens[index]}' is not a number")
    return value


def _coerce(raw_value: str) -> Union[float, str]:
    value = parse_spice_value(raw_value)
    return raw_value if value is None else value


def component_prefix(component: ComponentDefinition) -> str:
    """The reference-designator letter a component of this type is written with."""
    return COMPONENT_TYPE_TO_PREFIX.get(component.component_type, component.name[:1].upper())
