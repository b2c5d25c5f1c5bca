# src/spicelib_core/netlist_writer.py
"""
Writes component, model and subcircuit definitions back out as SPICE text.

The output is accepted by `NetlistParser` and reproduces the names,
component types and node lists it was written from.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from .data_structures import Circuit
from .parser.definitions import ComponentDefinition, ModelDefinition, SubcircuitDefinition
from .parser.model_parser import MODEL_TYPE_MAP
from .parser.netlist_parser import DESIGNATORS, component_prefix
from .parser.values import format_spice_value

logger = logging.getLogger(__name__)

MODEL_TYPE_TO_KEYWORD: Dict[str, str] = {model_type: keyword for keyword, model_type in MODEL_TYPE_MAP.items()}

# Parameters written into a component's positional slots rather than as k=v pairs.
_SLOT_PARAMETERS = frozenset({"area", "ac", "ac_phase", "waveform", "control_source", "inductor1", "inductor2"})


class NetlistWriter:
    def export(
        self,
        components: Iterable[ComponentDefinition],
        models: Iterable[ModelDefinition] = (),
        subcircuits: Iterable[SubcircuitDefinition] = (),
        title: Optional[str] = None,
        include_comments: bool = True,
    ) -> str:
        components = list(components)
        models = list(models)
        subcircuits = list(subcircuits)
        output: List[str] = []

        if include_comments:
            output.append("* SPICE Netlist")
            if title:
                output.append(f"* Circuit: {title}")
            output.append("")

        if title:
            output.append(f".TITLE {title}")

        if models:
            if include_comments:
                output.append("* Model definitions")
            output.extend(self.format_model(model) for model in models)
            output.append("")

        for subcircuit in subcircuits:
            output.extend(self.format_subcircuit(subcircuit, include_comments))
            output.append("")

        output.extend(self.format_component(component) for component in components)
        output.append("")
        output.append(".END")

        logger.debug("Exported %d component(s), %d model(s), %d subcircuit(s).",
                     len(components), len(models), len(subcircuits))
        return "\n".join(output) + "\n"

    def export_circuit(self, circuit: Circuit, include_comments: bool = True) -> str:
        return self.export(
            components=circuit.components.values(),
            models=circuit.models.values(),
            subcircuits=circuit.local_subcircuits.values(),
            title=circuit.title or circuit.name,
            include_comments=include_comments,
        )

    @staticmethod
    def format_model(model: ModelDefinition) -> str:
        keyword = model.type_keyword or MODEL_TYPE_TO_KEYWORD.get(model.model_type)
        if not keyword:
            raise ValueError(f"Model '{model.name}' of type '{model.model_type}' has no SPICE type keyword.")
        params = " ".join(f"{key}={format_spice_value(value)}" for key, value in model.parameters.items())
        return f".MODEL {model.name} {keyword}({params})"

    @staticmethod
    def format_subcircuit(subcircuit: SubcircuitDefinition, include_comments: bool = True) -> List[str]:
        lines: List[str] = []
        if include_comments:
            # Written as '* KEY: VALUE' so the metadata is read back by the library parser.
            lines.extend(f"* {key}: {value}" for key, value in subcircuit.metadata.items())
        lines.append(f".SUBCKT {subcircuit.name} {' '.join(subcircuit.nodes)}")
        lines.extend(line for line in subcircuit.definition_body.splitlines() if line.strip())
        lines.append(f".ENDS {subcircuit.name}")
        return lines

    def format_component(self, component: ComponentDefinition) -> str:
        prefix = component_prefix(component)
        spec = DESIGNATORS.get(prefix)
        if spec is None or spec.component_type != component.component_type:
            raise ValueError(f"Cannot export component '{component.name}' of unknown type '{component.component_type}'.")

        name = component.name if component.name[:1].upper() == prefix else f"{prefix}{component.name}"
        tokens: List[str] = [name, *component.nodes]
        tokens.extend(self._slot_tokens(spec.slots, component))
        tokens.extend(
            f"{key}={_format_parameter(value)}"
            for key, value in component.parameters.items()
            if key not in _SLOT_PARAMETERS
        )
        return " ".join(tokens)

    @staticmethod
    def _slot_tokens(slots: str, component: ComponentDefinition) -> List[str]:
        params = component.parameters
        value = component.value
        if slots == "value_or_model":
            tokens = [component.model] if component.model else []
            if value is not None:
                tokens.append(format_spice_value(value))
            return tokens
        if slots in ("model", "model_area", "subcircuit"):
            tokens = [component.model]
            if slots == "model_area" and "area" in params:
                tokens.append(_format_parameter(params["area"]))
            return tokens
        if slots == "source":
            tokens = ["DC", format_spice_value(value if value is not None else 0.0)]
            if "ac" in params:
                tokens.extend(["AC", _format_parameter(params["ac"])])
                if "ac_phase" in params:
                    tokens.append(_format_parameter(params["ac_phase"]))
            if "waveform" in params:
                tokens.append(str(params["waveform"]))
            return tokens
        if slots == "gain":
            return [format_spice_value(value)]
        if slots == "controlled":
            return [str(params["control_source"]), format_spice_value(value)]
        if slots == "coupling":
            return [str(params["inductor1"]), str(params["inductor2"]), format_spice_value(value)]
        if slots == "switch":
            return [str(params["control_source"]), component.model]
        raise ValueError(f"Unknown slot layout '{slots}'.")


def _format_parameter(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_spice_value(value)
    return str(value)
