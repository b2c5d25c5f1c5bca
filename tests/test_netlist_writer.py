# tests/test_netlist_writer.py
import pytest

from spicelib_core import CircuitBuilder, LibraryParser, NetlistParser, NetlistWriter
from spicelib_core.parser import ComponentDefinition, ModelDefinition, SubcircuitDefinition

MIXED_NETLIST = """\
.TITLE Audio mixer
V1 in 0 DC 0.5 AC 1 90
V2 in2 0 SIN(0 1 1k)
I1 0 bias 1m
R1 in mid 4.7k
R2 mid 0 RMOD 1k
C1 mid out 10u IC=0
L1 out 0 10mH
L2 out2 0 10mH
K1 L1 L2 0.99
D1 out 0 DMOD 2
Q1 c mid e Q2N3904
M1 d g s b NMOD L=1u W=10u
J1 d g s J2N3819
E1 e1 0 mid 0 10
G1 g1 0 mid 0 1m
H1 h1 0 V1 100
F1 f1 0 V1 2
S1 s1 0 ctl 0 SWMOD
W1 w1 0 V1 CSWMOD
X1 in out 0 opamp
.MODEL DMOD D(IS=1e-14 RS=0.5)
.MODEL Q2N3904 NPN(IS=6.734f BF=416.4)
.MODEL VX VDMOS(RG=3)
.END
"""


def signature(components):
    return [(c.name, c.component_type, c.nodes) for c in components]


class TestRoundTrip:
    """Exported text parses back to the same names, types and node lists."""

    def test_components_and_models_round_trip(self):
        original = NetlistParser().parse_text(MIXED_NETLIST)
        text = NetlistWriter().export(original.components, original.models, title=original.title)
        reparsed = NetlistParser().parse_text(text)

        assert signature(reparsed.components) == signature(original.components)
        assert reparsed.title == "Audio mixer"
        assert [(m.name, m.model_type) for m in reparsed.models] == [
            (m.name, m.model_type) for m in original.models
        ]
        for before, after in zip(original.models, reparsed.models):
            assert after.parameters == pytest.approx(before.parameters)

    def test_values_and_parameters_survive(self):
        original = NetlistParser().parse_text(MIXED_NETLIST)
        reparsed = NetlistParser().parse_text(NetlistWriter().export(original.components))
        for before, after in zip(original.components, reparsed.components):
            assert after.model == before.model
            if before.value is None:
                assert after.value is None
            else:
                assert after.value == pytest.approx(before.value)
            assert after.parameters.keys() == before.parameters.keys()
            for key, value in before.parameters.items():
                if isinstance(value, float):
                    assert after.parameters[key] == pytest.approx(value)
                else:
                    assert after.parameters[key] == value

    def test_local_subcircuits_round_trip_with_metadata(self):
        subcircuit = SubcircuitDefinition(
            name="pad", nodes=("in", "out"), definition_body="R1 in out 2.2\nR2 out 0 6.8",
            metadata={"MANUFACTURER": "Acme Audio", "QTS": "0.4"},
        )
        text = NetlistWriter().export([], subcircuits=[subcircuit])

        netlist = NetlistParser().parse_text(text)
        assert netlist.subcircuits[0].nodes == ("in", "out")
        assert netlist.subcircuits[0].definition_body == subcircuit.definition_body

        library = LibraryParser().parse_text(text)
        assert library.subcircuits[0].metadata == subcircuit.metadata
        assert library.subcircuits[0].ts_parameters == {"QTS": pytest.approx(0.4)}

    def test_built_circuit_round_trip(self):
        circuit = CircuitBuilder().build_from_text(
            ".TITLE Divider\n.SUBCKT half in out\nR1 in out 1k\n.ENDS half\n"
            "V1 a 0 5\nX1 a b half\nR2 b 0 1k\n.MODEL DX D(IS=1)"
        )
        text = NetlistWriter().export_circuit(circuit)
        rebuilt = CircuitBuilder().build_from_text(text)
        assert signature(rebuilt.components.values()) == signature(circuit.components.values())
        assert list(rebuilt.registered_subcircuits) == ["half"]
        assert rebuilt.title == "Divider"


class TestFormatting:

    def test_layout(self):
        text = NetlistWriter().export(
            [ComponentDefinition(name="R1", component_type="resistor", nodes=("a", "0"), value=1000.0)],
            [ModelDefinition(name="DX", model_type="diode", parameters={"IS": 1e-14})],
            title="Demo",
        )
        lines = text.splitlines()
        assert lines[0] == "* SPICE Netlist"
        assert ".TITLE Demo" in lines
        assert ".MODEL DX D(IS=1e-14)" in lines
        assert "R1 a 0 1000" in lines
        assert lines[-1] == ".END"

    def test_without_comments(self):
        text = NetlistWriter().export([], include_comments=False)
        assert not any(line.startswith("*") for line in text.splitlines())

    def test_model_keyword_comes_from_the_original_type_token(self):
        model = ModelDefinition(name="VX", model_type="other", parameters={"RG": 3.0}, type_keyword="VDMOS")
        assert NetlistWriter.format_model(model) == ".MODEL VX VDMOS(RG=3)"

    def test_model_without_any_keyword_is_rejected(self):
        with pytest.raises(ValueError):
            NetlistWriter.format_model(ModelDefinition(name="VX", model_type="other"))

    def test_sources_are_written_with_explicit_dc(self):
        writer = NetlistWriter()
        component = NetlistParser().parse_component("V1 in 0 AC 1")
        assert writer.format_component(component) == "V1 in 0 DC 0 AC 1"

    def test_name_gets_the_designator_prefix(self):
        component = ComponentDefinition(name="load", component_type="resistor", nodes=("a", "0"), value=50.0)
        assert NetlistWriter().format_component(component) == "Rload a 0 50"

    def test_unknown_component_type_is_rejected(self):
        component = ComponentDefinition(name="B1", component_type="behavioral", nodes=("a", "0"))
        with pytest.raises(ValueError):
            NetlistWriter().format_component(component)
