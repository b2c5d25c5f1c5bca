# tests/test_parser/test_library_parser.py
import logging

import pytest

from spicelib_core.parser import LibraryParser, ModelDefinition, SubcircuitDefinition


def parse(text, **kwargs):
    return LibraryParser(**kwargs).parse_text(text)


class TestModelParsing:
    """`.MODEL` extraction: type mapping, parameter handling and tolerance."""

    def test_model_with_parenthesised_parameters(self):
        library = parse(".MODEL D1N4148 D(IS=2.52n RS=0.568 N=1.752)")
        model = library.models[0]
        assert model.name == "D1N4148"
        assert model.model_type == "diode"
        assert model.type_keyword == "D"
        assert model.parameters["IS"] == pytest.approx(2.52e-9)
        assert model.parameters["RS"] == pytest.approx(0.568)
        assert model.parameters["N"] == pytest.approx(1.752)

    def test_parentheses_are_optional(self):
        model = parse(".MODEL Q2N3904 NPN IS=1e-14 BF=300").models[0]
        assert model.model_type == "bjt_npn"
        assert model.parameters == {"IS": pytest.approx(1e-14), "BF": 300.0}

    @pytest.mark.parametrize("keyword, model_type", [
        ("D", "diode"), ("NPN", "bjt_npn"), ("PNP", "bjt_pnp"),
        ("NMOS", "mosfet_n"), ("PMOS", "mosfet_p"), ("NJF", "jfet_n"),
        ("PJF", "jfet_p"), ("SW", "voltage_switch"), ("CSW", "current_switch"),
        ("nmos", "mosfet_n"), ("VDMOS", "other"),
    ])
    def test_type_mapping(self, keyword, model_type):
        model = parse(f".MODEL X {keyword}(A=1)").models[0]
        assert model.model_type == model_type
        assert model.type_keyword == keyword.upper()

    def test_keys_are_uppercased_and_non_numeric_values_skipped(self):
        model = parse(".model M1 NMOS(level=1 vto=0.7 tnom=abc)").models[0]
        assert model.parameters == {"LEVEL": 1.0, "VTO": pytest.approx(0.7)}

    def test_continuation_lines_are_joined_into_the_model(self):
        model = parse(".MODEL DX D(IS=1e-14\n+ RS=10m\n+ CJO=2p)").models[0]
        assert set(model.parameters) == {"IS", "RS", "CJO"}
        assert model.parameters["RS"] == pytest.approx(0.01)

    def test_malformed_model_is_skipped_and_parsing_continues(self, caplog):
        caplog.set_level(logging.WARNING)
        library = parse(".MODEL\n.MODEL good D(IS=1e-12)")
        assert [m.name for m in library.models] == ["good"]
        assert "Skipping malformed .MODEL" in caplog.text


class TestSubcircuitParsing:
    """`.SUBCKT ... .ENDS` block extraction."""

    def test_basic_block(self):
        library = parse(".SUBCKT test_sub 1 2\nR1 1 2 1K\n.ENDS")
        assert len(library.subcircuits) == 1
        sub = library.subcircuits[0]
        assert sub.name == "test_sub"
        assert sub.nodes == ("1", "2")
        assert sub.pin_count == 2
        assert sub.definition_body == "R1 1 2 1K"

    def test_header_continuation_extends_the_pin_list(self):
        sub = parse(".SUBCKT amp in out\n+ vcc vee\nR1 in out 1k\n.ENDS amp").subcircuits[0]
        assert sub.nodes == ("in", "out", "vcc", "vee")

    def test_parameter_defaults_are_not_pins(self):
        library = parse(
            ".SUBCKT filt in out PARAMS: R=1k C=1u\nR1 in out {R}\n.ENDS\n"
            ".SUBCKT filt2 in out R=1k\nR1 in out {R}\n.ENDS"
        )
        assert [s.nodes for s in library.subcircuits] == [("in", "out"), ("in", "out")]

    def test_internal_comments_are_dropped_from_the_body(self):
        sub = parse(".SUBCKT s 1 2\n* internal note\nR1 1 2 1k ; inline\nC1 2 0 1u\n.ENDS").subcircuits[0]
        assert sub.definition_body == "R1 1 2 1k\nC1 2 0 1u"

    def test_next_subckt_closes_an_unterminated_block(self):
        library = parse(".SUBCKT a 1 2\nR1 1 2 1k\n.SUBCKT b 3 4\nR2 3 4 2k\n.ENDS b")
        assert [s.name for s in library.subcircuits] == ["a", "b"]
        assert library.subcircuits[0].definition_body == "R1 1 2 1k"
        assert library.subcircuits[1].definition_body == "R2 3 4 2k"

    def test_model_closes_an_unterminated_block(self):
        library = parse(".SUBCKT a 1 2\nR1 1 2 1k\n.MODEL DX D(IS=1e-14)\nR9 5 6 1k")
        assert library.subcircuits[0].definition_body == "R1 1 2 1k"
        assert [m.name for m in library.models] == ["DX"]

    def test_header_without_nodes_skips_the_block(self, caplog):
        caplog.set_level(logging.WARNING)
        library = parse(".SUBCKT broken\nR1 1 2 1k\n.ENDS\n.SUBCKT ok 1 2\nR2 1 2 1k\n.ENDS")
        assert [s.name for s in library.subcircuits] == ["ok"]
        assert library.subcircuits[0].definition_body == "R2 1 2 1k"
        assert "malformed .SUBCKT" in caplog.text

    def test_unclosed_block_at_end_of_file_is_kept(self, caplog):
        caplog.set_level(logging.WARNING)
        library = parse(".SUBCKT tail 1 2\nR1 1 2 1k")
        assert [s.name for s in library.subcircuits] == ["tail"]
        assert "has no .ENDS" in caplog.text

    def test_mismatched_ends_name_still_closes(self, caplog):
        caplog.set_level(logging.WARNING)
        library = parse(".SUBCKT a 1 2\nR1 1 2 1k\n.ENDS b\nR2 3 4 1k")
        assert library.subcircuits[0].definition_body == "R1 1 2 1k"
        assert ".ENDS b" in caplog.text

    def test_ends_name_comparison_ignores_case(self, caplog):
        caplog.set_level(logging.WARNING)
        parse(".SUBCKT Amp 1 2\nR1 1 2 1k\n.ENDS AMP")
        assert caplog.text == ""

    def test_definition_requires_at_least_one_node(self):
        with pytest.raises(ValueError):
            SubcircuitDefinition(name="empty", nodes=(), definition_body="")


class TestMetadataExtraction:
    """`* KEY: VALUE` comment runs directly above a `.SUBCKT` header."""

    def test_speaker_metadata_and_ts_parameters(self, speaker_lib_text):
        library = parse(speaker_lib_text)
        woofer = library.subcircuits[0]
        assert woofer.metadata["DIAMETER"] == "6.5"
        assert woofer.metadata["IMPEDANCE"] == "8"
        assert woofer.metadata["SENSITIVITY"] == "88"
        assert woofer.metadata["MANUFACTURER"] == "Acme Audio"
        assert woofer.ts_parameters["QTS"] == pytest.approx(0.35)
        assert woofer.ts_parameters["FS"] == pytest.approx(42.0)
        assert woofer.metadata["QTS"] == "0.35"
        # Comments without a 'KEY:' shape are ignored.
        assert "EXAMPLE VENDOR LIBRARY" not in woofer.metadata

    def test_each_subcircuit_gets_only_its_own_comment_run(self, speaker_lib_text):
        tweeter = parse(speaker_lib_text).subcircuits[1]
        assert tweeter.metadata == {
            "PRODUCT_NAME": "Dome Tweeter",
            "MANUFACTURER": "Acme Audio",
            "TYPE": "tweeter",
        }
        assert tweeter.ts_parameters == {}

    def test_non_numeric_ts_value_stays_in_metadata_only(self):
        sub = parse("* FS: unknown\n* VAS: 12.5 liters\n.SUBCKT d 1 2\n.ENDS").subcircuits[0]
        assert sub.metadata["FS"] == "unknown"
        assert "FS" not in sub.ts_parameters
        assert sub.ts_parameters["VAS"] == pytest.approx(12.5)

    def test_ts_value_with_an_unlisted_unit_keeps_its_number(self):
        sub = parse("* SD: 214 cm2\n* XMAX: 6 mm\n* MMS: 0.0133 m^2\n.SUBCKT d 1 2\n.ENDS").subcircuits[0]
        assert sub.metadata["SD"] == "214 cm2"
        assert sub.metadata["XMAX"] == "6"
        assert sub.ts_parameters == {
            "SD": pytest.approx(214.0),
            "XMAX": pytest.approx(6.0),
            "MMS": pytest.approx(0.0133),
        }

    def test_whitespace_is_collapsed(self):
        sub = parse("*   NAME:   Big     Woofer  \n.SUBCKT d 1 2\n.ENDS").subcircuits[0]
        assert sub.metadata["NAME"] == "Big Woofer"

    def test_code_line_breaks_the_association(self):
        sub = parse("* PRODUCT_NAME: X\nR1 1 2 1k\n.SUBCKT s 1 2\n.ENDS").subcircuits[0]
        assert sub.metadata == {}

    def test_unit_suffixes_are_configurable(self):
        text = "* LENGTH: 3 furlongs\n* DIAMETER: 6.5 in\n.SUBCKT d 1 2\n.ENDS"
        sub = parse(text, unit_suffixes=["furlongs"]).subcircuits[0]
        assert sub.metadata["LENGTH"] == "3"
        assert sub.metadata["DIAMETER"] == "6.5 in"


class TestParsedDefinitionsAreReadOnly:
    """Parsed definitions are shared by the index and every circuit, so their maps cannot be edited."""

    def test_model_parameters(self):
        model = parse(".MODEL DX D(IS=1e-14)").models[0]
        with pytest.raises(TypeError):
            model.parameters["IS"] = 2.0
        assert model.parameters == {"IS": pytest.approx(1e-14)}

    def test_subcircuit_metadata_and_ts_parameters(self, speaker_lib_text):
        woofer = parse(speaker_lib_text).subcircuits[0]
        with pytest.raises(TypeError):
            woofer.metadata["TYPE"] = "tweeter"
        with pytest.raises(TypeError):
            woofer.ts_parameters["QTS"] = 1.0

    def test_caller_dict_is_copied(self):
        parameters = {"IS": 1.0}
        model = ModelDefinition(name="DX", model_type="diode", parameters=parameters)
        parameters["IS"] = 2.0
        assert model.parameters["IS"] == 1.0


class TestLibraryFiles:

    def test_parse_file_records_the_source(self, write_lib):
        path = write_lib("vendor/parts.lib", ".MODEL DX D(IS=1e-14)\n.SUBCKT s 1 2\nR1 1 2 1k\n.ENDS")
        library = LibraryParser().parse_file(path)
        assert library.source_file == path
        assert library.models[0].source_file == path
        assert library.subcircuits[0].source_file == path

    def test_undecodable_bytes_do_not_stop_parsing(self, tmp_path):
        path = tmp_path / "latin1.lib"
        path.write_bytes(b"* MANUFACTURER: M\xfcller\n.SUBCKT s 1 2\nR1 1 2 1k\n.ENDS\n")
        library = LibraryParser().parse_file(path)
        assert library.subcircuits[0].name == "s"

    def test_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            LibraryParser().parse_file(tmp_path / "absent.lib")
