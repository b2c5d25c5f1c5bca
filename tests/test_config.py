# tests/test_config.py
from pathlib import Path

import pytest

from spicelib_core import ConfigurationError, LibraryConfig, LibraryIndex
from spicelib_core.library.index import DEFAULT_FILE_PATTERNS, DEFAULT_SEARCH_LIMIT


@pytest.fixture
def write_config(tmp_path):
    def _write(content: str, name: str = "libraries.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


class TestLibraryConfig:
    """Loads and validates the YAML that tells the index where to look."""

    def test_full_configuration(self, write_config, tmp_path):
        path = write_config(
            "directories:\n"
            "  - libs/vendor\n"
            f"  - {tmp_path / 'absolute'}\n"
            "file_patterns: ['*.lib', '*.mod']\n"
            "unit_suffixes: [ohm, hz]\n"
            "max_workers: 4\n"
            "search_limit: 10\n"
        )
        config = LibraryConfig.from_yaml(path)
        assert config.directories == (tmp_path.resolve() / "libs" / "vendor", tmp_path / "absolute")
        assert config.file_patterns == ("*.lib", "*.mod")
        assert config.unit_suffixes == ("ohm", "hz")
        assert config.max_workers == 4
        assert config.search_limit == 10

    def test_defaults(self, write_config):
        config = LibraryConfig.from_yaml(write_config("directories: [libs]\n"))
        assert config.file_patterns == DEFAULT_FILE_PATTERNS
        assert config.max_workers == 1
        assert config.search_limit == DEFAULT_SEARCH_LIMIT

    def test_from_dict_resolves_against_base_dir(self, tmp_path):
        config = LibraryConfig.from_dict({"directories": ["a"]}, base_dir=tmp_path)
        assert config.directories == (tmp_path / "a",)

    def test_config_drives_the_index(self, write_config, library_dir):
        path = write_config(f"directories: ['{library_dir.as_posix()}']\nmax_workers: 2\n")
        index = LibraryIndex.from_config(LibraryConfig.from_yaml(path))
        assert index.get_subcircuit("irf1010n") is not None
        assert index.model_count == 4


class TestLibraryConfigErrors:

    def test_unknown_key(self, write_config):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(write_config("directories: [libs]\ncolour: blue\n"))
        assert "Field 'colour'" in str(excinfo.value)

    def test_missing_directories(self, write_config):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(write_config("max_workers: 2\n"))
        assert "Field 'directories'" in str(excinfo.value)

    def test_empty_directory_list(self):
        with pytest.raises(ConfigurationError):
            LibraryConfig.from_dict({"directories": []})

    def test_worker_count_must_be_positive(self, write_config):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(write_config("directories: [libs]\nmax_workers: 0\n"))
        assert "Field 'max_workers'" in str(excinfo.value)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(tmp_path / "absent.yaml")
        assert "not found" in str(excinfo.value)

    def test_invalid_yaml(self, write_config):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(write_config("directories: [libs\n"))
        assert "Invalid YAML syntax" in str(excinfo.value)

    def test_empty_file(self, write_config):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(write_config(""))
        assert "is empty" in str(excinfo.value)

    def test_root_must_be_a_mapping(self, write_config):
        with pytest.raises(ConfigurationError) as excinfo:
            LibraryConfig.from_yaml(write_config("- libs\n"))
        assert "must be a mapping" in str(excinfo.value)
