# src/spicelib_core/config.py
"""
Library configuration: which directories to index and how.

A configuration file is YAML, for example::

    directories:
      - libs/vendor
      - /opt/spice/models
    file_patterns: ["*.lib", "*.mod"]
    max_workers: 4
    search_limit: 100

Relative directories are resolved against the folder holding the file.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import cerberus
import yaml

from .errors import ConfigurationError
from .library.index import DEFAULT_FILE_PATTERNS, DEFAULT_SEARCH_LIMIT
from .parser.metadata import DEFAULT_UNIT_SUFFIXES

logger = logging.getLogger(__name__)

_non_empty_string_list = {"type": "list", "schema": {"type": "string", "empty": False}}

CONFIG_SCHEMA: Dict[str, Any] = {
    "directories": {**_non_empty_string_list, "required": True, "minlength": 1},
    "file_patterns": {**_non_empty_string_list, "required": False, "minlength": 1},
    "unit_suffixes": {**_non_empty_string_list, "required": False},
    "max_workers": {"type": "integer", "required": False, "min": 1},
    "search_limit": {"type": "integer", "required": False, "min": 0},
}


@dataclass(frozen=True)
class LibraryConfig:
    directories: Tuple[Path, ...]
    file_patterns: Tuple[str, ...] = DEFAULT_FILE_PATTERNS
    unit_suffixes: Tuple[str, ...] = DEFAULT_UNIT_SUFFIXES
    max_workers: int = 1
    search_limit: int = DEFAULT_SEARCH_LIMIT

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None, source: Optional[Path] = None) -> "LibraryConfig":
        """Validates a raw mapping and builds the configuration from it."""
        validator = cerberus.Validator(CONFIG_SCHEMA)
        validator.allow_unknown = False
        if not validator.validate(data):
            raise ConfigurationError(_format_schema_errors(validator.errors, source))
        document = validator.document

        base_dir = base_dir or Path.cwd()
        directories = tuple(
            path if path.is_absolute() else (base_dir / path)
            for path in (Path(d).expanduser() for d in document["directories"])
        )
        return cls(
            directories=directories,
            file_patterns=tuple(document.get("file_patterns", DEFAULT_FILE_PATTERNS)),
            unit_suffixes=tuple(document.get("unit_suffixes", DEFAULT_UNIT_SUFFIXES)),
            max_workers=document.get("max_workers", 1),
            search_limit=document.get("search_limit", DEFAULT_SEARCH_LIMIT),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "LibraryConfig":
        source = Path(path)
        logger.info(f"Loading library configuration from: {source}")
        if not source.is_file():
            raise ConfigurationError(f"Library configuration file not found at path: {source}")
        try:
            with source.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Could not read library configuration file '{source}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in library configuration file '{source}': {e}") from e

        if content is None:
            raise ConfigurationError(f"Library configuration file '{source}' is empty.")
        if not isinstance(content, dict):
            raise ConfigurationError(f"The root of library configuration file '{source}' must be a mapping.")

        config = cls.from_dict(content, base_dir=source.resolve().parent, source=source)
        logger.debug("Library configuration: %s", config)
        return config


def _format_schema_errors(errors: Dict[str, Any], source: Optional[Path]) -> str:
    where = f" '{source}'" if source else ""
    error_lines = [f"  - Field '{field}': {messages}" for field, messages in sorted(errors.items())]
    return f"Library configuration{where} is invalid:\n" + "\n".join(error_lines)
