# src/spicelib_core/library/index.py
"""
The LibraryIndex: every `.MODEL` and `.SUBCKT` found in a set of library
directories, addressable by name and searchable.

Indexing is replace-on-reindex. Each `index_libraries` call builds two fresh
registries and swaps them in at the end, so a reader never sees a mix of the
old and new state. Within one call the first definition of a name wins, where
"first" is the fixed enumeration order: directories as given, files within a
directory sorted by relative path. Parallel parsing does not change that order
because results are consumed in enumeration order and all inserts happen on
the calling thread.
"""
import fnmatch
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple, Union

from ..parser.definitions import ModelDefinition, ParsedLibrary, SubcircuitDefinition
from ..parser.library_parser import LibraryParser
from .registry import Registry

if TYPE_CHECKING:
    from ..config import LibraryConfig

logger = logging.getLogger(__name__)

DEFAULT_FILE_PATTERNS: Tuple[str, ...] = ("*.lib",)
DEFAULT_SEARCH_LIMIT = 50

# Metadata keys that subcircuit search matches in addition to the name.
SEARCHABLE_METADATA_KEYS: Tuple[str, ...] = ("PRODUCT_NAME", "PART_NUMBER", "MANUFACTURER")


@dataclass(frozen=True)
class IndexSummary:
    """Counts from one `index_libraries` run."""
    files_parsed: int = 0
    files_failed: int = 0
    models_indexed: int = 0
    subcircuits_indexed: int = 0
    duplicates_discarded: int = 0


class LibraryIndex:
    def __init__(
        self,
        file_patterns: Sequence[str] = DEFAULT_FILE_PATTERNS,
        unit_suffixes: Optional[Sequence[str]] = None,
        max_workers: int = 1,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}.")
        if search_limit < 0:
            raise ValueError(f"search_limit must not be negative, got {search_limit}.")
        self.file_patterns = tuple(pattern.lower() for pattern in file_patterns)
        self.max_workers = max_workers
        self.search_limit = search_limit
        self._parser = LibraryParser(unit_suffixes)
        self._lock = threading.Lock()
        self._models: Registry[ModelDefinition] = Registry()
        self._subcircuits: Registry[SubcircuitDefinition] = Registry()
        self._indexed_files: Tuple[Path, ...] = ()

    @classmethod
    def from_config(cls, config: "LibraryConfig") -> "LibraryIndex":
        """Builds an index wired from the configuration and indexes its directories."""
        index = cls(
            file_patterns=config.file_patterns,
            unit_suffixes=config.unit_suffixes,
            max_workers=config.max_workers,
            search_limit=config.search_limit,
        )
        index.index_libraries(config.directories)
        return index

    # --- Indexing ---

    def index_libraries(self, directories: Iterable[Union[str, Path]]) -> IndexSummary:
        directories = [Path(d) for d in directories]
        logger.info(f"Indexing SPICE libraries in {len(directories)} director(y/ies).")

        files = self._enumerate_files(directories)
        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self._parse_file, files))
        else:
            results = [self._parse_file(path) for path in files]

        models: Registry[ModelDefinition] = Registry()
        subcircuits: Registry[SubcircuitDefinition] = Registry()
        files_parsed = files_failed = duplicates = 0

        for path, parsed in zip(files, results):
            if parsed is None:
                files_failed += 1
                continue
            files_parsed += 1
            for model in parsed.models:
                if not models.insert_if_absent(model):
                    duplicates += 1
                    logger.debug("Discarding duplicate model '%s' from %s.", model.name, path)
            for subcircuit in parsed.subcircuits:
                if not subcircuits.insert_if_absent(subcircuit):
                    duplicates += 1
                    logger.debug("Discarding duplicate subcircuit '%s' from %s.", subcircuit.name, path)

        with self._lock:
            self._models = models
            self._subcircuits = subcircuits
            self._indexed_files = tuple(files)

        summary = IndexSummary(
            files_parsed=files_parsed,
            files_failed=files_failed,
            models_indexed=len(models),
            subcircuits_indexed=len(subcircuits),
            duplicates_discarded=duplicates,
        )
        logger.info(
            f"Indexed {summary.models_indexed} model(s) and {summary.subcircuits_indexed} subcircuit(s) "
            f"from {files_parsed} file(s) ({files_failed} failed, {duplicates} duplicate(s) discarded)."
        )
        return summary

    def _enumerate_files(self, directories: List[Path]) -> List[Path]:
        files: List[Path] = []
        seen = set()
        for directory in directories:
            if not directory.is_dir():
                logger.warning(f"Library directory not found, skipping: {directory}")
                continue
            candidates = [p for p in directory.rglob("*") if p.is_file() and self._matches(p.name)]
            candidates.sort(key=lambda p: p.relative_to(directory).as_posix())
            for path in candidates:
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                files.append(path)
        logger.debug("Enumerated %d library file(s).", len(files))
        return files

    def _matches(self, file_name: str) -> bool:
        lowered = file_name.lower()
        return any(fnmatch.fnmatchcase(lowered, pattern) for pattern in self.file_patterns)

    def _parse_file(self, path: Path) -> Optional[ParsedLibrary]:
        try:
            return self._parser.parse_file(path)
        except OSError as e:
            logger.warning(f"Could not read library file {path}: {e}")
            return None

    # --- Lookup ---

    def get_model(self, name: str) -> Optional[ModelDefinition]:
        with self._lock:
            return self._models.get(name)

    def get_subcircuit(self, name: str) -> Optional[SubcircuitDefinition]:
        with self._lock:
            return self._subcircuits.get(name)

    @property
    def model_count(self) -> int:
        with self._lock:
            return len(self._models)

    @property
    def subcircuit_count(self) -> int:
        with self._lock:
            return len(self._subcircuits)

    @property
    def indexed_files(self) -> Tuple[Path, ...]:
        with self._lock:
            return self._indexed_files

    # --- Search ---

    def search_models(
        self, query: Optional[str] = None, type_filter: Optional[str] = None, limit: Optional[int] = None
    ) -> List[ModelDefinition]:
        """
        Case-insensitive substring search over model names.

        `type_filter` is compared case-insensitively with the model type
        ('bjt_npn') or the SPICE type keyword ('NPN').
        """
        limit = self._resolve_limit(limit)
        needle = _normalize_query(query)
        wanted_type = type_filter.casefold() if type_filter else None
        with self._lock:
            models = self._models.values()

        matches = [
            model for model in models
            if (not needle or needle in model.name.casefold())
            and (wanted_type is None or wanted_type in (model.model_type.casefold(), model.type_keyword.casefold()))
        ]
        return _ordered(matches)[:limit]

    def search_subcircuits(
        self, query: Optional[str] = None, type_filter: Optional[str] = None, limit: Optional[int] = None
    ) -> List[SubcircuitDefinition]:
        """
        Case-insensitive substring search over subcircuit names and the
        PRODUCT_NAME, PART_NUMBER and MANUFACTURER metadata values.

        `type_filter` is compared case-insensitively with the `TYPE` metadata.
        """
        limit = self._resolve_limit(limit)
        needle = _normalize_query(query)
        wanted_type = type_filter.casefold() if type_filter else None
        with self._lock:
            subcircuits = self._subcircuits.values()

        matches = [
            subcircuit for subcircuit in subcircuits
            if (not needle or _subcircuit_matches(subcircuit, needle))
            and (wanted_type is None or subcircuit.metadata.get("TYPE", "").casefold() == wanted_type)
        ]
        return _ordered(matches)[:limit]

    def _resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.search_limit
        if limit < 0:
            raise ValueError(f"Search limit must not be negative, got {limit}.")
        return limit


def _normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().casefold()


def _subcircuit_matches(subcircuit: SubcircuitDefinition, needle: str) -> bool:
    if needle in subcircuit.name.casefold():
        return True
    return any(needle in subcircuit.metadata.get(key, "").casefold() for key in SEARCHABLE_METADATA_KEYS)


def _ordered(definitions):
    return sorted(definitions, key=lambda d: (d.name.casefold(), d.name))
