# src/spicelib_core/parser/metadata.py
import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .definitions import TS_PARAMETER_NAMES

logger = logging.getLogger(__name__)

# Unit words seen after metadata values in real speaker/driver libraries.
# Matching is case-insensitive and only ever removes the final word.
DEFAULT_UNIT_SUFFIXES: Tuple[str, ...] = (
    "in", "inch", "inches", "mm", "cm",
    "ohm", "ohms",
    "db",
    "w", "watt", "watts",
    "hz", "khz",
    "g", "grams", "kg",
    "l", "liter", "liters", "litre", "litres",
    "mh", "tm", "m/n",
)


class MetadataExtractor:
    """
    Turns the `* KEY: VALUE` comment run above a `.SUBCKT` header into maps.

    Every key lands in `metadata` as a string with any trailing unit word
    removed. Keys that name a Thiele/Small parameter are also stored in
    `ts_parameters` as floats when their value is numeric.
    """

    def __init__(self, unit_suffixes: Optional[Sequence[str]] = None):
        suffixes = DEFAULT_UNIT_SUFFIXES if unit_suffixes is None else unit_suffixes
        self.unit_suffixes = frozenset(s.lower() for s in suffixes)

    def extract(self, comment_lines: Iterable[str]) -> Tuple[Dict[str, str], Dict[str, float]]:
        metadata: Dict[str, str] = {}
        ts_parameters: Dict[str, float] = {}

        for comment_line in comment_lines:
            entry = self._split_entry(comment_line)
            if entry is None:
                continue
            key, value = entry
            metadata[key] = value

            if key in TS_PARAMETER_NAMES:
                number = _leading_number(value)
                if number is None:
                    logger.debug("T/S parameter %s has non-numeric value '%s'; kept as metadata only.", key, value)
                else:
                    ts_parameters[key] = number

        return metadata, ts_parameters

    def _split_entry(self, comment_line: str) -> Optional[Tuple[str, str]]:
        body = comment_line.strip().lstrip("*").strip()
        key, sep, value = body.partition(":")
        if not sep:
            return None
        key = key.strip().upper()
        value = self.normalize_value(value)
        if not key or not value:
            return None
        return key, value

    def normalize_value(self, raw_value: str) -> str:
        """Trims, collapses internal whitespace and drops one trailing unit word."""
        words = raw_value.split()
        if len(words) > 1 and words[-1].lower() in self.unit_suffixes:
            words = words[:-1]
        return " ".join(words)


def _leading_number(value: str) -> Optional[float]:
    # Units outside the suffix list ('214 cm2', '0.0133 m^2') follow the number.
    try:
        return float(value.split()[0])
    except (IndexError, ValueError):
        return None
