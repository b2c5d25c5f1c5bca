# src/spicelib_core/parser/values.py
"""
Parsing and formatting of SPICE numeric literals.

A literal is a decimal or scientific mantissa, an optional scale suffix and
optional trailing unit letters that SPICE ignores (``10uF``, ``1kOhm``).
Suffixes are case-insensitive; ``meg`` is checked before ``m`` so that
``1MEG`` is a million and ``1M`` is a thousandth.
"""
import logging
import math
import re
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SCALE_SUFFIXES: Dict[str, float] = {
    "t": 1e12,
    "g": 1e9,
    "meg": 1e6,
    "k": 1e3,
    "m": 1e-3,
    "u": 1e-6,
    "n": 1e-9,
    "p": 1e-12,
    "f": 1e-15,
}

_LITERAL_REGEX = re.compile(
    r"^(?P<mantissa>[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r"(?P<scale>meg|[tgkmunpf])?"
    r"(?P<unit>[a-z]*)$",
    re.IGNORECASE,
)


def parse_spice_value(token: str) -> Optional[float]:
    """
    Parses one SPICE literal and returns its value, or None when the token is
    not numeric (model names such as ``2N3904`` or ``D1N4148`` included).

    Examples:
        '1K'     -> 1000.0
        '2.5MEG' -> 2500000.0
        '10p'    -> 1e-11
        '1e-9'   -> 1e-09
        '10uF'   -> 1e-05
    """
    if token is None:
        return None
    match = _LITERAL_REGEX.match(token.strip())
    if not match:
        return None
    mantissa = float(match.group("mantissa"))
    scale = match.group("scale")
    if scale is None:
        return mantissa
    return mantissa * SCALE_SUFFIXES[scale.lower()]


def is_spice_value(token: str) -> bool:
    return parse_spice_value(token) is not None


def format_spice_value(value: float) -> str:
    """Renders a value compactly without losing precision that matters for re-parsing."""
    if value is None or math.isnan(value):
        raise ValueError(f"Cannot format non-numeric value {value!r} as a SPICE literal.")
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return format(value, ".12g")
