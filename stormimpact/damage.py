"""
Damage normalizer
=================

NOAA records damage as a magnitude (PROPDMG / CROPDMG) plus a one-character
scale code (PROPDMGEXP / CROPDMGEXP). This module turns the pair into an
absolute US$ figure.

| code        | multiplier |
|-------------|------------|
| +           | 1          |
| 0 .. 8      | 10         |
| H / h       | 100        |
| K / k       | 1,000      |
| M / m       | 1,000,000  |
| B / b       | 1e9        |
| anything else (blank, -, ?, 9) | 0 |

Unrecognized codes never raise; the damage simply contributes nothing.
`is_zeroed` lets callers count the rows where that actually discarded money.
"""

from __future__ import annotations
from typing import Optional
import math

_LETTER_MULTIPLIERS = {
    "+": 1,
    "H": 10 ** 2,
    "K": 10 ** 3,
    "M": 10 ** 6,
    "B": 10 ** 9,
}
_DIGIT_CODES = frozenset("012345678")


def _clean_code(code) -> str:
    if code is None:
        return ""
    if isinstance(code, float) and math.isnan(code):
        return ""
    return str(code).strip().upper()


def _clean_magnitude(magnitude) -> float:
    if magnitude is None:
        return 0.0
    try:
        v = float(magnitude)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def multiplier(code: Optional[str]) -> int:
    """Return the power-of-ten multiplier for a scale code (0 if unrecognized)."""
    c = _clean_code(code)
    if c in _DIGIT_CODES:
        return 10
    return _LETTER_MULTIPLIERS.get(c, 0)


def normalize_damage(magnitude, code: Optional[str]) -> float:
    """Convert a (magnitude, scale code) pair to US$. Missing magnitude counts as 0."""
    return _clean_magnitude(magnitude) * multiplier(code)


def is_zeroed(magnitude, code: Optional[str]) -> bool:
    """True when a positive magnitude is discarded because its code maps to 0."""
    return _clean_magnitude(magnitude) > 0 and multiplier(code) == 0
