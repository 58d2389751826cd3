"""Treatment-code vocabulary and the multiplier-aware occurrence counter.

Codes found in the treatment column:

* compartment-type (sanitary cut family) CS / CR / CP, billed by circumference tier,
* crown reduction W4t > W2t > WE, flat priced by rank,
* maintenance KU, flat priced and independent of the others,
* removal Uo / U, marking a tree destined for removal.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Iterable, Pattern, Tuple

__all__ = [
    "COMPARTMENT_FAMILIES",
    "COMPARTMENT_MARKERS",
    "CROWN_CODES",
    "MAINTENANCE_CODE",
    "FLAT_CODES",
    "REMOVAL_TOKENS",
    "REMOVAL_CODES",
    "compartment_family_count",
    "has_compartment_marker",
    "has_crown_marker",
    "has_maintenance_marker",
    "is_removal_token",
    "is_removal_code",
    "count_codes",
    "count_code",
]

# Each family is counted once per cell, whichever of its markers appear.
COMPARTMENT_FAMILIES: Tuple[Tuple[str, ...], ...] = (
    ("cs", "cięc", "ciec"),
    ("cr",),
    ("cp",),
)
COMPARTMENT_MARKERS: Tuple[str, ...] = tuple(marker for family in COMPARTMENT_FAMILIES for marker in family)

# Highest rank first.
CROWN_CODES: Tuple[str, ...] = ("w4t", "w2t", "we")
MAINTENANCE_CODE = "ku"
# Flat-priced codes share one tokenizer pass.
FLAT_CODES: Tuple[str, ...] = CROWN_CODES + (MAINTENANCE_CODE,)

REMOVAL_TOKENS = frozenset({"uo", "u", "uo.", "u."})
REMOVAL_CODES = frozenset({"uo", "u"})

_WHOLE_WE = re.compile(r"(?:\b|(?<=\dx))we(?=x\d|\b)")
_WHOLE_KU = re.compile(r"(?:\b|(?<=\dx))ku(?=x\d|\b)")


def compartment_family_count(text: str) -> int:
    lowered = text.lower()
    return sum(1 for family in COMPARTMENT_FAMILIES if any(marker in lowered for marker in family))


def has_compartment_marker(text: str) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in COMPARTMENT_MARKERS)


def has_crown_marker(text: str) -> bool:
    lowered = text.lower()
    return "w2t" in lowered or "w4t" in lowered or bool(_WHOLE_WE.search(lowered))


def has_maintenance_marker(text: str) -> bool:
    return bool(_WHOLE_KU.search(text.lower()))


def is_removal_token(text: str) -> bool:
    """True when the whole cell is a removal marker such as 'Uo' or 'u.'."""
    return text.strip().lower() in REMOVAL_TOKENS


def is_removal_code(text: str) -> bool:
    """Removal check used for row filtering: one trailing period is ignored."""
    normalized = text.strip().lower()
    if normalized.endswith("."):
        normalized = normalized[:-1]
    return normalized in REMOVAL_CODES


@lru_cache(maxsize=None)
def _code_pattern(codes: Tuple[str, ...]) -> Pattern[str]:
    # "2x W4t", "2 W4t", "2xW4t" before the code; "W4t x 3", "W4tx3" after it.
    alternatives = "|".join(re.escape(code) for code in sorted(codes, key=len, reverse=True))
    return re.compile(
        rf"(?:(?<!\w)(?P<before>\d+)\s*(?:x\s*)?|(?<!\w))"
        rf"(?P<code>{alternatives})"
        rf"(?:\s*x\s*(?P<after>\d+)(?!\w)|(?!\w))",
        re.IGNORECASE,
    )


def _multiplier(before: str | None, after: str | None) -> int:
    for value in (before, after):
        if value:
            return int(value)
    return 1


def count_codes(text: str, codes: Iterable[str] = FLAT_CODES) -> Dict[str, int]:
    """Multiplier-weighted occurrences of each of ``codes`` in one left-to-right pass.

    A number directly before a code (optionally followed by ``x``) or an ``x``
    plus number directly after it multiplies that occurrence; otherwise the
    occurrence counts once. Matches never overlap, so a number taken as the
    trailing multiplier of one code is not reused for the next code.
    """
    vocabulary = tuple(code.lower() for code in codes)
    counts = dict.fromkeys(vocabulary, 0)
    if not text:
        return counts
    for match in _code_pattern(vocabulary).finditer(text):
        code = match.group("code").lower()
        counts[code] += _multiplier(match.group("before"), match.group("after"))
    return counts


def count_code(text: str, code: str) -> int:
    """Occurrences of one code, tokenized together with the other flat-priced codes."""
    key = code.lower()
    vocabulary = FLAT_CODES if key in FLAT_CODES else (key,)
    return count_codes(text, vocabulary)[key]
