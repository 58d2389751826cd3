"""Header-line detection and canonical report header labels."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .models import ColumnRoles

__all__ = [
    "HEADER_KEYWORDS",
    "ORDINAL_KEYWORDS",
    "LABEL_ORDINAL",
    "LABEL_SPECIES",
    "LABEL_CIRCUMFERENCE",
    "LABEL_TREATMENT",
    "LABEL_NET",
    "LABEL_GROSS",
    "is_header_row",
    "rename_headers",
]

HEADER_KEYWORDS = (
    "lp",
    "nr",
    "gatun",
    "obw",
    "zabieg",
    "pielęgn",
    "wartoś",
    "netto",
    "brutto",
    "kod",
)
ORDINAL_KEYWORDS = frozenset({"lp", "nr"})

LABEL_ORDINAL = "Lp."
LABEL_SPECIES = "Nazwa gatunku\n[polska/łacińska]"
LABEL_CIRCUMFERENCE = "Obwód pnia\nmierz.\nna wys. 130 cm\n[cm]"
LABEL_TREATMENT = "Zabiegi\npielęgnacyjne"
LABEL_NET = "Wartość\nzabiegów\npielęgnacyjnych\n[netto]\n[PLN]"
LABEL_GROSS = "Wartość\nzabiegów\npielęgnacyjnych\n[brutto]\n[PLN]"

_NORMALIZE = re.compile(r"[\s.,;:]+")
_MATCH_RATIO = 0.5


def _keyword_hits(row: Sequence[str]) -> set:
    text = " ".join(cell or "" for cell in row).lower()
    return {keyword for keyword in HEADER_KEYWORDS if keyword in text}


def _normalize(cell: Optional[str]) -> str:
    return _NORMALIZE.sub("", (cell or "").lower())


def _similarity(reference: Sequence[str], row: Sequence[str]) -> float:
    score = 0.0
    compared = 0
    for expected, actual in zip(reference, row):
        left = _normalize(expected)
        right = _normalize(actual)
        if not left and not right:
            continue
        compared += 1
        if left == right:
            score += 1.0
        elif left and right and (len(left) > 3 or len(right) > 3) and (left in right or right in left):
            score += 0.8
    if compared == 0:
        return 0.0
    return score / compared


def is_header_row(row: Sequence[str], reference: Optional[Sequence[str]] = None) -> bool:
    """Return True when ``row`` is a header line rather than data.

    Header lines end up among data rows when the extraction repeats them across
    a page break. A row is a header if it mentions enough header keywords, or if
    it resembles ``reference`` (the table's own headers) cell by cell.
    """
    hits = _keyword_hits(row)
    if len(hits) >= 3:
        return True
    if len(hits) >= 2 and hits & ORDINAL_KEYWORDS:
        return True
    if reference:
        return _similarity(reference, row) > _MATCH_RATIO
    return False


def rename_headers(headers: Sequence[str], roles: ColumnRoles) -> List[str]:
    """Return a copy of ``headers`` rewritten to the canonical report labels."""
    renamed = list(headers)
    if not renamed:
        return renamed

    if roles.circumference is not None and roles.circumference < len(renamed):
        renamed[roles.circumference] = LABEL_CIRCUMFERENCE
    if roles.treatment is not None and roles.treatment < len(renamed):
        renamed[roles.treatment] = LABEL_TREATMENT

    first = renamed[0].strip().lower()
    if "lp" in first or first in {"", "1", "no"}:
        renamed[0] = LABEL_ORDINAL

    if len(renamed) > 1 and 1 not in (roles.circumference, roles.treatment):
        second = renamed[1].strip().lower()
        if not second or "gatun" in second or "nazwa" in second:
            renamed[1] = LABEL_SPECIES

    if renamed[-2:] != [LABEL_NET, LABEL_GROSS]:
        renamed.extend([LABEL_NET, LABEL_GROSS])
    return renamed
