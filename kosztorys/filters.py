"""Row filtering and ordinal renumbering around the pricing step."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .codes import is_removal_code
from .headers import is_header_row
from .models import Row, cell_at

__all__ = [
    "purge_header_rows",
    "purge_removal_rows",
    "drop_blank_rows",
    "renumber_ordinals",
]

_ORDINAL = re.compile(r"^[\d.]+$")


def purge_header_rows(rows: Sequence[Row], headers: Sequence[str]) -> List[Row]:
    """Drop header lines repeated inside the data, e.g. after a page break."""
    return [list(row) for row in rows if not is_header_row(row, headers)]


def purge_removal_rows(rows: Sequence[Row], treatment_index: Optional[int]) -> List[Row]:
    """Drop rows of trees marked for removal; no-op when the treatment column is unknown."""
    if treatment_index is None:
        return [list(row) for row in rows]
    return [list(row) for row in rows if not is_removal_code(cell_at(row, treatment_index))]


def drop_blank_rows(rows: Sequence[Row]) -> List[Row]:
    """Drop rows where every cell after the ordinal column is blank."""
    return [list(row) for row in rows if any((cell or "").strip() for cell in row[1:])]


def renumber_ordinals(rows: Sequence[Row]) -> List[Row]:
    """Relabel numeral-shaped first cells 1..N by position.

    First cells that do not look like ordinals are left alone, so a table whose
    leading column holds names is not clobbered.
    """
    renumbered: List[Row] = []
    for position, row in enumerate(rows, start=1):
        updated = list(row)
        if updated and _ORDINAL.match((updated[0] or "").strip()):
            updated[0] = str(position)
        renumbered.append(updated)
    return renumbered
