"""Reassemble logical tables from extraction fragments.

A table that spans several pages usually reaches us as several fragments, each
with its own (possibly repeated or garbled) header row.
"""

from __future__ import annotations

from typing import Iterable, List

from .headers import is_header_row
from .logging import get_logger
from .models import Table

logger = get_logger(__name__)

_MIN_FALLBACK_COLUMNS = 3


def is_continuation(accumulated: Table, fragment: Table) -> bool:
    """Return True when ``fragment`` continues the table built in ``accumulated``."""
    if fragment.headers == accumulated.headers:
        return True
    if is_header_row(fragment.headers, accumulated.headers):
        return True
    width_gap = abs(len(fragment.headers) - len(accumulated.headers))
    return width_gap <= 1 and len(fragment.headers) > _MIN_FALLBACK_COLUMNS


def merge_fragments(fragments: Iterable[Table]) -> List[Table]:
    merged: List[Table] = []
    current: Table | None = None
    fragment_count = 0

    for fragment in fragments:
        fragment_count += 1
        if current is None:
            current = fragment.copy()
            continue
        if is_continuation(current, fragment):
            current.rows.extend(list(row) for row in fragment.rows)
            continue
        merged.append(current)
        current = fragment.copy()

    if current is not None:
        merged.append(current)

    logger.debug("fragments_merged", fragments=fragment_count, tables=len(merged))
    return merged
