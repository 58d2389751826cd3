"""Manual edits on processed tables and totals recomputed from their value columns."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from .formatting import money, parse_amount
from .models import Table, Totals

__all__ = ["delete_row", "delete_column", "value_column", "recalculate_totals"]

NET_MARKER = "[netto]"
GROSS_MARKER = "[brutto]"


def delete_row(tables: Sequence[Table], table_index: int, row_index: int) -> List[Table]:
    """Return new tables with one row removed; IndexError for unknown positions."""
    if not 0 <= table_index < len(tables):
        raise IndexError(f"table index {table_index} out of range")
    table = tables[table_index]
    if not 0 <= row_index < len(table.rows):
        raise IndexError(f"row index {row_index} out of range")
    rows = [list(row) for position, row in enumerate(table.rows) if position != row_index]
    return _replace(tables, table_index, table.copy(rows=rows))


def delete_column(tables: Sequence[Table], table_index: int, column_index: int) -> List[Table]:
    """Return new tables with one column removed from the headers and every row."""
    if not 0 <= table_index < len(tables):
        raise IndexError(f"table index {table_index} out of range")
    table = tables[table_index]
    if column_index < 0 or column_index >= table.column_count:
        raise IndexError(f"column index {column_index} out of range")
    headers = [header for position, header in enumerate(table.headers) if position != column_index]
    rows = [[cell for position, cell in enumerate(row) if position != column_index] for row in table.rows]
    return _replace(tables, table_index, table.copy(headers=headers, rows=rows))


def _replace(tables: Sequence[Table], index: int, table: Table) -> List[Table]:
    updated = [item.copy() for item in tables]
    updated[index] = table
    return updated


def value_column(headers: Sequence[str], marker: str) -> Optional[int]:
    for index, header in enumerate(headers):
        if marker in (header or "").lower():
            return index
    return None


def _column_sum(table: Table, index: Optional[int]) -> Decimal:
    total = Decimal("0")
    if index is None:
        return total
    for row in table.rows:
        if index < len(row):
            amount = parse_amount(row[index])
            if amount is not None:
                total += amount
    return total


def recalculate_totals(tables: Sequence[Table]) -> Totals:
    """Sum the rendered net/gross columns of every table after manual edits."""
    net = Decimal("0")
    gross = Decimal("0")
    for table in tables:
        net += _column_sum(table, value_column(table.headers, NET_MARKER))
        gross += _column_sum(table, value_column(table.headers, GROSS_MARKER))
    return Totals(total_net=money(net), total_gross=money(gross))
