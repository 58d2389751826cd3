"""End-to-end processing: merge, classify, filter, price and relabel tables."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .classifier import classify_columns
from .filters import drop_blank_rows, purge_header_rows, purge_removal_rows, renumber_ordinals
from .formatting import money
from .headers import rename_headers
from .logging import get_logger
from .merger import merge_fragments
from .models import ColumnRoles, ExtractionResult, ProcessingResult, Table, Totals
from .options import ProcessingOptions
from .pricing import ZERO, price_rows
from .schedule import PriceSchedule

logger = get_logger(__name__)


@dataclass(slots=True)
class ProcessedTable:
    table: Table
    roles: ColumnRoles
    net: Decimal = ZERO
    gross: Decimal = ZERO

    @property
    def priced(self) -> bool:
        return self.roles.resolved


def process_table(
    table: Table,
    options: ProcessingOptions,
    schedule: PriceSchedule,
) -> ProcessedTable:
    """Process one logical table; unresolved columns leave it filtered but unpriced."""
    roles = classify_columns(table)
    headers = list(table.headers)

    rows = purge_header_rows(table.rows, table.headers)
    if options.remove_removal_code_rows:
        rows = purge_removal_rows(rows, roles.treatment)

    net = gross = ZERO
    if roles.resolved:
        priced = price_rows(rows, roles, schedule, options)
        rows, net, gross = priced.rows, priced.net, priced.gross
        headers = rename_headers(headers, roles)
    else:
        logger.info(
            "table_unpriced",
            title=table.title,
            circumference=roles.circumference,
            treatment=roles.treatment,
        )

    rows = drop_blank_rows(rows)
    if not options.preserve_ordinal:
        rows = renumber_ordinals(rows)

    logger.debug(
        "rows_filtered",
        title=table.title,
        rows_in=len(table.rows),
        rows_out=len(rows),
    )
    return ProcessedTable(
        table=Table(headers=headers, rows=rows, title=table.title),
        roles=roles,
        net=net,
        gross=gross,
    )


def process_tables(
    tables: Iterable[Table],
    options: Optional[ProcessingOptions] = None,
    schedule: Optional[PriceSchedule] = None,
) -> ProcessingResult:
    """Turn raw extraction fragments into priced report tables and totals.

    Pure with respect to its inputs: the caller's tables are never modified and
    every call recomputes everything.
    """
    options = options or ProcessingOptions()
    schedule = schedule or PriceSchedule()

    processed = [process_table(table, options, schedule) for table in merge_fragments(tables)]
    total_net = sum((item.net for item in processed), ZERO)
    total_gross = sum((item.gross for item in processed), ZERO)
    totals = Totals(total_net=money(total_net), total_gross=money(total_gross))

    logger.info(
        "tables_processed",
        tables=len(processed),
        priced=sum(1 for item in processed if item.priced),
        total_net=str(totals.total_net),
        total_gross=str(totals.total_gross),
    )
    return ProcessingResult(tables=[item.table for item in processed], totals=totals)


def process_extraction(
    extraction: ExtractionResult,
    options: Optional[ProcessingOptions] = None,
    schedule: Optional[PriceSchedule] = None,
) -> ProcessingResult:
    """Process an extraction result, passing its document metadata through."""
    result = process_tables(extraction.tables, options, schedule)
    result.metadata = extraction.metadata
    return result
