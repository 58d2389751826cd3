"""Per-row net/gross pricing from treatment codes and circumference tiers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence

from .codes import CROWN_CODES, MAINTENANCE_CODE, compartment_family_count, count_code, count_codes
from .formatting import format_price, to_decimal
from .logging import get_logger
from .models import ColumnRoles, Row, cell_at
from .options import ProcessingOptions
from .schedule import PriceSchedule

logger = get_logger(__name__)

_FIRST_NUMBER = re.compile(r"\d+")

ZERO = Decimal("0")


@dataclass(slots=True)
class PricedRows:
    """Rows with net/gross cells appended, plus the unrounded sums they carry."""

    rows: List[Row] = field(default_factory=list)
    net: Decimal = ZERO
    gross: Decimal = ZERO
    dropped: int = 0


def parse_circumference(text: str) -> Optional[int]:
    match = _FIRST_NUMBER.search(text or "")
    if not match:
        return None
    return int(match.group(0))


def compartment_price(
    treatment: str,
    circumference: str,
    schedule: PriceSchedule,
    options: ProcessingOptions,
) -> Decimal:
    """Tier price times the number of compartment families named in the cell.

    Families present together are each billed at the same tier price.
    """
    families = compartment_family_count(treatment)
    if not families:
        return ZERO
    centimeters = parse_circumference(circumference)
    if centimeters is None:
        return ZERO
    tier = schedule.tier_index(centimeters)
    if tier is None:
        return ZERO
    base = schedule.base_price(tier, options.custom_compartment_prices, options.compartment_multiplier)
    return base * families


def crown_price(treatment: str, options: ProcessingOptions) -> Decimal:
    """Bill only the highest-ranked crown-reduction code present."""
    prices = options.flat_prices
    counts = count_codes(treatment)
    ranked = zip(CROWN_CODES, (prices.tier3_crown, prices.tier2_crown, prices.generic_crown))
    for code, price in ranked:
        if counts[code] > 0:
            return to_decimal(price) * counts[code]
    return ZERO


def maintenance_price(treatment: str, options: ProcessingOptions) -> Decimal:
    count = count_code(treatment, MAINTENANCE_CODE)
    if count <= 0:
        return ZERO
    return to_decimal(options.flat_prices.maintenance) * count


def price_row(
    row: Row,
    roles: ColumnRoles,
    schedule: PriceSchedule,
    options: ProcessingOptions,
) -> Decimal:
    """Net price of one row; zero when no billable code is found."""
    treatment = cell_at(row, roles.treatment)
    circumference = cell_at(row, roles.circumference)
    return (
        compartment_price(treatment, circumference, schedule, options)
        + crown_price(treatment, options)
        + maintenance_price(treatment, options)
    )


def price_rows(
    rows: Sequence[Row],
    roles: ColumnRoles,
    schedule: PriceSchedule,
    options: ProcessingOptions,
) -> PricedRows:
    """Append formatted net/gross cells to each row.

    Zero-priced rows get two empty cells, or are dropped when
    ``remove_zero_price_rows`` is set.
    """
    priced = PricedRows()
    for row in rows:
        net = price_row(row, roles, schedule, options)
        if net > 0:
            gross = schedule.gross(net)
            priced.net += net
            priced.gross += gross
            priced.rows.append([*row, format_price(net), format_price(gross)])
        elif options.remove_zero_price_rows:
            priced.dropped += 1
        else:
            priced.rows.append([*row, "", ""])

    logger.debug(
        "rows_priced",
        rows=len(priced.rows),
        dropped=priced.dropped,
        net=str(priced.net),
        gross=str(priced.gross),
    )
    return priced
