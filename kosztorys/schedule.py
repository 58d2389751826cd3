"""Circumference price schedule for compartment-type treatments."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from .formatting import to_decimal

__all__ = [
    "ScheduleError",
    "PricingTier",
    "PriceSchedule",
    "DEFAULT_VAT_RATE",
    "DEFAULT_TIERS",
    "default_schedule",
    "load_schedule",
]


class ScheduleError(ValueError):
    """Raised when a price schedule is missing or malformed."""


@dataclass(frozen=True, slots=True)
class PricingTier:
    """Inclusive circumference band in centimeters with its net price."""

    min: int
    max: int
    price: Decimal

    def contains(self, circumference: int) -> bool:
        return self.min <= circumference <= self.max


DEFAULT_VAT_RATE = Decimal("0.08")

DEFAULT_TIERS: tuple[PricingTier, ...] = (
    PricingTier(0, 100, Decimal("730.00")),
    PricingTier(101, 150, Decimal("792.00")),
    PricingTier(151, 200, Decimal("848.00")),
    PricingTier(201, 250, Decimal("912.00")),
    PricingTier(251, 300, Decimal("1164.00")),
    PricingTier(301, 350, Decimal("1296.00")),
    PricingTier(351, 400, Decimal("1462.00")),
    PricingTier(401, 450, Decimal("1628.00")),
    PricingTier(451, 500, Decimal("1650.00")),
    PricingTier(501, 550, Decimal("1766.00")),
    PricingTier(551, 600, Decimal("1880.00")),
    PricingTier(601, 650, Decimal("1996.00")),
    PricingTier(651, 700, Decimal("2112.00")),
)


@dataclass(frozen=True, slots=True)
class PriceSchedule:
    """Ordered, non-overlapping tiers plus the VAT rate applied to net prices."""

    tiers: tuple[PricingTier, ...] = DEFAULT_TIERS
    vat_rate: Decimal = DEFAULT_VAT_RATE

    def __post_init__(self) -> None:
        _validate_tiers(self.tiers)
        if not self.vat_rate.is_finite() or self.vat_rate < 0:
            raise ScheduleError("VAT rate must be a non-negative number")

    def tier_index(self, circumference: int) -> Optional[int]:
        """Return the index of the tier containing ``circumference``, if any."""
        for index, tier in enumerate(self.tiers):
            if tier.contains(circumference):
                return index
        return None

    def base_price(
        self,
        index: int,
        custom_prices: Optional[Sequence[Optional[Any]]] = None,
        multiplier: Optional[Any] = None,
    ) -> Decimal:
        """Price of tier ``index`` after a custom override and the multiplier.

        A multiplied price is rounded up to a whole amount.
        """
        price = self.tiers[index].price
        if custom_prices is not None and index < len(custom_prices):
            override = custom_prices[index]
            if override is not None:
                price = to_decimal(override)
        if multiplier is not None:
            price = (price * to_decimal(multiplier)).to_integral_value(rounding=ROUND_CEILING)
        return price

    def effective_prices(
        self,
        custom_prices: Optional[Sequence[Optional[Any]]] = None,
        multiplier: Optional[Any] = None,
    ) -> List[Decimal]:
        return [self.base_price(index, custom_prices, multiplier) for index in range(len(self.tiers))]

    def gross(self, net: Decimal) -> Decimal:
        return net * (Decimal(1) + self.vat_rate)


def _validate_tiers(tiers: Sequence[PricingTier]) -> None:
    previous: Optional[PricingTier] = None
    for index, tier in enumerate(tiers):
        if tier.min > tier.max:
            raise ScheduleError(f"tier {index} has min {tier.min} greater than max {tier.max}")
        if tier.price < 0:
            raise ScheduleError(f"tier {index} has a negative price")
        if previous is not None and tier.min <= previous.max:
            raise ScheduleError(f"tier {index} overlaps or precedes tier {index - 1}")
        previous = tier


def default_schedule(vat_rate: Optional[Any] = None) -> PriceSchedule:
    if vat_rate is None:
        return PriceSchedule()
    return PriceSchedule(vat_rate=to_decimal(vat_rate))


def _parse_tier(entry: Any, index: int) -> PricingTier:
    if not isinstance(entry, dict):
        raise ScheduleError(f"tier {index} must be an object")
    try:
        lower = entry["min"]
        upper = entry["max"]
        price = entry["price"]
    except KeyError as exc:
        raise ScheduleError(f"tier {index} is missing {exc.args[0]!r}") from exc
    for name, value in (("min", lower), ("max", upper)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ScheduleError(f"tier {index} '{name}' must be an integer")
    if isinstance(price, bool) or not isinstance(price, (int, float, str)):
        raise ScheduleError(f"tier {index} 'price' must be a number")
    amount = to_decimal(price)
    if not amount.is_finite():
        raise ScheduleError(f"tier {index} 'price' must be a number")
    return PricingTier(lower, upper, amount)


def load_schedule(path: Union[str, Path], vat_rate: Optional[Any] = None) -> PriceSchedule:
    """Load tiers from a JSON file: ``{"tiers": [{"min", "max", "price"}], "vatRate"?}``.

    An explicit ``vat_rate`` argument wins over the file's ``vatRate``.
    """
    schedule_path = Path(path)
    try:
        data = json.loads(schedule_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ScheduleError(f"Schedule file not found: {schedule_path}") from exc
    except json.JSONDecodeError as exc:
        raise ScheduleError(f"Invalid JSON in schedule file {schedule_path}: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("tiers"), list):
        raise ScheduleError("Schedule file must contain a 'tiers' list")
    if not data["tiers"]:
        raise ScheduleError("Schedule must define at least one tier")

    tiers = tuple(_parse_tier(entry, index) for index, entry in enumerate(data["tiers"]))
    rate = vat_rate if vat_rate is not None else data.get("vatRate", DEFAULT_VAT_RATE)
    return PriceSchedule(tiers=tiers, vat_rate=to_decimal(rate))
