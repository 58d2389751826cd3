"""Processing options recognised by the pricing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from .formatting import to_decimal

__all__ = ["OptionsError", "FlatPrices", "ProcessingOptions"]


class OptionsError(ValueError):
    """Raised when a processing option has an invalid value."""


def _bool_option(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise OptionsError(f"Option '{key}' must be a boolean")
    return value


def _amount_option(value: Any, key: str, allow_none: bool = False) -> Optional[Decimal]:
    if value is None:
        if allow_none:
            return None
        raise OptionsError(f"Option '{key}' is required")
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise OptionsError(f"Option '{key}' must be a number")
    amount = to_decimal(value)
    if not amount.is_finite():
        raise OptionsError(f"Option '{key}' must be a number")
    if amount < 0:
        raise OptionsError(f"Option '{key}' must not be negative")
    return amount


@dataclass(frozen=True, slots=True)
class FlatPrices:
    """Flat net prices for crown-reduction (WE, W2t, W4t) and maintenance (KU) codes."""

    generic_crown: Decimal = Decimal("800")
    tier2_crown: Decimal = Decimal("800")
    tier3_crown: Decimal = Decimal("1200")
    maintenance: Decimal = Decimal("500")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "FlatPrices":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise OptionsError("Option 'flatPrices' must be an object")
        defaults = cls()
        values = {}
        for attr, key in (
            ("generic_crown", "genericCrown"),
            ("tier2_crown", "tier2Crown"),
            ("tier3_crown", "tier3Crown"),
            ("maintenance", "maintenance"),
        ):
            raw = data.get(key)
            values[attr] = getattr(defaults, attr) if raw is None else _amount_option(raw, f"flatPrices.{key}")
        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "genericCrown": str(self.generic_crown),
            "tier2Crown": str(self.tier2_crown),
            "tier3Crown": str(self.tier3_crown),
            "maintenance": str(self.maintenance),
        }


@dataclass(frozen=True, slots=True)
class ProcessingOptions:
    remove_removal_code_rows: bool = False
    remove_zero_price_rows: bool = False
    preserve_ordinal: bool = False
    flat_prices: FlatPrices = field(default_factory=FlatPrices)
    compartment_multiplier: Optional[Decimal] = None
    custom_compartment_prices: Optional[List[Optional[Decimal]]] = None

    @classmethod
    def from_mapping(
        cls,
        data: Optional[Mapping[str, Any]],
        defaults: Optional["ProcessingOptions"] = None,
    ) -> "ProcessingOptions":
        """Build options from the camelCase wire format, falling back to ``defaults``."""
        base = defaults or cls()
        if data is None:
            return base
        if not isinstance(data, Mapping):
            raise OptionsError("Options must be an object")

        custom_prices = data.get("customCompartmentPrices")
        if custom_prices is None:
            parsed_prices = base.custom_compartment_prices
        elif isinstance(custom_prices, list):
            parsed_prices = [
                _amount_option(value, f"customCompartmentPrices[{index}]", allow_none=True)
                for index, value in enumerate(custom_prices)
            ]
        else:
            raise OptionsError("Option 'customCompartmentPrices' must be a list")

        multiplier = data.get("compartmentMultiplier")
        flat_prices = data.get("flatPrices")
        return cls(
            remove_removal_code_rows=_bool_option(data, "removeRemovalCodeRows", base.remove_removal_code_rows),
            remove_zero_price_rows=_bool_option(data, "removeZeroPriceRows", base.remove_zero_price_rows),
            preserve_ordinal=_bool_option(data, "preserveOrdinal", base.preserve_ordinal),
            flat_prices=base.flat_prices if flat_prices is None else FlatPrices.from_mapping(flat_prices),
            compartment_multiplier=(
                base.compartment_multiplier
                if multiplier is None
                else _amount_option(multiplier, "compartmentMultiplier")
            ),
            custom_compartment_prices=parsed_prices,
        )

    def with_overrides(self, **changes: Any) -> "ProcessingOptions":
        """Return a copy with the non-None ``changes`` applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    def to_dict(self) -> dict:
        return {
            "removeRemovalCodeRows": self.remove_removal_code_rows,
            "removeZeroPriceRows": self.remove_zero_price_rows,
            "preserveOrdinal": self.preserve_ordinal,
            "flatPrices": self.flat_prices.to_dict(),
            "compartmentMultiplier": (
                str(self.compartment_multiplier) if self.compartment_multiplier is not None else None
            ),
            "customCompartmentPrices": (
                [str(price) if price is not None else None for price in self.custom_compartment_prices]
                if self.custom_compartment_prices is not None
                else None
            ),
        }
