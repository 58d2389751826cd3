"""Configuration loader for the kosztorys engine and its entrypoints."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .options import FlatPrices, ProcessingOptions


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_decimal(key: str, default: Optional[Decimal]) -> Optional[Decimal]:
    value = _get_env(key)
    if value is None:
        return default
    try:
        amount = Decimal(value.replace(",", "."))
    except ArithmeticError as exc:
        raise ValueError(f"Environment variable {key} must be a number") from exc
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Environment variable {key} must be a non-negative number")
    return amount


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    value_lower = value.lower()
    if value_lower in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value_lower in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Environment variable {key} must be a boolean")


@dataclass(slots=True)
class AppConfig:
    vat_rate: Optional[Decimal]
    schedule_path: Optional[Path]
    remove_removal_rows: bool
    remove_zero_price_rows: bool
    preserve_ordinal: bool
    flat_prices: FlatPrices
    log_level: str

    def default_options(self) -> ProcessingOptions:
        """Options applied when a caller does not say otherwise."""
        return ProcessingOptions(
            remove_removal_code_rows=self.remove_removal_rows,
            remove_zero_price_rows=self.remove_zero_price_rows,
            preserve_ordinal=self.preserve_ordinal,
            flat_prices=self.flat_prices,
        )


def load_config() -> AppConfig:
    defaults = FlatPrices()
    schedule_path = _get_env("KOSZTORYS_SCHEDULE_PATH")

    flat_prices = FlatPrices(
        generic_crown=_get_decimal("KOSZTORYS_PRICE_WE", defaults.generic_crown),
        tier2_crown=_get_decimal("KOSZTORYS_PRICE_W2T", defaults.tier2_crown),
        tier3_crown=_get_decimal("KOSZTORYS_PRICE_W4T", defaults.tier3_crown),
        maintenance=_get_decimal("KOSZTORYS_PRICE_KU", defaults.maintenance),
    )

    return AppConfig(
        vat_rate=_get_decimal("KOSZTORYS_VAT_RATE", None),
        schedule_path=Path(schedule_path) if schedule_path else None,
        remove_removal_rows=_get_bool("KOSZTORYS_REMOVE_REMOVAL_ROWS", True),
        remove_zero_price_rows=_get_bool("KOSZTORYS_REMOVE_ZERO_PRICE_ROWS", True),
        preserve_ordinal=_get_bool("KOSZTORYS_PRESERVE_ORDINAL", True),
        flat_prices=flat_prices,
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
    )
