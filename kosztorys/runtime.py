"""Runtime wiring for CLI and service entrypoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import AppConfig, load_config
from .logging import configure_logging, get_logger
from .models import ExtractionResult, ProcessingResult
from .options import ProcessingOptions
from .pipeline import process_extraction
from .schedule import PriceSchedule, default_schedule, load_schedule

logger = get_logger(__name__)


@dataclass(slots=True)
class Runtime:
    config: AppConfig
    schedule: PriceSchedule
    options: ProcessingOptions

    def process(
        self,
        extraction: ExtractionResult,
        options: Optional[ProcessingOptions] = None,
    ) -> ProcessingResult:
        return process_extraction(extraction, options or self.options, self.schedule)


def build_runtime(config: AppConfig | None = None) -> Runtime:
    cfg = config or load_config()
    configure_logging(cfg.log_level)

    if cfg.schedule_path:
        schedule = load_schedule(cfg.schedule_path, vat_rate=cfg.vat_rate)
    else:
        schedule = default_schedule(cfg.vat_rate)
    logger.info(
        "runtime_ready",
        tiers=len(schedule.tiers),
        vat_rate=str(schedule.vat_rate),
        schedule_path=str(cfg.schedule_path) if cfg.schedule_path else None,
    )

    return Runtime(config=cfg, schedule=schedule, options=cfg.default_options())
