"""FastAPI application exposing the pricing engine."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from .formatting import format_amount
from .logging import get_logger
from .models import ExtractionFormatError, ExtractionResult
from .options import OptionsError, ProcessingOptions
from .report import prepare_report_metadata, report_filename
from .runtime import Runtime, build_runtime

logger = get_logger(__name__)


class ProcessRequest(BaseModel):
    tables: List[Dict[str, Any]] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    options: Optional[Dict[str, Any]] = None

    model_config = {
        "extra": "ignore",
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.runtime = build_runtime()
    yield


def get_runtime(request: Request) -> Runtime:
    runtime: Runtime = request.app.state.runtime
    return runtime


def _bad_request(code: str, exc: Exception) -> HTTPException:
    return HTTPException(status_code=422, detail={"code": code, "message": str(exc)})


def create_app() -> FastAPI:
    api = FastAPI(title="Kosztorys Pricing Service", version="1.0.0", lifespan=lifespan)

    @api.get("/health")
    def health(runtime: Runtime = Depends(get_runtime)) -> dict:
        return {
            "status": "healthy",
            "tiers": len(runtime.schedule.tiers),
            "vat_rate": str(runtime.schedule.vat_rate),
        }

    @api.get("/schedule")
    def schedule(runtime: Runtime = Depends(get_runtime)) -> dict:
        return {
            "vatRate": str(runtime.schedule.vat_rate),
            "tiers": [
                {"min": tier.min, "max": tier.max, "price": str(tier.price)}
                for tier in runtime.schedule.tiers
            ],
        }

    @api.post("/process")
    def process(req: ProcessRequest, runtime: Runtime = Depends(get_runtime)) -> dict:
        try:
            extraction = ExtractionResult.from_dict({"tables": req.tables, "metadata": req.metadata})
        except ExtractionFormatError as exc:
            raise _bad_request("INVALID_EXTRACTION", exc) from exc
        try:
            options = ProcessingOptions.from_mapping(req.options, defaults=runtime.options)
        except OptionsError as exc:
            raise _bad_request("INVALID_OPTIONS", exc) from exc

        result = runtime.process(extraction, options)
        report = prepare_report_metadata(result.metadata)
        logger.info(
            "process_request",
            tables=len(result.tables),
            total_net=str(result.totals.total_net),
        )
        payload = result.to_dict()
        payload["report"] = {
            "title": report.title,
            "location": report.location,
            "details": report.details,
            "filename": report_filename(result.metadata, "pdf"),
            "totalNet": format_amount(result.totals.total_net),
            "totalGross": format_amount(result.totals.total_gross),
        }
        return payload

    return api
