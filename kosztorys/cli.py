"""Command-line interface for the kosztorys pricing engine."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from .formatting import format_amount
from .logging import get_logger
from .models import ExtractionFormatError, ExtractionResult
from .options import OptionsError, ProcessingOptions
from .runtime import build_runtime

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Tree-care cost estimate pricing engine")


def _read_json(path: Path, what: str):
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"{what} file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON in {what} file {path}: {exc}") from exc


@app.command("process")
def process_command(
    input_path: Path = typer.Argument(..., help="Extraction result JSON (metadata + tables)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write the processed JSON here instead of stdout"),
    options_path: Optional[Path] = typer.Option(None, "--options", help="Processing options JSON"),
    remove_removal_rows: Optional[bool] = typer.Option(
        None,
        "--remove-removal-rows/--keep-removal-rows",
        help="Drop rows of trees marked for removal (Uo/U)",
    ),
    remove_zero_rows: Optional[bool] = typer.Option(
        None,
        "--remove-zero-rows/--keep-zero-rows",
        help="Drop rows that price to zero",
    ),
    preserve_ordinal: Optional[bool] = typer.Option(
        None,
        "--preserve-ordinal/--renumber",
        help="Keep the original Lp. numbers instead of renumbering",
    ),
) -> None:
    try:
        runtime = build_runtime()
    except ValueError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    payload = _read_json(input_path, "input")
    try:
        extraction = ExtractionResult.from_dict(payload)
    except ExtractionFormatError as exc:
        raise typer.BadParameter(str(exc)) from exc

    options = runtime.options
    if options_path is not None:
        try:
            options = ProcessingOptions.from_mapping(_read_json(options_path, "options"), defaults=options)
        except OptionsError as exc:
            raise typer.BadParameter(str(exc)) from exc
    options = options.with_overrides(
        remove_removal_code_rows=remove_removal_rows,
        remove_zero_price_rows=remove_zero_rows,
        preserve_ordinal=preserve_ordinal,
    )

    result = runtime.process(extraction, options)
    document = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(document + "\n", encoding="utf-8")
        typer.echo(
            f"{len(result.tables)} table(s) written to {out}; "
            f"netto {format_amount(result.totals.total_net)} PLN, "
            f"brutto {format_amount(result.totals.total_gross)} PLN"
        )
    else:
        typer.echo(document)


@app.command("schedule")
def schedule_command(
    multiplier: Optional[float] = typer.Option(None, "--multiplier", help="Compartment price multiplier"),
) -> None:
    """Print the compartment price tiers in effect."""
    runtime = build_runtime()
    prices = runtime.schedule.effective_prices(multiplier=multiplier)
    for tier, price in zip(runtime.schedule.tiers, prices):
        typer.echo(f"{tier.min:>4}-{tier.max:<4} cm  {format_amount(price):>10} PLN")
    typer.echo(f"VAT {format_amount(runtime.schedule.vat_rate * 100)}%")


@app.command("service")
def service_command(
    host: str = typer.Option("0.0.0.0", "--host", help="Service bind host"),
    port: int = typer.Option(8000, "--port", help="Service port"),
) -> None:
    import uvicorn

    uvicorn.run(
        "kosztorys.app:create_app",
        host=host,
        port=port,
        factory=True,
        log_level="info",
    )


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
