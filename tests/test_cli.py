import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from kosztorys.cli import app

FIXTURE = Path(__file__).parent / "fixtures" / "extraction.json"

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "KOSZTORYS_VAT_RATE",
        "KOSZTORYS_SCHEDULE_PATH",
        "KOSZTORYS_REMOVE_REMOVAL_ROWS",
        "KOSZTORYS_REMOVE_ZERO_PRICE_ROWS",
        "KOSZTORYS_PRESERVE_ORDINAL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


def test_process_writes_output_file(tmp_path):
    out = tmp_path / "result.json"

    result = runner.invoke(app, ["process", str(FIXTURE), "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert "netto 6 020 PLN" in result.stdout
    assert "brutto 6 501.60 PLN" in result.stdout
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["totals"] == {"totalNet": "6020.00", "totalGross": "6501.60"}
    assert [row[0] for row in payload["tables"][0]["rows"]] == ["1", "3", "4"]
    assert payload["metadata"]["townName"] == "Sopot"


def test_process_flags_override_defaults(tmp_path):
    out = tmp_path / "result.json"

    result = runner.invoke(
        app,
        ["process", str(FIXTURE), "--out", str(out), "--keep-removal-rows", "--keep-zero-rows", "--renumber"],
    )

    assert result.exit_code == 0, result.output
    rows = json.loads(out.read_text(encoding="utf-8"))["tables"][0]["rows"]
    assert [row[1] for row in rows] == [
        "Dąb szypułkowy",
        "Klon zwyczajny",
        "Lipa drobnolistna",
        "Brzoza brodawkowata",
        "Sosna zwyczajna",
    ]
    assert [row[0] for row in rows] == ["1", "2", "3", "4", "5"]
    assert rows[1][-2:] == ["", ""]


def test_process_reads_options_file(tmp_path):
    options = tmp_path / "options.json"
    options.write_text(json.dumps({"flatPrices": {"tier3Crown": 1000}, "preserveOrdinal": False}), encoding="utf-8")
    out = tmp_path / "result.json"

    result = runner.invoke(app, ["process", str(FIXTURE), "--options", str(options), "--out", str(out)])

    assert result.exit_code == 0, result.output
    rows = json.loads(out.read_text(encoding="utf-8"))["tables"][0]["rows"]
    assert rows[1][0] == "2"
    assert rows[1][-2:] == ["2500", "2700"]


def test_process_rejects_malformed_input(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"tables": "none"}), encoding="utf-8")

    result = runner.invoke(app, ["process", str(bad)])

    assert result.exit_code == 2


def test_process_reports_configuration_errors(monkeypatch):
    monkeypatch.setenv("KOSZTORYS_VAT_RATE", "abc")

    result = runner.invoke(app, ["process", str(FIXTURE)])

    assert result.exit_code == 1


def test_schedule_lists_tiers():
    result = runner.invoke(app, ["schedule", "--multiplier", "2"])

    assert result.exit_code == 0, result.output
    lines = result.stdout.strip().splitlines()
    assert len(lines) == 14
    assert lines[0].split() == ["0-100", "cm", "1", "460", "PLN"]
    assert lines[-1] == "VAT 8%"
