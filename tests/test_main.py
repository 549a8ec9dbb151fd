from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from tasting_report.main import app

runner = CliRunner()


def test_render_command_writes_pdf(tmp_path: Path, sample_payload) -> None:
    source = tmp_path / "report.json"
    source.write_text(json.dumps(sample_payload), encoding="utf-8")
    output = tmp_path / "report.pdf"

    result = runner.invoke(app, ["render", str(source), str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"%PDF")
    assert "pages" in result.output


def test_build_then_retry(tmp_path: Path) -> None:
    source = tmp_path / "report.json"
    source.write_text(json.dumps({"report": {"reportName": "CLI"}}), encoding="utf-8")
    out = tmp_path / "out"

    result = runner.invoke(app, ["build", "--input", str(source), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "Ingested 1 reports" in result.output
    assert "READY: 1" in result.output

    result = runner.invoke(app, ["retry", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "No reports to retry" in result.output
