from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import config
from .models import RunStatus, reset_engine
from .pipeline.ingest import ingest_reports, list_runs, load_report
from .pipeline.render_pdf import render_pdf
from .pipeline.run import run_pipeline

app = typer.Typer(help="Tasting report PDF renderer")


def _use_out_dir(out: Optional[Path]) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def build(
    inputs: Optional[List[Path]] = typer.Option(None, "--input", "-i", help="Report JSON file (repeatable)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
) -> None:
    _use_out_dir(out)
    if inputs:
        runs = ingest_reports(inputs)
        typer.echo(f"Ingested {len(runs)} reports")
    runs = list_runs([RunStatus.DRAFT])
    if not runs:
        typer.echo("No reports to render")
        return
    results = run_pipeline(runs)
    typer.echo(f"READY: {len(results['READY'])}")
    typer.echo(f"FAILED: {len(results['FAILED'])}")
    for slug in results["FAILED"]:
        typer.echo(f"FAILED: {slug}")


@app.command()
def retry(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
) -> None:
    _use_out_dir(out)
    runs = list_runs([RunStatus.FAILED])
    if not runs:
        typer.echo("No reports to retry")
        return
    results = run_pipeline(runs)
    typer.echo(f"READY: {len(results['READY'])}")
    typer.echo(f"FAILED: {len(results['FAILED'])}")


@app.command()
def render(
    source: Path = typer.Argument(..., help="Report JSON file"),
    output: Path = typer.Argument(..., help="PDF path to write"),
) -> None:
    rendered = render_pdf(load_report(source), output)
    typer.echo(f"{output}: {rendered.page_count} pages")


if __name__ == "__main__":
    app()
