from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import json
import logging
import shutil
from typing import Iterable, List, Optional

from .. import config
from ..models import ReportRun, RunStatus, get_session, init_db
from ..storage import artifact_path, record_artifacts
from .deliver import deliver
from .ingest import load_report
from .render_pdf import render_report
from .render_preview import render_preview


logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    status: RunStatus
    artifacts: List[tuple[str, Path]]
    page_count: Optional[int] = None
    byte_size: Optional[int] = None
    download_url: Optional[str] = None


def _write_error(slug: str, message: str) -> None:
    error_path = artifact_path(slug, "error", base_dir=config.OUT_DIR)
    error_path.write_text(message, encoding="utf-8")


def _prepare_temp_dir(slug: str) -> Path:
    temp_dir = config.OUT_DIR / f"{slug}.tmp"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def _finalize_artifacts(
    temp_dir: Path,
    final_dir: Path,
    artifacts: List[tuple[str, Path]],
) -> List[tuple[str, Path]]:
    if final_dir.exists():
        shutil.rmtree(final_dir)
    temp_dir.replace(final_dir)
    finalized: List[tuple[str, Path]] = []
    for artifact_type, path in artifacts:
        finalized.append((artifact_type, final_dir / path.relative_to(temp_dir)))
    return finalized


def process_run(run: ReportRun) -> RunOutcome:
    """
    Render one report into a temp dir and move it into place only once every
    artifact exists, so a failed run never leaves a partial PDF behind.
    """
    report = load_report(Path(run.source))
    temp_dir = _prepare_temp_dir(run.slug)
    try:
        rendered = render_report(report)
        delivery = deliver(rendered.pdf_bytes)

        artifacts: List[tuple[str, Path]] = []
        pdf_path = artifact_path(run.slug, "pdf", base_dir=temp_dir, include_slug=False)
        pdf_path.write_bytes(rendered.pdf_bytes)
        artifacts.append(("pdf", pdf_path))
        artifacts.append(("preview", render_preview(run.slug, pdf_path, base_dir=temp_dir, include_slug=False)))

        if not delivery.inline:
            link_path = artifact_path(run.slug, "link", base_dir=temp_dir, include_slug=False)
            link_path.write_text(
                json.dumps({"downloadUrl": delivery.download_url, "note": delivery.note}, indent=2),
                encoding="utf-8",
            )
            artifacts.append(("link", link_path))
    except Exception:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    final_dir = config.OUT_DIR / run.slug
    artifacts = _finalize_artifacts(temp_dir, final_dir, artifacts)
    return RunOutcome(
        status=RunStatus.READY,
        artifacts=artifacts,
        page_count=rendered.page_count,
        byte_size=len(rendered.pdf_bytes),
        download_url=delivery.download_url,
    )


def run_pipeline(runs: Iterable[ReportRun]) -> dict[str, list[str]]:
    init_db()
    results: dict[str, list[str]] = {"READY": [], "FAILED": []}
    with get_session() as session:
        for run in runs:
            try:
                outcome = process_run(run)
                error = None
            except FileNotFoundError as exc:
                logger.error("Missing input for %s: %s", run.slug, exc)
                outcome = RunOutcome(status=RunStatus.FAILED, artifacts=[])
                error = ("INPUT_MISSING", str(exc))
            except Exception as exc:
                logger.exception("Pipeline error for %s", run.slug)
                outcome = RunOutcome(status=RunStatus.FAILED, artifacts=[])
                error = ("RENDER_FAILED", str(exc) or exc.__class__.__name__)

            run.status = outcome.status
            run.page_count = outcome.page_count
            run.byte_size = outcome.byte_size
            run.download_url = outcome.download_url
            run.fail_code, run.fail_detail = error if error else (None, None)
            session.add(run)
            session.commit()
            session.refresh(run)

            if outcome.status == RunStatus.READY:
                record_artifacts(run, outcome.artifacts)
                results["READY"].append(run.slug)
            else:
                _write_error(run.slug, run.fail_detail or "Unknown error")
                results["FAILED"].append(run.slug)
    return results
