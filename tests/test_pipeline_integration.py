from __future__ import annotations

import json
import tempfile
from pathlib import Path

import fitz  # PyMuPDF

from tasting_report import config
from tasting_report.models import ReportRun, RunStatus, get_session, reset_engine
from tasting_report.pipeline import run as run_mod
from tasting_report.pipeline.deliver import Delivery
from tasting_report.pipeline.ingest import ingest_reports, list_runs
from tasting_report.pipeline.run import run_pipeline


def _write(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_pipeline_outputs_expected_artifacts(sample_payload) -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        first = _write(Path(temp_dir) / "a.json", sample_payload)
        second = _write(Path(temp_dir) / "b.json", {"report": {"reportName": "Spring Tastings"}})

        runs = ingest_reports([first, second])
        assert len({r.slug for r in runs}) == 2
        assert all(r.slug.startswith("spring-tastings-") for r in runs)

        results = run_pipeline(runs)
        assert len(results["READY"]) == 2
        for slug in results["READY"]:
            run_dir = out_dir / slug
            assert (run_dir / "report.pdf").exists()
            assert (run_dir / "preview_1.png").exists()
            assert not (run_dir / "download.json").exists()
            assert not (out_dir / f"{slug}.tmp").exists()

        with get_session() as session:
            stored = session.get(ReportRun, runs[0].id)
        assert stored.status == RunStatus.READY
        assert stored.page_count >= 1
        assert stored.byte_size == (out_dir / runs[0].slug / "report.pdf").stat().st_size
        with fitz.open(str(out_dir / runs[0].slug / "report.pdf")) as doc:
            assert doc.page_count == stored.page_count


def test_missing_input_marks_run_failed() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        source = _write(Path(temp_dir) / "gone.json", {"report": {"reportName": "Gone"}})
        runs = ingest_reports([source])
        source.unlink()

        results = run_pipeline(runs)
        assert results["FAILED"] == [runs[0].slug]
        assert (out_dir / runs[0].slug / "error.log").exists()
        assert not (out_dir / runs[0].slug / "report.pdf").exists()

        failed = list_runs([RunStatus.FAILED])
        assert [r.fail_code for r in failed] == ["INPUT_MISSING"]


def test_render_error_leaves_no_partial_pdf(monkeypatch) -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        source = _write(Path(temp_dir) / "r.json", {"report": {"reportName": "Broken"}})
        runs = ingest_reports([source])

        def boom(pdf_bytes):
            raise RuntimeError("serialization failed")

        monkeypatch.setattr(run_mod, "deliver", boom)
        results = run_pipeline(runs)
        slug = runs[0].slug
        assert results["FAILED"] == [slug]
        assert not (out_dir / slug / "report.pdf").exists()
        assert not (out_dir / f"{slug}.tmp").exists()
        assert list_runs([RunStatus.FAILED])[0].fail_code == "RENDER_FAILED"


def test_oversized_run_records_download_link(monkeypatch) -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        source = _write(Path(temp_dir) / "big.json", {"report": {"reportName": "Big"}})
        runs = ingest_reports([source])

        monkeypatch.setattr(
            run_mod,
            "deliver",
            lambda pdf_bytes: Delivery(filename="report_1.pdf", download_url="https://s3.example/r.pdf", note="big"),
        )
        results = run_pipeline(runs)
        slug = results["READY"][0]
        link = json.loads((out_dir / slug / "download.json").read_text(encoding="utf-8"))
        assert link["downloadUrl"] == "https://s3.example/r.pdf"
        assert list_runs([RunStatus.READY])[0].download_url == "https://s3.example/r.pdf"
