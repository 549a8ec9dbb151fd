from __future__ import annotations

import hashlib
import json
import re
from pathlib import Path
from typing import Iterable, List

from slugify import slugify

from sqlmodel import select

from .. import config
from ..models import ReportRun, RunStatus, get_session, init_db
from ..schema import ReportInput


def load_document(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Report JSON not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid report JSON in {path}: {exc}") from exc
    if not isinstance(raw, dict) or not raw:
        raise ValueError(f"Report JSON must be a non-empty object: {path}")
    return raw


def load_report(path: Path) -> ReportInput:
    return ReportInput.from_dict(load_document(path))


def slug_from_title(title: str, salt: str = "") -> str:
    slug = slugify(title)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        slug = "report"
    if salt:
        slug = f"{slug}-{hashlib.md5(salt.encode('utf-8')).hexdigest()[:8]}"
    if ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated from title")
    return slug


def ingest_reports(paths: Iterable[Path]) -> List[ReportRun]:
    init_db()
    runs: List[ReportRun] = []
    seen = set()
    for path in paths:
        path = Path(path).resolve()
        if path in seen:
            raise ValueError(f"Duplicate report input: {path}")
        seen.add(path)
        document = load_document(path)
        report = ReportInput.from_dict(document)
        title = str(report.meta.name or config.DEFAULT_REPORT_NAME)
        digest = json.dumps(document, sort_keys=True, default=str)
        runs.append(
            ReportRun(
                source=str(path),
                slug=slug_from_title(title, salt=digest),
                title=title,
                status=RunStatus.DRAFT,
            )
        )
    with get_session() as session:
        session.add_all(runs)
        session.commit()
        for run in runs:
            session.refresh(run)
    return runs


def list_runs(statuses: Iterable[RunStatus]) -> List[ReportRun]:
    init_db()
    with get_session() as session:
        statement = select(ReportRun)
        if statuses:
            statement = statement.where(ReportRun.status.in_(list(statuses)))
        return list(session.exec(statement))
