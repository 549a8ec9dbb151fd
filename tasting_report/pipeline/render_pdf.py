from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from reportlab.pdfgen import canvas

from .. import config
from ..schema import ReportInput
from .fetch import ResolvedImages, resolve_images
from .formatting import strip_html
from .layout import LayoutContext, Placement
from .sections import (
    CALLOUT_SPACE,
    DETAIL_COLUMNS,
    DETAIL_STYLE,
    KPI_GRID,
    PHOTO_GRID,
    SUMMARY_COLUMNS,
    SUMMARY_STYLE,
    draw_callouts,
    draw_grid,
    draw_heading,
    draw_table,
    furniture_painter,
    kpi_cards,
    paint_kpi_card,
    paint_photo,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    kind: str
    items: Sequence[Any]
    render: Callable[[LayoutContext, Sequence[Any]], None]
    optional: bool = True


@dataclass(frozen=True)
class RenderedReport:
    pdf_bytes: bytes
    page_count: int
    placements: Tuple[Placement, ...]


def _render_kpis(ctx: LayoutContext, cards: Sequence[Any]) -> None:
    draw_grid(ctx, "kpis", KPI_GRID, cards, paint_kpi_card)


def _render_summary(ctx: LayoutContext, rows: Sequence[Any]) -> None:
    draw_heading(ctx, "summary", "Executive Summary", lead_space=100, drop=15)
    draw_table(ctx, "summary", SUMMARY_COLUMNS, rows, SUMMARY_STYLE)


def _render_feedback(ctx: LayoutContext, texts: Sequence[Any]) -> None:
    draw_heading(ctx, "feedback", "Consumer Feedback", lead_space=CALLOUT_SPACE + 10, drop=14)
    draw_callouts(ctx, "feedback", texts)


def _render_photos(ctx: LayoutContext, images: Sequence[Any]) -> None:
    draw_heading(ctx, "photos", "Photo Gallery", lead_space=PHOTO_GRID.row_height + 20, drop=14)
    draw_grid(ctx, "photos", PHOTO_GRID, images, paint_photo)


def _render_details(ctx: LayoutContext, rows: Sequence[Any]) -> None:
    draw_heading(ctx, "details", "Detailed Results", lead_space=100, drop=14)
    draw_table(ctx, "details", DETAIL_COLUMNS, rows, DETAIL_STYLE)


def build_sections(report: ReportInput, images: ResolvedImages) -> List[Section]:
    """Content sections in page order; the furniture band is painted by the layout context."""
    feedback = tuple(t for t in (strip_html(f.text) for f in report.feedback) if t)
    photos = tuple(images.photo(i) for i in range(len(report.photos)))
    return [
        Section("kpis", kpi_cards(report.meta), _render_kpis, optional=False),
        Section("summary", report.summary, _render_summary, optional=False),
        Section("feedback", feedback, _render_feedback),
        Section("photos", photos, _render_photos),
        Section("details", report.details, _render_details),
    ]


def layout_report(
    canv: canvas.Canvas,
    report: ReportInput,
    images: ResolvedImages,
    today: Optional[date] = None,
) -> LayoutContext:
    ctx = LayoutContext(
        canv,
        furniture=furniture_painter(report.meta, images.logo, today=today),
        first_top=config.FIRST_PAGE_TOP,
    )
    for section in build_sections(report, images):
        if section.optional and not section.items:
            logger.debug("Skipping empty section %s", section.kind)
            continue
        logger.debug("Drawing section %s at page %d y=%.1f", section.kind, ctx.page, ctx.y)
        section.render(ctx, section.items)
        ctx.skip(config.SECTION_GAP)
    return ctx


def render_report(
    report: ReportInput,
    images: Optional[ResolvedImages] = None,
    today: Optional[date] = None,
) -> RenderedReport:
    if images is None:
        images = resolve_images(report)

    buffer = BytesIO()
    canv = canvas.Canvas(buffer, pagesize=config.PAGE_SIZE, invariant=1)
    canv.setTitle(str(report.meta.name or config.DEFAULT_REPORT_NAME))

    ctx = layout_report(canv, report, images, today=today)
    canv.save()

    pdf_bytes = buffer.getvalue()
    logger.info("Rendered report: %d pages, %d bytes", ctx.page, len(pdf_bytes))
    return RenderedReport(pdf_bytes=pdf_bytes, page_count=ctx.page, placements=tuple(ctx.placements))


def render_pdf(report: ReportInput, output_path: Path, images: Optional[ResolvedImages] = None) -> RenderedReport:
    rendered = render_report(report, images=images)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(rendered.pdf_bytes)
    return rendered
