from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Optional, Sequence, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .. import config
from ..config import COLORS, FONT_BOLD, FONT_REGULAR, MARGIN_X
from ..schema import DetailRow, ReportMeta
from .formatting import format_cell, format_kpi, format_ratio, format_report_date
from .layout import LayoutContext


# -------------------- Furniture --------------------

def draw_furniture(
    canv: canvas.Canvas,
    title: str,
    client: str,
    date_text: str,
    logo: Optional[ImageReader] = None,
) -> None:
    pw, ph = config.PAGE_WIDTH, config.PAGE_HEIGHT
    band_h = config.FURNITURE_HEIGHT

    canv.setFillColor(COLORS["orange"])
    canv.rect(0, ph - band_h, pw, band_h, stroke=0, fill=1)

    canv.setFillColor(COLORS["white"])
    canv.setFont(FONT_BOLD, 26)
    canv.drawString(MARGIN_X, ph - 45, title)
    canv.setFont(FONT_REGULAR, 14)
    canv.drawString(MARGIN_X, ph - 65, f"Prepared for: {client}")
    canv.setFont(FONT_REGULAR, 12)
    canv.drawString(MARGIN_X, ph - 82, f"Date: {date_text}")

    if logo is not None:
        canv.drawImage(logo, pw - 120, ph - 85, width=80, height=70, preserveAspectRatio=True, mask="auto")


def furniture_painter(
    meta: ReportMeta,
    logo: Optional[ImageReader] = None,
    today: Optional[date] = None,
) -> Callable[[canvas.Canvas], None]:
    title = str(meta.name or config.DEFAULT_REPORT_NAME)
    client = str(meta.client or config.DEFAULT_CLIENT)
    date_text = format_report_date(meta.report_date, today=today)

    def paint(canv: canvas.Canvas) -> None:
        draw_furniture(canv, title, client, date_text, logo)

    return paint


def draw_heading(ctx: LayoutContext, section: str, text: str, lead_space: float, drop: float) -> None:
    """Section title; ``lead_space`` keeps the title from being orphaned at a page bottom."""
    ctx.ensure_space(lead_space)
    canv = ctx.canv
    canv.setFillColor(COLORS["black"])
    canv.setFont(FONT_BOLD, 12)
    canv.drawString(MARGIN_X, ctx.y, text)
    ctx.place(f"{section}:title", drop)
    ctx.advance(drop)


# -------------------- Grid --------------------

@dataclass(frozen=True)
class GridSpec:
    columns: int
    cell_width: float
    cell_height: float
    h_gap: float = 10.0
    v_gap: float = 10.0

    @property
    def row_height(self) -> float:
        return self.cell_height + self.v_gap


CellPainter = Callable[[canvas.Canvas, Any, float, float, float, float], None]


def grid_rows(items: Sequence[Any], columns: int) -> List[Sequence[Any]]:
    return [items[i:i + columns] for i in range(0, len(items), columns)]


def draw_grid(ctx: LayoutContext, section: str, spec: GridSpec, items: Sequence[Any], paint: CellPainter) -> None:
    """
    Left-to-right grid wrapping after ``spec.columns`` items. Room for a whole
    row is checked before each row, so a row never straddles two pages.
    """
    for row in grid_rows(items, spec.columns):
        ctx.ensure_space(spec.row_height)
        top = ctx.y
        for col, item in enumerate(row):
            x = MARGIN_X + col * (spec.cell_width + spec.h_gap)
            paint(ctx.canv, item, x, top - spec.cell_height, spec.cell_width, spec.cell_height)
        ctx.place(section, spec.row_height)
        ctx.advance(spec.row_height)


KPI_GRID = GridSpec(
    columns=3,
    cell_width=(config.PAGE_WIDTH - 2 * MARGIN_X - 2 * 10.0) / 3,
    cell_height=55.0,
)

PHOTO_GRID = GridSpec(columns=4, cell_width=90.0, cell_height=90.0)


def kpi_cards(meta: ReportMeta) -> Tuple[Tuple[str, str], ...]:
    return (
        ("Total Tastings", format_kpi(meta.total_tastings)),
        ("Total Sampled", format_kpi(meta.total_sampled)),
        ("Total Sold", format_kpi(meta.total_sold)),
        ("Avg Sampled", format_kpi(meta.average_sampled)),
        ("Avg Sold", format_kpi(meta.average_sold)),
        ("Conversion Rate", f"{format_kpi(meta.conversion)}%"),
    )


def paint_kpi_card(canv: canvas.Canvas, card: Tuple[str, str], x: float, y: float, w: float, h: float) -> None:
    label, value = card
    canv.setFillColor(COLORS["light_grey"])
    canv.setStrokeColor(COLORS["card_border"])
    canv.setLineWidth(0.5)
    canv.rect(x, y, w, h, stroke=1, fill=1)

    canv.setFillColor(COLORS["grey"])
    canv.setFont(FONT_REGULAR, 8)
    canv.drawString(x + 8, y + h - 20, label)
    canv.setFillColor(COLORS["black"])
    canv.setFont(FONT_BOLD, 16)
    canv.drawString(x + 8, y + h - 38, value)


def paint_photo(canv: canvas.Canvas, image: Optional[ImageReader], x: float, y: float, w: float, h: float) -> None:
    # unresolved images keep their cell empty
    if image is None:
        return
    canv.drawImage(image, x, y, width=w, height=h, mask="auto")


# -------------------- Tables --------------------

@dataclass(frozen=True)
class Column:
    label: str
    width: float
    value: Callable[[Any], Any]
    formatter: Callable[[Any], str] = format_cell


@dataclass(frozen=True)
class TableStyle:
    header_height: float
    row_height: float
    header_font_size: float
    font_size: float


def _draw_header_row(ctx: LayoutContext, section: str, columns: Sequence[Column], style: TableStyle) -> None:
    canv = ctx.canv
    ctx.ensure_space(style.header_height)
    top = ctx.y
    x = MARGIN_X
    for col in columns:
        canv.setFillColor(COLORS["light_grey"])
        canv.rect(x, top - style.header_height, col.width, style.header_height, stroke=0, fill=1)
        canv.setFillColor(COLORS["black"])
        canv.setFont(FONT_BOLD, style.header_font_size)
        canv.drawString(x + 2, top - style.header_height + 5, col.label)
        x += col.width
    ctx.place(f"{section}:header", style.header_height)
    ctx.advance(style.header_height)


def draw_table_rows(
    ctx: LayoutContext,
    section: str,
    columns: Sequence[Column],
    records: Sequence[Any],
    style: TableStyle,
) -> None:
    canv = ctx.canv
    for record in records:
        ctx.ensure_space(style.row_height)
        baseline = ctx.y - style.row_height + 2
        canv.setFillColor(COLORS["black"])
        canv.setFont(FONT_REGULAR, style.font_size)
        x = MARGIN_X
        for col in columns:
            canv.drawString(x + 2, baseline, col.formatter(col.value(record)))
            x += col.width
        ctx.place(section, style.row_height)
        ctx.advance(style.row_height)


def draw_table(
    ctx: LayoutContext,
    section: str,
    columns: Sequence[Column],
    records: Sequence[Any],
    style: TableStyle,
) -> None:
    """Header row once, then one row per record. The header is not repeated after a page break."""
    _draw_header_row(ctx, section, columns, style)
    draw_table_rows(ctx, section, columns, records, style)


SUMMARY_STYLE = TableStyle(header_height=16.0, row_height=14.0, header_font_size=7, font_size=7)
DETAIL_STYLE = TableStyle(header_height=14.0, row_height=12.0, header_font_size=6, font_size=6)

SUMMARY_COLUMNS: Tuple[Column, ...] = (
    Column("Brand/Region", 150, lambda r: r.name),
    Column("#Tastings", 60, lambda r: r.tastings),
    Column("Total Samp.", 70, lambda r: r.total_sampled),
    Column("Avg Samp.", 70, lambda r: r.average_sampled),
    Column("Total Sold", 60, lambda r: r.total_sold),
    Column("Avg Sold", 60, lambda r: r.average_sold),
    Column("Conv.%", 60, lambda r: r.conversion, format_ratio),
)


def _scheduled_date(row: DetailRow) -> str:
    return format_report_date(row.scheduled_date) if row.scheduled_date else config.PLACEHOLDER


DETAIL_COLUMNS: Tuple[Column, ...] = (
    Column("#", 20, lambda r: r.tasting_number),
    Column("Store", 100, lambda r: r.store),
    Column("Date", 60, _scheduled_date, str),
    Column("Time", 40, lambda r: r.scheduled_time),
    Column("City", 80, lambda r: r.city),
    Column("Sampled", 50, lambda r: r.sampled),
    Column("Sold", 40, lambda r: r.sold),
    Column("Conv.%", 40, lambda r: r.conversion, format_ratio),
)


# -------------------- Callouts --------------------

CALLOUT_HEIGHT = 40.0
CALLOUT_PITCH = 45.0
CALLOUT_SPACE = 50.0


def wrap_text(canv: canvas.Canvas, text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    """Word wrap that keeps explicit newlines as line breaks."""
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        words = paragraph.split()
        if not words:
            continue
        cur: List[str] = []
        for w in words:
            test = " ".join(cur + [w])
            if canv.stringWidth(test, font_name, font_size) <= max_width:
                cur.append(w)
                continue
            if cur:
                lines.append(" ".join(cur))
                cur = [w]
            else:
                # a single word wider than the box goes on its own line
                lines.append(w)
        if cur:
            lines.append(" ".join(cur))
    return lines


def draw_callouts(ctx: LayoutContext, section: str, texts: Sequence[str]) -> None:
    """
    One fixed-height box per text. Each box is space-checked on its own and
    overflowing text is clipped to the box.
    """
    canv = ctx.canv
    box_w = ctx.page_width - 2 * MARGIN_X
    text_w = ctx.page_width - 92
    for text in texts:
        if not text:
            continue
        ctx.ensure_space(CALLOUT_SPACE)
        top = ctx.y
        bottom = top - CALLOUT_HEIGHT

        canv.setFillColor(COLORS["callout_fill"])
        canv.setStrokeColor(COLORS["orange2"])
        canv.setLineWidth(1)
        canv.rect(MARGIN_X, bottom, box_w, CALLOUT_HEIGHT, stroke=1, fill=1)

        canv.saveState()
        clip = canv.beginPath()
        clip.rect(MARGIN_X, bottom, box_w, CALLOUT_HEIGHT)
        canv.clipPath(clip, stroke=0, fill=0)
        canv.setFillColor(COLORS["black"])
        canv.setFont(FONT_REGULAR, 8)
        yy = top - 20
        for line in wrap_text(canv, text, FONT_REGULAR, 8, text_w):
            if yy < bottom - 10:
                break
            canv.drawString(MARGIN_X + 6, yy, line)
            yy -= 10
        canv.restoreState()

        ctx.place(section, CALLOUT_PITCH)
        ctx.advance(CALLOUT_PITCH)
