from __future__ import annotations

import os
from pathlib import Path

from reportlab.lib import colors


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = Path(os.environ.get("TASTING_REPORT_OUT", str(BASE_DIR / "out")))
DB_PATH = OUT_DIR / "reports.db"

# Fixed landscape canvas
PAGE_SIZE = (842.0, 595.0)
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE

MARGIN_X = 40.0
BOTTOM_MARGIN = 60.0
FURNITURE_HEIGHT = 90.0
FIRST_PAGE_TOP = PAGE_HEIGHT - 130.0
SECTION_GAP = 20.0

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

PLACEHOLDER = "-"
DEFAULT_REPORT_NAME = "Tasting Report"
DEFAULT_CLIENT = "Client"

COLORS = {
    "orange": colors.Color(0.96, 0.51, 0.12),
    "orange2": colors.Color(0.9, 0.62, 0.35),
    "white": colors.white,
    "black": colors.black,
    "grey": colors.Color(0.35, 0.35, 0.35),
    "light_grey": colors.Color(0.9, 0.9, 0.9),
    "card_border": colors.Color(0.8, 0.8, 0.8),
    "callout_fill": colors.Color(0.96, 0.96, 0.96),
}

FETCH_TIMEOUT_SECONDS = 15.0
FETCH_MAX_WORKERS = 8
FETCH_MAX_BYTES = 20_000_000
FETCH_CHUNK_BYTES = 64 * 1024

# Responses above this size go to blob storage instead of inline bytes
MAX_INLINE_BYTES = 9_000_000
PRESIGNED_URL_EXPIRES = 60 * 60

PDF_OUTPUT_BUCKET = os.environ.get("PDF_OUTPUT_BUCKET", "")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "reports.db"
