"""Display formatting for report cells, dates and feedback text."""
from __future__ import annotations

import html
import re
from datetime import date
from typing import Any, Optional

from ..config import PLACEHOLDER


def format_cell(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_ratio(value: Any) -> str:
    """0.456 -> '45.6%'. Anything that is not a number renders the placeholder."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return PLACEHOLDER
    return f"{value * 100:.1f}%"


def format_kpi(value: Any) -> str:
    return format_cell(0 if value is None else value)


def _human_date(d: date) -> str:
    return f"{d:%b} {d.day}, {d.year}"


def format_report_date(text: Optional[str], today: Optional[date] = None) -> str:
    """
    'M/D/YY' or 'M/D/YYYY' -> 'Mon D, YYYY'. Absent input falls back to today;
    anything unparseable is passed through untouched.
    """
    if not text:
        return _human_date(today or date.today())
    parts = text.split("/")
    if len(parts) < 3:
        return text
    try:
        month, day, year = (int(p) for p in parts[:3])
        if year < 100:
            year += 2000
        return _human_date(date(year, month, day))
    except ValueError:
        return text


def strip_html(markup: Optional[str]) -> str:
    if not markup:
        return ""
    text = re.sub(r"<br\s*/?>", "\n", markup, flags=re.I)
    text = re.sub(r"<p[^>]*>", "\n\n", text, flags=re.I)
    text = re.sub(r"</ul>", "\n", text, flags=re.I)
    text = re.sub(r"<li[^>]*>", "\n• ", text, flags=re.I)
    text = re.sub(r"<[^>]*>", "", text)
    text = html.unescape(text)
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{2,}", "\n", text)
    return text.strip()
