from __future__ import annotations

from datetime import date

from tasting_report.pipeline.formatting import (
    format_cell,
    format_kpi,
    format_ratio,
    format_report_date,
    strip_html,
)


def test_ratio_renders_one_decimal_percent() -> None:
    assert format_ratio(0.456) == "45.6%"
    assert format_ratio(1) == "100.0%"
    assert format_ratio(0) == "0.0%"


def test_ratio_placeholder_for_non_numbers() -> None:
    assert format_ratio(None) == "-"
    assert format_ratio("0.4") == "-"
    assert format_ratio(True) == "-"


def test_cell_placeholder_and_whole_floats() -> None:
    assert format_cell(None) == "-"
    assert format_cell(3.0) == "3"
    assert format_cell(3.25) == "3.25"
    assert format_cell("Store 9") == "Store 9"
    assert format_cell(0) == "0"


def test_kpi_defaults_to_zero() -> None:
    assert format_kpi(None) == "0"
    assert format_kpi(12) == "12"


def test_report_date_formats() -> None:
    assert format_report_date("3/5/24") == "Mar 5, 2024"
    assert format_report_date("12/31/2025") == "Dec 31, 2025"


def test_report_date_passes_unparseable_through() -> None:
    assert format_report_date("next week") == "next week"
    assert format_report_date("13/40/2024") == "13/40/2024"
    assert format_report_date("2024-03-05") == "2024-03-05"


def test_report_date_defaults_to_today() -> None:
    assert format_report_date(None, today=date(2026, 10, 18)) == "Oct 18, 2026"


def test_strip_html_lists_and_breaks() -> None:
    text = strip_html("<p>Great taste</p><ul><li>sweet</li><li>smooth</li></ul>")
    assert text == "Great taste\n• sweet\n• smooth"


def test_strip_html_entities_and_whitespace() -> None:
    assert strip_html("Fish &amp; chips<br/>  really   good") == "Fish & chips\nreally good"
    assert strip_html(None) == ""
    assert strip_html("<p> </p>") == ""
