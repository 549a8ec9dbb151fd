from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


def _dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _date_text(value: Any) -> Optional[str]:
    # dates arrive as {"date": "M/D/YY"}; accept a bare string too
    if isinstance(value, dict):
        value = value.get("date")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ReportMeta:
    name: Optional[str] = None
    client: Optional[str] = None
    report_date: Optional[str] = None
    logo_url: Optional[str] = None
    total_tastings: Any = None
    total_sampled: Any = None
    total_sold: Any = None
    average_sampled: Any = None
    average_sold: Any = None
    conversion: Any = None

    @classmethod
    def from_dict(cls, raw: Any) -> "ReportMeta":
        raw = _dict(raw)
        clients = _list(raw.get("client"))
        client = _dict(clients[0]).get("identifier") if clients else None
        return cls(
            name=raw.get("reportName"),
            client=client,
            report_date=_date_text(raw.get("reportDate")),
            logo_url=raw.get("logoUrl") or None,
            total_tastings=raw.get("count"),
            total_sampled=raw.get("sampledAuto"),
            total_sold=raw.get("totalSalesAuto"),
            average_sampled=raw.get("averageSampled"),
            average_sold=raw.get("averageSales"),
            conversion=raw.get("conversion"),
        )


@dataclass(frozen=True)
class SummaryRow:
    name: Any = None
    tastings: Any = None
    total_sampled: Any = None
    average_sampled: Any = None
    total_sold: Any = None
    average_sold: Any = None
    conversion: Any = None

    @classmethod
    def from_dict(cls, raw: Any) -> "SummaryRow":
        raw = _dict(raw)
        return cls(
            name=raw.get("conditionalName"),
            tastings=raw.get("tastingsCount"),
            total_sampled=raw.get("totalSampled"),
            average_sampled=raw.get("averageSampled"),
            total_sold=raw.get("totalSold"),
            average_sold=raw.get("averageSold"),
            conversion=raw.get("conversionPercent"),
        )


@dataclass(frozen=True)
class FeedbackItem:
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "FeedbackItem":
        text = _dict(raw).get("comment")
        return cls(text=str(text) if text else None)


@dataclass(frozen=True)
class PhotoItem:
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "PhotoItem":
        url = _dict(_dict(raw).get("image")).get("url")
        return cls(url=str(url) if url else None)


@dataclass(frozen=True)
class DetailRow:
    tasting_number: Any = None
    store: Any = None
    scheduled_date: Optional[str] = None
    scheduled_time: Any = None
    city: Any = None
    sampled: Any = None
    sold: Any = None
    conversion: Any = None

    @classmethod
    def from_dict(cls, raw: Any) -> "DetailRow":
        raw = _dict(raw)
        return cls(
            tasting_number=raw.get("tastingNumber"),
            store=raw.get("store"),
            scheduled_date=_date_text(raw.get("scheduledDate")),
            scheduled_time=raw.get("scheduledTime"),
            city=raw.get("city"),
            sampled=raw.get("totalConsumersSampledR"),
            sold=raw.get("totalSales"),
            conversion=raw.get("conversion"),
        )


@dataclass(frozen=True)
class ReportInput:
    meta: ReportMeta = field(default_factory=ReportMeta)
    summary: Tuple[SummaryRow, ...] = ()
    feedback: Tuple[FeedbackItem, ...] = ()
    photos: Tuple[PhotoItem, ...] = ()
    details: Tuple[DetailRow, ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> "ReportInput":
        """
        Parse a report document, unwrapping the ``reportJsonParam`` envelope
        when present. Absent or malformed lists are treated as empty.
        """
        raw = _dict(raw)
        if isinstance(raw.get("reportJsonParam"), dict):
            raw = raw["reportJsonParam"]
        return cls(
            meta=ReportMeta.from_dict(raw.get("report")),
            summary=tuple(SummaryRow.from_dict(r) for r in _list(raw.get("executiveSummary"))),
            feedback=tuple(FeedbackItem.from_dict(c) for c in _list(raw.get("comments"))),
            photos=tuple(PhotoItem.from_dict(p) for p in _list(raw.get("photos"))),
            details=tuple(DetailRow.from_dict(t) for t in _list(raw.get("tastings"))),
        )

    def image_urls(self) -> List[Optional[str]]:
        """Logo first, then photos in input order."""
        return [self.meta.logo_url] + [p.url for p in self.photos]
