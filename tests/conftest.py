from __future__ import annotations

from io import BytesIO

import pytest
from reportlab.pdfgen import canvas

from tasting_report import config


@pytest.fixture
def blank_canvas() -> canvas.Canvas:
    return canvas.Canvas(BytesIO(), pagesize=config.PAGE_SIZE, invariant=1)


@pytest.fixture
def sample_payload() -> dict:
    return {
        "reportJsonParam": {
            "report": {
                "reportName": "Spring Tastings",
                "client": [{"identifier": "Acme Wines"}],
                "reportDate": {"date": "4/9/25"},
                "count": 12,
                "sampledAuto": 480,
                "totalSalesAuto": 96,
                "averageSampled": 40,
                "averageSales": 8,
                "conversion": 20,
            },
            "executiveSummary": [
                {
                    "conditionalName": "North",
                    "tastingsCount": 6,
                    "totalSampled": 250,
                    "averageSampled": 41.5,
                    "totalSold": 50,
                    "averageSold": 8.3,
                    "conversionPercent": 0.2,
                },
                {"conditionalName": "South", "tastingsCount": 6},
            ],
            "comments": [
                {"comment": "<p>Loved the <b>rosé</b></p><ul><li>crisp</li><li>fruity</li></ul>"},
                {"comment": ""},
                {},
            ],
            "tastings": [
                {
                    "tastingNumber": i,
                    "store": f"Store {i}",
                    "scheduledDate": {"date": "4/1/2025"},
                    "scheduledTime": "10:00",
                    "city": "Portland",
                    "totalConsumersSampledR": 40,
                    "totalSales": 8,
                    "conversion": 0.2,
                }
                for i in range(1, 6)
            ],
        }
    }
