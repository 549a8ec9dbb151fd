from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .pipeline.deliver import deliver
from .pipeline.render_pdf import render_report
from .schema import ReportInput

logger = logging.getLogger(__name__)

app = FastAPI(title="Tasting Report PDF", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/generateReportPdf")
def generate_report_pdf(payload: Optional[Dict[str, Any]] = Body(default=None)) -> Response:
    if not payload:
        return PlainTextResponse("Missing reportJsonParam", status_code=400)
    try:
        rendered = render_report(ReportInput.from_dict(payload))
        delivery = deliver(rendered.pdf_bytes)
    except Exception:
        logger.exception("PDF generation error")
        return PlainTextResponse("Error generating PDF", status_code=500)

    if not delivery.inline:
        return JSONResponse({"downloadUrl": delivery.download_url, "note": delivery.note})
    return Response(
        content=delivery.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={delivery.filename}"},
    )
