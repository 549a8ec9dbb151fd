from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .. import blob_store, config

logger = logging.getLogger(__name__)

OVERSIZE_NOTE = "PDF was larger than 9 MB so a signed URL was returned instead of inline bytes."


class StorageError(RuntimeError):
    """An oversized report could not be handed to blob storage."""


@dataclass(frozen=True)
class Delivery:
    filename: str
    pdf_bytes: Optional[bytes] = None
    download_url: Optional[str] = None
    note: Optional[str] = None

    @property
    def inline(self) -> bool:
        return self.pdf_bytes is not None


def report_filename(now_ms: Optional[int] = None) -> str:
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    return f"report_{stamp}.pdf"


def deliver(pdf_bytes: bytes, now_ms: Optional[int] = None) -> Delivery:
    """
    Inline bytes for normal reports. Above ``MAX_INLINE_BYTES`` the PDF is
    uploaded and a time-limited download URL is returned instead.
    """
    filename = report_filename(now_ms)
    if len(pdf_bytes) <= config.MAX_INLINE_BYTES:
        return Delivery(filename=filename, pdf_bytes=pdf_bytes)

    bucket = config.PDF_OUTPUT_BUCKET
    if not bucket:
        raise StorageError("PDF_OUTPUT_BUCKET is not configured")
    key = f"reports/{filename}"
    blob_store.ensure_bucket(bucket)
    if not blob_store.upload_bytes(key, pdf_bytes, "application/pdf", bucket=bucket):
        raise StorageError(f"Upload failed for {key}")
    url = blob_store.presigned_url(key, expires_in=config.PRESIGNED_URL_EXPIRES, bucket=bucket)
    if not url:
        raise StorageError(f"Could not sign {key}")
    logger.info("Report of %d bytes stored at %s", len(pdf_bytes), key)
    return Delivery(filename=filename, download_url=url, note=OVERSIZE_NOTE)
