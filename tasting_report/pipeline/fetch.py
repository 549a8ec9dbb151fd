from __future__ import annotations

import base64
import binascii
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from http.client import HTTPException
from io import BytesIO
from typing import List, Optional, Sequence
from urllib.error import URLError
from urllib.parse import urlparse
from urllib.request import urlopen

from PIL import Image
from reportlab.lib.utils import ImageReader

from .. import config
from ..schema import ReportInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedImages:
    logo: Optional[ImageReader] = None
    photos: tuple = ()

    def photo(self, index: int) -> Optional[ImageReader]:
        if index < len(self.photos):
            return self.photos[index]
        return None


FETCH_SCHEMES = ("http", "https")


class FetchAborted(Exception):
    pass


def _read_bounded(resp, deadline: float, max_bytes: int) -> bytes:
    """Read in chunks; the deadline covers the whole body, not each socket read."""
    buf = bytearray()
    while True:
        if time.monotonic() > deadline:
            raise FetchAborted("download exceeded the fetch timeout")
        chunk = resp.read(config.FETCH_CHUNK_BYTES)
        if not chunk:
            return bytes(buf)
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise FetchAborted(f"image larger than {max_bytes} bytes")


def fetch_bytes(
    url: Optional[str],
    timeout: float = config.FETCH_TIMEOUT_SECONDS,
    max_bytes: int = config.FETCH_MAX_BYTES,
) -> Optional[bytes]:
    """
    Download an image reference. ``data:`` URIs are decoded in place and only
    http(s) urls go over the network. Any failure (timeout, non-2xx, oversized
    or bad payload, other scheme) returns None.
    """
    if not url:
        return None
    if url.startswith("data:"):
        _, _, payload = url.partition(",")
        try:
            return base64.b64decode(payload)
        except (binascii.Error, ValueError):
            logger.warning("Invalid data URI image")
            return None
    if urlparse(url).scheme.lower() not in FETCH_SCHEMES:
        logger.warning("Image url scheme not allowed: %s", url)
        return None
    deadline = time.monotonic() + timeout
    try:
        with urlopen(url, timeout=timeout) as resp:
            return _read_bounded(resp, deadline, max_bytes)
    except (URLError, HTTPException, OSError, ValueError, FetchAborted) as exc:
        logger.warning("Image fetch failed for %s: %s", url, exc)
        return None


def decode_image(data: Optional[bytes]) -> Optional[ImageReader]:
    """Fully decode ``data`` so a truncated payload is dropped here and not at draw time."""
    if not data:
        return None
    try:
        image = Image.open(BytesIO(data))
        image.load()
        reader = ImageReader(image)
    except Exception as exc:
        logger.warning("Image decode failed: %s", exc)
        return None
    return reader


def _load(url: Optional[str]) -> Optional[ImageReader]:
    return decode_image(fetch_bytes(url))


def resolve_all(urls: Sequence[Optional[str]], max_workers: int = config.FETCH_MAX_WORKERS) -> List[Optional[ImageReader]]:
    """Resolve every url concurrently; the result list keeps input order."""
    wanted = [u for u in urls if u]
    if not wanted:
        return [None] * len(urls)
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(wanted)))) as pool:
        futures = [pool.submit(_load, u) if u else None for u in urls]
        return [f.result() if f is not None else None for f in futures]


def resolve_images(report: ReportInput) -> ResolvedImages:
    results = resolve_all(report.image_urls())
    return ResolvedImages(logo=results[0], photos=tuple(results[1:]))
