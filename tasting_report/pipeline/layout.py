from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from reportlab.pdfgen import canvas

from .. import config

logger = logging.getLogger(__name__)

FURNITURE = "furniture"


class LayoutError(RuntimeError):
    """A draw was attempted without the vertical room it needs."""


@dataclass(frozen=True)
class Placement:
    section: str
    page: int
    top: float
    height: float


class LayoutContext:
    """
    Page + cursor state for one forward-only layout pass.

    ``y`` is the vertical write position in canvas units (origin bottom-left).
    It only moves down while a page is active and is reset to ``top`` when a
    new page starts. Furniture is painted on every page before any content.
    """

    def __init__(
        self,
        canv: canvas.Canvas,
        furniture: Optional[Callable[[canvas.Canvas], None]] = None,
        page_size: Tuple[float, float] = config.PAGE_SIZE,
        bottom_margin: float = config.BOTTOM_MARGIN,
        furniture_height: float = config.FURNITURE_HEIGHT,
        first_top: Optional[float] = None,
    ) -> None:
        self.canv = canv
        self.page_width, self.page_height = page_size
        self.bottom_margin = float(bottom_margin)
        self.furniture_height = float(furniture_height)
        self.top = self.page_height - self.furniture_height
        self.page = 1
        self.placements: List[Placement] = []
        self._furniture = furniture
        self._paint_furniture()
        self.y = self.top if first_top is None else float(first_top)

    @property
    def room(self) -> float:
        return self.y - self.bottom_margin

    @property
    def body_height(self) -> float:
        return self.top - self.bottom_margin

    def _paint_furniture(self) -> None:
        if self._furniture is not None:
            self._furniture(self.canv)
        self.placements.append(Placement(FURNITURE, self.page, self.page_height, self.furniture_height))

    def new_page(self) -> None:
        self.canv.showPage()
        self.page += 1
        self._paint_furniture()
        self.y = self.top
        logger.debug("Started page %d", self.page)

    def ensure_space(self, height: float) -> bool:
        """Start a new page when ``height`` does not fit. Returns True if it did."""
        if height > self.body_height:
            raise LayoutError(f"Chunk of height {height} can never fit a page body of {self.body_height}")
        if self.room < height:
            self.new_page()
            return True
        return False

    def place(self, section: str, height: float) -> None:
        self.placements.append(Placement(section, self.page, self.y, height))

    def advance(self, height: float) -> None:
        if self.y - height < self.bottom_margin:
            raise LayoutError(
                f"Advancing {height} from y={self.y} crosses the bottom margin on page {self.page}"
            )
        self.y -= height

    def skip(self, gap: float) -> None:
        # spacing only; never pushes the cursor past the margin
        self.y = max(self.bottom_margin, self.y - gap)

    def placements_for(self, section: str) -> List[Placement]:
        return [p for p in self.placements if p.section == section]
