"""
Flow rendering against the current column.

Paragraph heights are computed with the same line-wrapping rule the surface
uses to draw, so a height estimate always matches the space actually used
when no break intervenes. Lists use that estimate to move an item to the next
column before drawing it, instead of letting the surface split a bullet from
its text mid-item.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Union

from .. import config
from .breaks import PageBreakCoordinator
from .geometry import TOP_LEFT, ColumnGeometry
from .session import LayoutSession
from .surface import EPSILON

logger = logging.getLogger(__name__)


class FlowRenderer:
    def __init__(self, session: LayoutSession, geometry: ColumnGeometry, coordinator: PageBreakCoordinator) -> None:
        self.session = session
        self.geometry = geometry
        self.coordinator = coordinator

    @property
    def surface(self):
        return self.session.surface

    def line_height(self) -> float:
        return self.surface.font_size * self.session.line_height

    def apply_margin_top(self) -> None:
        margin = self.session.style.margin_top
        if margin:
            self.surface.y += margin

    def cell(
        self,
        txt: str,
        w: Optional[float] = None,
        h: Optional[float] = None,
        border: Union[int, str] = 0,
        align: str = "",
        fill: bool = False,
    ) -> None:
        self.apply_margin_top()
        txt = str(txt)
        if w is None:
            w = self.surface.get_string_width(txt)
        if not h:
            h = self.line_height()
        self.surface.cell(w, h, txt, border, 0, align, fill)

    def paragraph(
        self,
        txt: str,
        w: Optional[float] = None,
        h: Optional[float] = None,
        border: Union[int, str] = 0,
        align: Optional[str] = None,
        fill: bool = False,
        max_lines: int = 0,
    ) -> str:
        """Draw wrapped text at the cursor; return the text beyond ``max_lines`` (0 = no limit)."""
        self.apply_margin_top()
        if align is None:
            align = self.session.default_align
        return self.surface.multi_cell(w or 0, h or self.line_height(), txt, border, align, fill, max_lines)

    def estimate_height(self, txt: str, w: Optional[float] = None, h: Optional[float] = None) -> float:
        text = str(txt).replace("\r", "")
        return len(self.surface.wrap(text, w or 0)) * (h or self.line_height())

    def will_overflow(self, txt: str, w: Optional[float] = None, h: Optional[float] = None) -> bool:
        return self.surface.y + self.estimate_height(txt, w, h) > self.geometry.bottom() + EPSILON

    def at_column_top(self) -> bool:
        return self.surface.y <= self.geometry.corner_y(TOP_LEFT) + EPSILON

    def lines_fitting(self, h: float) -> int:
        """Whole lines of height ``h`` left in the column; never less than one."""
        return max(1, int((self.geometry.bottom() - self.surface.y) / h + EPSILON))

    def bullet_list(
        self,
        items: Iterable[Any],
        transform: Optional[Callable[[Any], str]] = None,
        w: Optional[float] = None,
    ) -> None:
        session = self.session
        surface = self.surface
        margin = session.mm(config.LIST_MARGIN_MM)
        offset = session.mm(config.BULLET_OFFSET_X_MM)
        radius = session.mm(config.BULLET_RADIUS_MM)

        self.apply_margin_top()
        h = self.line_height()
        start_x = surface.x
        start_cursor = session.cursor
        session.increase_indent(margin)
        surface.set_x(surface.x + margin)

        for item in items:
            text = transform(item) if transform is not None else str(item)
            if self.will_overflow(text, w, h) and not self.at_column_top():
                logger.debug("List item does not fit, moving to next column")
                self.coordinator.advance()

            first = True
            while True:
                x, y = surface.x, surface.y
                oversized = self.at_column_top() and h > self.geometry.remaining_height() + EPSILON
                auto_break = surface.auto_page_break
                if oversized:
                    # a line taller than the column is drawn where it starts
                    surface.auto_page_break = False
                try:
                    text = surface.multi_cell(w or 0, h, text, 0, "L", False, self.lines_fitting(h))
                finally:
                    surface.auto_page_break = auto_break
                if first:
                    surface.circle(x - offset, y + h / 2, radius, "F")
                    first = False
                if not text:
                    break
                self.coordinator.advance()

        session.decrease_indent(margin)
        surface.set_x(start_x if session.cursor == start_cursor else surface.l_margin)
