from __future__ import annotations

from typing import List, Optional

from .. import config
from ..models import FontStyle, Margins, Padding, ZERO_PADDING
from .surface import Surface


class LayoutSession:
    """
    Mutable layout state of one document.

    Owns the column padding table, the column cursor (columns already advanced
    through), the page margins captured before columns were enabled, the list
    indent and the last applied font style. The cursor position itself lives on
    the surface.
    """

    def __init__(self, surface: Surface) -> None:
        self.surface = surface
        self.padding: List[Padding] = [ZERO_PADDING]
        self.cursor = 0
        self.margins: Optional[Margins] = None
        self.indent = 0.0
        self.style = FontStyle()
        self.line_height = config.DEFAULT_LINE_HEIGHT
        self.default_align = config.DEFAULT_ALIGN

    @property
    def column_count(self) -> int:
        return len(self.padding)

    @property
    def current_column(self) -> int:
        return self.cursor % len(self.padding)

    @property
    def columns_enabled(self) -> bool:
        return self.margins is not None

    def baseline_margins(self) -> Margins:
        if self.margins is not None:
            return self.margins
        s = self.surface
        return Margins(top=s.t_margin, right=s.r_margin, bottom=s.b_margin, left=s.l_margin - self.indent)

    def mm(self, value: float) -> float:
        """Convert millimetres to the surface's user unit."""
        return value * (72 / 25.4) / self.surface.k

    def increase_indent(self, amount: float) -> None:
        self.indent += amount
        self.surface.l_margin += amount

    def decrease_indent(self, amount: float) -> None:
        self.indent -= amount
        self.surface.l_margin -= amount
