"""
Column geometry.

The usable page width (page width minus the left and right baseline margins)
is split into equal bands, one per entry of the padding table. Each band is
inset by its own padding to form the column's content box. Corners are
numbered clockwise from the top left:

    0 ── 1
    │    │
    3 ── 2

A single column without padding is the plain margin box, so a document
without columns is just the N=1 case.
"""
from __future__ import annotations

from typing import Optional, Tuple

from ..errors import ConfigurationError
from .session import LayoutSession


TOP_LEFT, TOP_RIGHT, BOTTOM_RIGHT, BOTTOM_LEFT = range(4)


class ColumnGeometry:
    def __init__(self, session: LayoutSession) -> None:
        self.session = session

    def _column(self, column: Optional[int]) -> int:
        if column is None:
            return self.session.current_column
        if not 0 <= column < self.session.column_count:
            raise ConfigurationError(
                "Column index out of range",
                {"column": column, "columns": self.session.column_count},
            )
        return column

    def column_width(self) -> float:
        """Width of one band, padding included."""
        margins = self.session.baseline_margins()
        usable = self.session.surface.w - margins.left - margins.right
        return usable / self.session.column_count

    def corner_x(self, corner: int, column: Optional[int] = None) -> float:
        col = self._column(column)
        margins = self.session.baseline_margins()
        band = self.column_width()
        padding = self.session.padding[col]
        if corner in (TOP_LEFT, BOTTOM_LEFT):
            return margins.left + band * col + padding.left
        if corner in (TOP_RIGHT, BOTTOM_RIGHT):
            right = self.session.surface.w - margins.right - (self.session.column_count - 1 - col) * band
            return right - padding.right
        raise ConfigurationError("Corner index must be 0..3", {"corner": corner})

    def corner_y(self, corner: int, column: Optional[int] = None) -> float:
        col = self._column(column)
        margins = self.session.baseline_margins()
        padding = self.session.padding[col]
        if corner in (TOP_LEFT, TOP_RIGHT):
            return margins.top + padding.top
        if corner in (BOTTOM_RIGHT, BOTTOM_LEFT):
            return self.session.surface.h - margins.bottom - padding.bottom
        raise ConfigurationError("Corner index must be 0..3", {"corner": corner})

    def corner(self, corner: int, column: Optional[int] = None) -> Tuple[float, float]:
        return self.corner_x(corner, column), self.corner_y(corner, column)

    def content_width(self, column: Optional[int] = None) -> float:
        padding = self.session.padding[self._column(column)]
        return self.column_width() - padding.left - padding.right

    def content_height(self, column: Optional[int] = None) -> float:
        return self.corner_y(BOTTOM_LEFT, column) - self.corner_y(TOP_LEFT, column)

    def top_offset(self) -> float:
        """Vertical space already used inside the current column's content box."""
        return self.session.surface.y - self.corner_y(TOP_LEFT)

    def remaining_height(self) -> float:
        return self.content_height() - self.top_offset()

    def bottom(self) -> float:
        return self.corner_y(BOTTOM_LEFT)
