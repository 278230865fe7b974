from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..errors import ConfigurationError
from ..models import HookResult, Padding, ZERO_PADDING
from .geometry import BOTTOM_RIGHT, TOP_LEFT, TOP_RIGHT, ColumnGeometry
from .session import LayoutSession

logger = logging.getLogger(__name__)

BreakHook = Callable[[Any], Optional[HookResult]]
BreakCallback = Callable[[Any], None]


class PageBreakCoordinator:
    """
    Owns every column and page advance of a session.

    Installed as the surface's page-break handler: when drawing would cross
    the current column's bottom, the registered before-break hooks run in
    insertion order. The first hook answering ``HookResult.VETO`` cancels the
    break. Otherwise the cursor moves to the next column, on a new page when
    the last column was full, and the surface is told not to break on its own.
    """

    def __init__(self, session: LayoutSession, geometry: ColumnGeometry, owner: Any = None) -> None:
        self.session = session
        self.geometry = geometry
        self.owner = owner
        self.page_break_callback: Optional[BreakCallback] = None
        self._hooks: Dict[str, BreakHook] = {}
        session.surface.page_break_handler = self.handle_page_break

    # ------------------------------------------------------------------
    # hooks
    # ------------------------------------------------------------------
    def add_hook(self, name: str, hook: BreakHook) -> None:
        self._hooks[name] = hook

    def remove_hook(self, name: str) -> None:
        if self._hooks.pop(name, None) is None:
            logger.debug("No before-break hook named %s", name)

    @property
    def hook_names(self) -> List[str]:
        return list(self._hooks)

    def run_hooks(self) -> HookResult:
        for name, hook in list(self._hooks.items()):
            if hook(self.owner) is HookResult.VETO:
                logger.debug("Page break vetoed by hook %s", name)
                return HookResult.VETO
        return HookResult.CONTINUE

    # ------------------------------------------------------------------
    # advancing
    # ------------------------------------------------------------------
    def handle_page_break(self) -> bool:
        if self.run_hooks() is HookResult.VETO:
            return False
        self.advance()
        if self.page_break_callback is not None:
            self.page_break_callback(self.owner)
        return False

    def advance(self) -> None:
        session = self.session
        if session.current_column == session.column_count - 1:
            session.surface.add_page()
        session.cursor += 1
        self.prepare_column()
        logger.debug(
            "Advanced to column %d of %d on page %d",
            session.current_column,
            session.column_count,
            session.surface.page_no(),
        )

    def prepare_column(self) -> None:
        """Move the cursor to the current column and fit margins and break threshold to it."""
        surface = self.session.surface
        left = self.geometry.corner_x(TOP_LEFT) + self.session.indent
        top = self.geometry.corner_y(TOP_LEFT)
        surface.set_xy(left, top)
        surface.set_margins(left, top, surface.w - self.geometry.corner_x(TOP_RIGHT))
        surface.set_auto_page_break(surface.auto_page_break, surface.h - self.geometry.corner_y(BOTTOM_RIGHT))

    # ------------------------------------------------------------------
    # column configuration
    # ------------------------------------------------------------------
    def set_columns(self, table: Sequence[Sequence[float]]) -> None:
        """
        Enable column layout.

        ``table`` holds one (top, right, bottom, left) padding entry per column.
        The page margins in effect at the first call become the baseline for
        all column geometry until ``unset_columns`` is called.
        """
        if table is None or len(table) == 0:
            raise ConfigurationError("Column padding table must not be empty")
        padding = [Padding.from_sequence(entry, index) for index, entry in enumerate(table)]

        session = self.session
        surface = session.surface
        margins = session.baseline_margins()
        band = (surface.w - margins.left - margins.right) / len(padding)
        height = surface.h - margins.top - margins.bottom
        for index, entry in enumerate(padding):
            if band - entry.left - entry.right <= 0 or height - entry.top - entry.bottom <= 0:
                raise ConfigurationError(
                    "Column padding leaves no room for content",
                    {"column": index, "band_width": round(band, 3)},
                )

        if not session.columns_enabled:
            session.margins = margins
        else:
            self._restore_margins()
        session.padding = padding
        session.cursor = 0
        self.prepare_column()
        logger.debug("Enabled %d column(s)", len(padding))

    def unset_columns(self) -> None:
        session = self.session
        session.padding = [ZERO_PADDING]
        session.cursor = 0
        if session.columns_enabled:
            self._restore_margins()
            session.margins = None

    def _restore_margins(self) -> None:
        margins = self.session.margins
        surface = self.session.surface
        surface.set_margins(margins.left + self.session.indent, margins.top, margins.right)
        surface.set_auto_page_break(surface.auto_page_break, margins.bottom)
