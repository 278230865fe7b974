from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple, Union

from . import config
from .models import FontStyle, HookResult, ImagePlacement
from .layout.breaks import PageBreakCoordinator
from .layout.colors import hex_to_rgb
from .layout.flow import FlowRenderer
from .layout.geometry import ColumnGeometry
from .layout.session import LayoutSession
from .layout.styles import StyleResolver
from .layout.surface import ImageSource, Surface

logger = logging.getLogger(__name__)

DocumentCallback = Callable[["ColumnDocument"], None]
BreakHook = Callable[["ColumnDocument"], Optional[HookResult]]


class ColumnDocument:
    """
    A PDF document laid out in columns.

    Text, lists and images flow down the current column. When content reaches
    the column's bottom the layout moves to the next column, and to a new page
    after the last one. Header, footer and page-break callbacks receive the
    document itself, so they can use the same geometry accessors.
    """

    def __init__(
        self,
        orientation: str = config.DEFAULT_ORIENTATION,
        unit: str = config.DEFAULT_UNIT,
        size: Union[str, Tuple[float, float]] = config.DEFAULT_PAGE_SIZE,
    ) -> None:
        self.surface = Surface(orientation, unit, size)
        self.session = LayoutSession(self.surface)
        self.geometry = ColumnGeometry(self.session)
        self.breaks = PageBreakCoordinator(self.session, self.geometry, owner=self)
        self.flow = FlowRenderer(self.session, self.geometry, self.breaks)
        self.styles = StyleResolver(self.session, self.geometry, self.breaks)

    # ------------------------------------------------------------------
    # fonts and colors
    # ------------------------------------------------------------------
    def set_font(self, family: str, style: str = "", size: float = 0) -> None:
        self.surface.set_font(family, style, size)

    def set_font_family(self, family: str) -> None:
        self.surface.set_font(family)

    def set_font_style(self, style: str) -> None:
        self.surface.set_font("", style)

    def set_font_size(self, size: float) -> None:
        style = self.surface.font_style + ("U" if self.surface.underline else "")
        self.surface.set_font("", style, size)

    def font(self, css: Union[str, Mapping[str, str], FontStyle]) -> FontStyle:
        return self.styles.apply_font(css)

    def set_text_color(self, color: str) -> None:
        self.surface.set_text_color(*hex_to_rgb(color))

    def set_draw_color(self, color: str) -> None:
        self.surface.set_draw_color(*hex_to_rgb(color))

    def set_fill_color(self, color: str) -> None:
        self.surface.set_fill_color(*hex_to_rgb(color))

    def set_line_height(self, factor: float) -> None:
        self.session.line_height = factor

    def set_align(self, align: str) -> None:
        self.session.default_align = align

    # ------------------------------------------------------------------
    # pages, cursor, margins
    # ------------------------------------------------------------------
    def add_page(self) -> None:
        self.surface.add_page()

    def page_no(self) -> int:
        return self.surface.page_no()

    def page_width(self) -> float:
        return self.surface.w

    def page_height(self) -> float:
        return self.surface.h

    def get_x(self) -> float:
        return self.surface.x

    def get_y(self) -> float:
        return self.surface.y

    def set_x(self, x: float) -> None:
        self.surface.set_x(x)

    def set_y(self, y: float) -> None:
        self.surface.set_y(y)

    def set_xy(self, x: float, y: float) -> None:
        self.surface.set_xy(x, y)

    def set_margins(self, top: float, right: float, bottom: float, left: float) -> None:
        self.surface.set_margins(left, top, right)
        self.surface.set_auto_page_break(self.surface.auto_page_break, bottom)

    def set_auto_page_break(self, auto: bool, margin: float = 0) -> None:
        self.surface.set_auto_page_break(auto, margin)

    def ln(self, h: Optional[float] = None) -> None:
        self.surface.ln(h)

    # ------------------------------------------------------------------
    # drawing
    # ------------------------------------------------------------------
    def text(self, txt: str) -> None:
        self.surface.text(self.surface.x, self.surface.y, txt)

    def cell(self, txt: str, w: Optional[float] = None, h: Optional[float] = None,
             border: Union[int, str] = 0, align: str = "", fill: bool = False) -> None:
        self.flow.cell(txt, w, h, border, align, fill)

    def multi_cell(self, txt: str, w: Optional[float] = None, h: Optional[float] = None,
                   border: Union[int, str] = 0, align: Optional[str] = None, fill: bool = False,
                   max_lines: int = 0) -> str:
        return self.flow.paragraph(txt, w, h, border, align, fill, max_lines)

    paragraph = multi_cell

    def estimate_height(self, txt: str, w: Optional[float] = None, h: Optional[float] = None) -> float:
        return self.flow.estimate_height(txt, w, h)

    def will_overflow(self, txt: str, w: Optional[float] = None, h: Optional[float] = None) -> bool:
        return self.flow.will_overflow(txt, w, h)

    def bullet_list(self, items: Iterable[Any], transform: Optional[Callable[[Any], str]] = None,
                    w: Optional[float] = None) -> None:
        self.flow.bullet_list(items, transform, w)

    def rect(self, w: float, h: float, style: str = "F") -> None:
        self.surface.rect(self.surface.x, self.surface.y, w, h, style)

    def image(self, source: ImageSource, w: float = 0, h: float = 0) -> None:
        self.surface.image(source, self.surface.x, self.surface.y, w, h)

    def image_css(self, source: ImageSource, css: Union[str, Mapping[str, str]]) -> ImagePlacement:
        return self.styles.image_css(source, css)

    # ------------------------------------------------------------------
    # callbacks and hooks
    # ------------------------------------------------------------------
    def set_header_callback(self, callback: Optional[DocumentCallback]) -> None:
        self.surface.on_header = (lambda: callback(self)) if callback else None

    def set_footer_callback(self, callback: Optional[DocumentCallback]) -> None:
        self.surface.on_footer = (lambda: callback(self)) if callback else None

    def set_page_break_callback(self, callback: Optional[DocumentCallback]) -> None:
        self.breaks.page_break_callback = callback

    def add_before_page_break(self, name: str, hook: BreakHook) -> None:
        self.breaks.add_hook(name, hook)

    def remove_before_page_break(self, name: str) -> None:
        self.breaks.remove_hook(name)

    # ------------------------------------------------------------------
    # columns
    # ------------------------------------------------------------------
    def set_columns(self, padding: Sequence[Sequence[float]]) -> None:
        self.breaks.set_columns(padding)

    def unset_columns(self) -> None:
        self.breaks.unset_columns()

    def next_column(self) -> None:
        self.breaks.advance()

    def column_index(self) -> int:
        return self.session.current_column

    def column_width(self) -> float:
        return self.geometry.content_width()

    def column_height(self) -> float:
        return self.geometry.content_height()

    def column_top_offset(self) -> float:
        return self.geometry.top_offset()

    def column_corner(self, corner: int, column: Optional[int] = None) -> Tuple[float, float]:
        return self.geometry.corner(corner, column)

    # ------------------------------------------------------------------
    # output
    # ------------------------------------------------------------------
    def output(self, path: Optional[Path] = None) -> bytes:
        data = self.surface.output(path)
        logger.info("Wrote %d page(s)%s", self.surface.page_no(), f" to {path}" if path else "")
        return data
