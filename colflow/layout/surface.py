"""
Cursor-based drawing surface over a ReportLab canvas.

ReportLab draws in points from the bottom-left corner; the surface keeps a
top-left origin in user units (pt, mm, cm, in) with a mutable cursor, margins
and an automatic page-break threshold, the way FPDF-style libraries do.
Everything column-aware is layered on top of it in ``colflow.layout``.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from reportlab.lib import pagesizes
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..errors import AssetError, ConfigurationError, LayoutError

logger = logging.getLogger(__name__)


UNITS: Dict[str, float] = {
    "pt": 1.0,
    "mm": 72 / 25.4,
    "cm": 72 / 2.54,
    "in": 72.0,
}

PAGE_SIZES: Dict[str, Tuple[float, float]] = {
    "A3": pagesizes.A3,
    "A4": pagesizes.A4,
    "A5": pagesizes.A5,
    "LETTER": pagesizes.LETTER,
    "LEGAL": pagesizes.LEGAL,
}

CORE_FONTS: Dict[str, Dict[str, str]] = {
    "helvetica": {"": "Helvetica", "B": "Helvetica-Bold", "I": "Helvetica-Oblique", "BI": "Helvetica-BoldOblique"},
    "times": {"": "Times-Roman", "B": "Times-Bold", "I": "Times-Italic", "BI": "Times-BoldItalic"},
    "courier": {"": "Courier", "B": "Courier-Bold", "I": "Courier-Oblique", "BI": "Courier-BoldOblique"},
    "symbol": {"": "Symbol"},
    "zapfdingbats": {"": "ZapfDingbats"},
}
FONT_ALIASES = {"arial": "helvetica"}

# Float slack when comparing the cursor with the break threshold
EPSILON = 1e-6

Color = Tuple[int, int, int]
ImageSource = Union[str, Path, ImageReader]


def open_image(source: ImageSource) -> ImageReader:
    if isinstance(source, ImageReader):
        return source
    try:
        return ImageReader(str(source))
    except Exception as exc:
        raise AssetError(f"Cannot read image: {exc}", path=str(source)) from exc


class Surface:
    def __init__(self, orientation: str = "P", unit: str = "mm", size: Union[str, Tuple[float, float]] = "A4") -> None:
        try:
            self.k = UNITS[unit]
        except KeyError as exc:
            raise ConfigurationError("Unknown unit", {"unit": unit}) from exc

        if isinstance(size, str):
            try:
                w_pt, h_pt = PAGE_SIZES[size.upper()]
            except KeyError as exc:
                raise ConfigurationError("Unknown page size", {"size": size}) from exc
        else:
            w_pt, h_pt = size[0] * self.k, size[1] * self.k
        orientation = (orientation or "P").upper()[:1]
        if orientation == "L":
            w_pt, h_pt = max(w_pt, h_pt), min(w_pt, h_pt)
        elif orientation == "P":
            w_pt, h_pt = min(w_pt, h_pt), max(w_pt, h_pt)
        else:
            raise ConfigurationError("Unknown orientation", {"orientation": orientation})

        self.w_pt, self.h_pt = w_pt, h_pt
        self.w = w_pt / self.k
        self.h = h_pt / self.k

        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=(w_pt, h_pt))
        self._closed = False
        self.page = 0

        margin = 28.35 / self.k
        self.l_margin = margin
        self.t_margin = margin
        self.r_margin = margin
        self.c_margin = margin / 10
        self.line_width = 0.567 / self.k
        self.auto_page_break = True
        self.b_margin = 2 * margin
        self.page_break_trigger = self.h - self.b_margin
        self.x = self.l_margin
        self.y = self.t_margin
        self.lasth = 0.0

        self.font_family = "helvetica"
        self.font_style = ""
        self.underline = False
        self.font_size_pt = 12.0
        self.text_color: Color = (0, 0, 0)
        self.draw_color: Color = (0, 0, 0)
        self.fill_color: Color = (0, 0, 0)

        self.on_header: Optional[Callable[[], None]] = None
        self.on_footer: Optional[Callable[[], None]] = None
        # Returns True to let the surface perform its own page break
        self.page_break_handler: Optional[Callable[[], bool]] = None
        self._in_header = False
        self._in_footer = False

    # ------------------------------------------------------------------
    # fonts and metrics
    # ------------------------------------------------------------------
    @property
    def font_size(self) -> float:
        return self.font_size_pt / self.k

    @property
    def font_name(self) -> str:
        variants = CORE_FONTS[self.font_family]
        return variants.get(self.font_style, variants[""])

    def set_font(self, family: str = "", style: str = "", size: float = 0) -> None:
        if family:
            name = family.strip().lower()
            name = FONT_ALIASES.get(name, name)
            if name not in CORE_FONTS:
                raise ConfigurationError("Unknown font family", {"family": family})
            self.font_family = name
        style = (style or "").upper()
        self.underline = "U" in style
        self.font_style = ("B" if "B" in style else "") + ("I" if "I" in style else "")
        if size:
            self.font_size_pt = float(size)

    def get_string_width(self, text: str) -> float:
        return pdfmetrics.stringWidth(str(text), self.font_name, self.font_size_pt) / self.k

    # ------------------------------------------------------------------
    # cursor and margins
    # ------------------------------------------------------------------
    def set_x(self, x: float) -> None:
        self.x = x if x >= 0 else self.w + x

    def set_y(self, y: float) -> None:
        self.x = self.l_margin
        self.y = y if y >= 0 else self.h + y

    def set_xy(self, x: float, y: float) -> None:
        self.set_y(y)
        self.set_x(x)

    def set_margins(self, left: float, top: float, right: Optional[float] = None) -> None:
        self.l_margin = left
        self.t_margin = top
        self.r_margin = left if right is None else right

    def set_auto_page_break(self, auto: bool, margin: float = 0) -> None:
        self.auto_page_break = auto
        self.b_margin = margin
        self.page_break_trigger = self.h - margin

    def ln(self, h: Optional[float] = None) -> None:
        self.x = self.l_margin
        self.y += self.lasth if h is None else h

    # ------------------------------------------------------------------
    # colors
    # ------------------------------------------------------------------
    def set_text_color(self, r: int, g: int, b: int) -> None:
        self.text_color = (int(r), int(g), int(b))

    def set_draw_color(self, r: int, g: int, b: int) -> None:
        self.draw_color = (int(r), int(g), int(b))

    def set_fill_color(self, r: int, g: int, b: int) -> None:
        self.fill_color = (int(r), int(g), int(b))

    @staticmethod
    def _rgb(color: Color) -> Tuple[float, float, float]:
        return color[0] / 255, color[1] / 255, color[2] / 255

    # ------------------------------------------------------------------
    # pages
    # ------------------------------------------------------------------
    def page_no(self) -> int:
        return self.page

    def add_page(self) -> None:
        if self._closed:
            raise LayoutError("Cannot add a page to a closed document", {"pages": self.page})
        if self.page > 0:
            self._run_callback(self.on_footer, footer=True)
            self._canvas.showPage()
        self.page += 1
        self.x = self.l_margin
        self.y = self.t_margin
        logger.debug("Started page %d", self.page)
        self._run_callback(self.on_header, footer=False)

    def _run_callback(self, callback: Optional[Callable[[], None]], footer: bool) -> None:
        if callback is None:
            return
        state = (self.font_family, self.font_style, self.underline, self.font_size_pt,
                 self.text_color, self.draw_color, self.fill_color, self.line_width)
        if footer:
            self._in_footer = True
        else:
            self._in_header = True
        callback()
        self._in_footer = False
        self._in_header = False
        (self.font_family, self.font_style, self.underline, self.font_size_pt,
         self.text_color, self.draw_color, self.fill_color, self.line_width) = state

    def close(self) -> None:
        if self._closed:
            return
        if self.page == 0:
            self.add_page()
        self._run_callback(self.on_footer, footer=True)
        self._canvas.showPage()
        self._canvas.save()
        self._closed = True

    def output(self, path: Optional[Path] = None) -> bytes:
        self.close()
        data = self._buffer.getvalue()
        if path is not None:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            Path(path).write_bytes(data)
        return data

    # ------------------------------------------------------------------
    # page break interception
    # ------------------------------------------------------------------
    def _breaks_before(self, h: float) -> bool:
        return (
            self.auto_page_break
            and not self._in_header
            and not self._in_footer
            and self.y + h > self.page_break_trigger + EPSILON
        )

    def _accept_page_break(self) -> bool:
        if self.page_break_handler is None:
            return True
        return bool(self.page_break_handler())

    def _check_page_break(self, h: float) -> bool:
        """Break before drawing ``h`` if needed; True when the cursor moved."""
        if not self._breaks_before(h):
            return False
        before = (self.page, self.x, self.y)
        if self._accept_page_break():
            x = self.x
            self.add_page()
            self.x = x
        return (self.page, self.x, self.y) != before

    # ------------------------------------------------------------------
    # drawing
    # ------------------------------------------------------------------
    def _py(self, y: float) -> float:
        return self.h_pt - y * self.k

    def _line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._canvas.setStrokeColorRGB(*self._rgb(self.draw_color))
        self._canvas.setLineWidth(self.line_width * self.k)
        self._canvas.line(x1 * self.k, self._py(y1), x2 * self.k, self._py(y2))

    def rect(self, x: float, y: float, w: float, h: float, style: str = "") -> None:
        style = (style or "D").upper()
        fill = int("F" in style)
        stroke = int("D" in style or not fill)
        self._canvas.setStrokeColorRGB(*self._rgb(self.draw_color))
        self._canvas.setFillColorRGB(*self._rgb(self.fill_color))
        self._canvas.setLineWidth(self.line_width * self.k)
        self._canvas.rect(x * self.k, self._py(y + h), w * self.k, h * self.k, stroke=stroke, fill=fill)

    def circle(self, x: float, y: float, r: float, style: str = "D") -> None:
        style = (style or "D").upper()
        fill = int("F" in style)
        stroke = int("D" in style or not fill)
        self._canvas.setStrokeColorRGB(*self._rgb(self.draw_color))
        self._canvas.setFillColorRGB(*self._rgb(self.fill_color))
        self._canvas.circle(x * self.k, self._py(y), r * self.k, stroke=stroke, fill=fill)

    def text(self, x: float, y: float, txt: str) -> None:
        """Draw ``txt`` with its baseline at ``y``; the cursor does not move."""
        self._draw_string(x, y, str(txt))

    def _draw_string(self, x: float, baseline: float, txt: str) -> None:
        self._canvas.setFont(self.font_name, self.font_size_pt)
        self._canvas.setFillColorRGB(*self._rgb(self.text_color))
        self._canvas.drawString(x * self.k, self._py(baseline), txt)
        if self.underline and txt:
            width = self.get_string_width(txt)
            under = baseline + self.font_size * 0.1
            saved = self.draw_color
            self.draw_color = self.text_color
            self._line(x, under, x + width, under)
            self.draw_color = saved

    def cell(
        self,
        w: float,
        h: float = 0,
        txt: str = "",
        border: Union[int, str] = 0,
        ln: int = 0,
        align: str = "",
        fill: bool = False,
    ) -> None:
        self._check_page_break(h)
        self._cell(w, h, txt, border, ln, align, fill)

    def _cell(
        self,
        w: float,
        h: float,
        txt: str,
        border: Union[int, str],
        ln: int,
        align: str,
        fill: bool,
    ) -> None:
        if w == 0:
            w = self.w - self.r_margin - self.x
        x, y = self.x, self.y

        if fill or border == 1:
            style = "FD" if fill and border == 1 else ("F" if fill else "D")
            self.rect(x, y, w, h, style)
        if isinstance(border, str):
            edges = border.upper()
            if "L" in edges:
                self._line(x, y, x, y + h)
            if "T" in edges:
                self._line(x, y, x + w, y)
            if "R" in edges:
                self._line(x + w, y, x + w, y + h)
            if "B" in edges:
                self._line(x, y + h, x + w, y + h)

        txt = str(txt)
        if txt:
            align = (align or "L").upper()
            if align == "R":
                dx = w - self.c_margin - self.get_string_width(txt)
            elif align == "C":
                dx = (w - self.get_string_width(txt)) / 2
            else:
                dx = self.c_margin
            self._draw_string(x + dx, y + 0.5 * h + 0.3 * self.font_size, txt)

        self.lasth = h
        if ln > 0:
            self.y += h
            if ln == 1:
                self.x = self.l_margin
        else:
            self.x += w

    def wrap(self, txt: str, w: float = 0) -> List[Tuple[int, int]]:
        """
        Split ``txt`` into lines that fit in a cell of width ``w``.

        Returns (start, end) offsets into ``txt`` for each line. Lines break on
        the last space that fits, on ``\\n`` and, for words wider than a line,
        between characters. Every line consumes at least one character.
        """
        if w == 0:
            w = self.w - self.r_margin - self.x
        wmax = w - 2 * self.c_margin
        s = str(txt)
        nb = len(s)
        if nb > 0 and s[-1] == "\n":
            nb -= 1

        spans: List[Tuple[int, int]] = []
        sep = -1
        i = j = 0
        width = 0.0
        wrapped = False
        while i < nb:
            c = s[i]
            if c == "\n":
                spans.append((j, i))
                i += 1
                sep = -1
                j = i
                width = 0.0
                wrapped = False
                continue
            if c == " ":
                sep = i
            width += self.get_string_width(c)
            if width > wmax:
                if sep == -1:
                    if i == j:
                        i += 1
                    spans.append((j, i))
                else:
                    spans.append((j, sep))
                    i = sep + 1
                sep = -1
                j = i
                width = 0.0
                wrapped = True
            else:
                i += 1
                wrapped = False
        # a width break that consumed the last character leaves no tail line
        if not (wrapped and j == i):
            spans.append((j, i))
        return spans

    def multi_cell(
        self,
        w: float,
        h: float,
        txt: str,
        border: Union[int, str] = 0,
        align: str = "L",
        fill: bool = False,
        max_line: int = 0,
    ) -> str:
        """
        Draw wrapped text, at most ``max_line`` lines (0 = all); return what did not fit.

        With ``w`` = 0 each line runs to the right margin. When a page break
        moves the cursor mid-paragraph, the rest of the text is wrapped again
        to the width available at the new position.
        """
        auto_width = w == 0
        if auto_width:
            w = self.w - self.r_margin - self.x
        text = str(txt).replace("\r", "")
        spans = self.wrap(text, w)

        align = (align or "L").upper()
        if align == "J":
            align = "L"
        index = drawn = 0
        while index < len(spans):
            if max_line and drawn == max_line:
                self.x = self.l_margin
                return text[spans[index][0]:]
            start = spans[index][0]
            if self._check_page_break(h) and auto_width:
                w = self.w - self.r_margin - self.x
                spans = [(start + a, start + b) for a, b in self.wrap(text[start:], w)]
                index = 0
            start, end = spans[index]
            last = index == len(spans) - 1 or drawn + 1 == max_line
            self._cell(w, h, text[start:end], self._line_border(border, drawn == 0, last), 2, align, fill)
            index += 1
            drawn += 1
        self.x = self.l_margin
        return ""

    @staticmethod
    def _line_border(border: Union[int, str], first: bool, last: bool) -> Union[int, str]:
        if not border:
            return 0
        edges = "LTRB" if border == 1 else str(border).upper()
        keep = [e for e in "LR" if e in edges]
        if first and "T" in edges:
            keep.append("T")
        if last and "B" in edges:
            keep.append("B")
        return "".join(keep)

    def image(
        self,
        source: ImageSource,
        x: Optional[float] = None,
        y: Optional[float] = None,
        w: float = 0,
        h: float = 0,
    ) -> None:
        """Place an image; with ``y`` omitted the image flows at the cursor and moves it down."""
        reader = open_image(source)
        iw, ih = reader.getSize()
        if not iw or not ih:
            raise AssetError("Image has no size", path=str(source))
        if w == 0 and h == 0:
            w, h = iw / self.k, ih / self.k
        elif w == 0:
            w = h * iw / ih
        elif h == 0:
            h = w * ih / iw

        flowing = y is None
        if flowing:
            self._check_page_break(h)
            y = self.y
        if x is None:
            x = self.x
        self._canvas.drawImage(reader, x * self.k, self._py(y + h), w * self.k, h * self.k, mask="auto")
        if flowing:
            self.y += h
