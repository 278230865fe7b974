from __future__ import annotations

import logging
from typing import Dict, Mapping, Tuple, Union

from ..errors import AssetError, ConfigurationError
from ..models import FontStyle, ImageAlign, ImagePlacement, ImageStyle
from .breaks import PageBreakCoordinator
from .colors import hex_to_rgb
from .geometry import ColumnGeometry
from .session import LayoutSession
from .surface import EPSILON, ImageSource, open_image

logger = logging.getLogger(__name__)

StyleInput = Union[str, Mapping[str, str]]


def parse_style(css: str) -> Dict[str, str]:
    """
    Parse ``"family: times; size: 12"`` into ``{"family": "times", "size": "12"}``.

    Keys are lower-cased, values trimmed, empty declarations skipped.
    """
    props: Dict[str, str] = {}
    for chunk in str(css or "").split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        if ":" not in chunk:
            raise ConfigurationError("Style declaration needs 'key: value'", {"declaration": chunk})
        key, value = chunk.split(":", 1)
        props[key.strip().lower()] = value.strip()
    return props


def _props(style: StyleInput) -> Mapping[str, str]:
    if isinstance(style, str):
        return parse_style(style)
    return {str(k).lower(): str(v) for k, v in style.items()}


class StyleResolver:
    def __init__(self, session: LayoutSession, geometry: ColumnGeometry, coordinator: PageBreakCoordinator) -> None:
        self.session = session
        self.geometry = geometry
        self.coordinator = coordinator

    def apply_font(self, style: Union[StyleInput, FontStyle]) -> FontStyle:
        font = style if isinstance(style, FontStyle) else FontStyle.from_mapping(_props(style))
        surface = self.session.surface
        if font.family:
            surface.set_font(font.family)
        if font.style is not None:
            surface.set_font("", font.style)
        if font.size is not None:
            current = surface.font_style + ("U" if surface.underline else "")
            surface.set_font("", current, font.size)
        if font.color:
            surface.set_text_color(*hex_to_rgb(font.color))
        self.session.style = font
        return font

    def resolve_image(self, size: Tuple[float, float], style: ImageStyle, x: float) -> ImagePlacement:
        """
        Fit an image of pixel ``size`` into the current column at ``x``.

        Percentage widths are taken from the column's content width. The height
        follows the aspect ratio and is clamped to the space left in the column,
        shrinking the width to match.
        """
        iw, ih = size
        if not iw or not ih or iw <= 0 or ih <= 0:
            raise AssetError("Image has no usable aspect ratio", context={"size": size})
        ratio = iw / ih

        column_width = self.geometry.content_width()
        if style.width is None:
            width = column_width
        elif style.width_is_percent:
            width = style.width / 100 * column_width
        else:
            width = style.width
        height = width / ratio

        remaining = self.geometry.remaining_height()
        if height > remaining:
            logger.debug("Clamping image height %.2f to %.2f", height, remaining)
            height = remaining
            width = height * ratio

        if style.align is ImageAlign.RIGHT:
            x += column_width - width
        elif style.align is ImageAlign.CENTER:
            x += (column_width - width) / 2
        return ImagePlacement(x=x, width=width, height=height)

    def image_css(self, source: ImageSource, css: StyleInput) -> ImagePlacement:
        reader = open_image(source)
        try:
            size = reader.getSize()
        except Exception as exc:
            raise AssetError(f"Cannot read image size: {exc}", path=str(source)) from exc
        style = ImageStyle.from_mapping(_props(css))

        surface = self.session.surface
        if self.geometry.remaining_height() - style.margin_top <= EPSILON:
            self.coordinator.advance()
        x = surface.x
        surface.y += style.margin_top

        placement = self.resolve_image(size, style, x)
        surface.image(reader, placement.x, surface.y, placement.width, placement.height)
        surface.set_xy(x, surface.y + placement.height)
        return placement

