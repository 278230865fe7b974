from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence

from .errors import ConfigurationError


class HookResult(str, Enum):
    CONTINUE = "CONTINUE"
    VETO = "VETO"


class ImageAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class Padding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def from_sequence(cls, values: Sequence[float], column: int = 0) -> "Padding":
        if isinstance(values, (str, bytes)) or len(values) != 4:
            raise ConfigurationError(
                "Column padding must be (top, right, bottom, left)",
                {"column": column, "value": values},
            )
        try:
            top, right, bottom, left = (float(v) for v in values)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("Column padding must be numeric", {"column": column}) from exc
        if min(top, right, bottom, left) < 0:
            raise ConfigurationError("Column padding must not be negative", {"column": column})
        return cls(top, right, bottom, left)


ZERO_PADDING = Padding()


def _to_float(value: str, key: str) -> float:
    text = str(value).strip()
    for suffix in ("mm", "pt"):
        if text.endswith(suffix):
            text = text[: -len(suffix)].strip()
    try:
        return float(text)
    except ValueError as exc:
        raise ConfigurationError(f"Style property {key!r} must be a number", {"value": value}) from exc


@dataclass(frozen=True)
class FontStyle:
    """Recognised font options; ``None`` means the option is unset."""

    family: Optional[str] = None
    style: Optional[str] = None
    size: Optional[float] = None
    color: Optional[str] = None
    margin_top: float = 0.0

    @classmethod
    def from_mapping(cls, props: Mapping[str, str]) -> "FontStyle":
        style = props.get("style")
        if style is not None:
            style = "" if style.strip().lower() == "none" else style.strip().upper()
        size = props.get("size")
        margin = props.get("margin-top")
        return cls(
            family=props.get("family") or None,
            style=style,
            size=_to_float(size, "size") if size is not None else None,
            color=props.get("color") or None,
            margin_top=_to_float(margin, "margin-top") if margin is not None else 0.0,
        )


@dataclass(frozen=True)
class ImageStyle:
    align: ImageAlign = ImageAlign.LEFT
    width: Optional[float] = None
    width_is_percent: bool = False
    margin_top: float = 0.0

    @classmethod
    def from_mapping(cls, props: Mapping[str, str]) -> "ImageStyle":
        raw_align = (props.get("align") or ImageAlign.LEFT.value).strip().lower()
        try:
            align = ImageAlign(raw_align)
        except ValueError as exc:
            raise ConfigurationError("Unknown image alignment", {"align": raw_align}) from exc

        width: Optional[float] = None
        percent = False
        raw_width = props.get("width")
        if raw_width:
            raw_width = raw_width.strip()
            if raw_width.endswith("%"):
                width = _to_float(raw_width[:-1], "width")
                percent = True
            else:
                width = _to_float(raw_width, "width")
            if width <= 0:
                raise ConfigurationError("Image width must be positive", {"width": raw_width})

        margin = props.get("margin-top")
        return cls(
            align=align,
            width=width,
            width_is_percent=percent,
            margin_top=_to_float(margin, "margin-top") if margin is not None else 0.0,
        )


@dataclass(frozen=True)
class ImagePlacement:
    x: float
    width: float
    height: float
