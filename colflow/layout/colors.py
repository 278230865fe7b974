from __future__ import annotations

import re
from typing import Tuple

from reportlab.lib import colors

from ..errors import ConfigurationError


_HEX_RE = re.compile(r"^[0-9a-fA-F]{3}([0-9a-fA-F]{3})?$")


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """``"#RRGGBB"`` (or ``RRGGBB`` / ``#RGB``) to an (r, g, b) triple in 0-255."""
    raw = str(value or "").strip().lstrip("#")
    if not _HEX_RE.match(raw):
        raise ConfigurationError("Color must be a hex value like #RRGGBB", {"color": value})
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    color = colors.HexColor("#" + raw)
    return tuple(int(round(channel * 255)) for channel in color.rgb())
