from __future__ import annotations

from pathlib import Path
from typing import Dict
import json


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
STYLE_PRESET_PATH = Path(__file__).resolve().parent / "assets" / "style_presets.json"

DEFAULT_ORIENTATION = "P"
DEFAULT_UNIT = "mm"
DEFAULT_PAGE_SIZE = "A4"

DEFAULT_LINE_HEIGHT = 1.0
DEFAULT_ALIGN = "L"

# List geometry, in millimetres
LIST_MARGIN_MM = 5.0
BULLET_OFFSET_X_MM = 1.8
BULLET_RADIUS_MM = 0.7

PREVIEW_COUNT = 3


def load_style_presets(path: Path | None = None) -> Dict[str, str]:
    preset_path = path or STYLE_PRESET_PATH
    with preset_path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def set_out_dir(path: Path) -> None:
    global OUT_DIR
    OUT_DIR = path
