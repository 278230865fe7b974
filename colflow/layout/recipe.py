"""
JSON recipes.

A recipe describes a document as page settings, named styles and an ordered
list of blocks::

    {
      "title": "Field Notes",
      "page": {"orientation": "P", "unit": "mm", "size": "A4", "margins": [15, 15, 15, 15]},
      "styles": {"lead": "family: times; size: 12"},
      "footer": {"text": "Field Notes - page {page}", "style": "muted"},
      "blocks": [
        {"type": "columns", "count": 2, "padding": [0, 4, 0, 4]},
        {"type": "font", "style": "heading"},
        {"type": "paragraph", "text": "..."},
        {"type": "list", "items": ["one", "two"]},
        {"type": "image", "path": "figure.png", "css": "width: 50%; align: center"}
      ]
    }

The first page is started automatically; ``page`` blocks start further pages.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from .. import config
from ..document import ColumnDocument
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

BlockRenderer = Callable[[ColumnDocument, dict, Dict[str, str], Path], None]


def load_recipe(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Recipe not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        recipe = json.load(handle)
    if not isinstance(recipe, dict):
        raise ConfigurationError("Recipe must be a JSON object", {"path": str(path)})
    return recipe


def _style(styles: Dict[str, str], block: dict) -> str:
    if "css" in block:
        return str(block["css"])
    name = block.get("style")
    if name is None:
        raise ConfigurationError("Style needs a 'style' name or 'css'", {"block": block})
    if name not in styles:
        raise ConfigurationError("Unknown style name", {"style": name})
    return styles[name]


def _block_page(doc, block, styles, base_dir):
    doc.add_page()


def _block_columns(doc, block, styles, base_dir):
    if "table" in block:
        table = block["table"]
    else:
        count = int(block.get("count", 1))
        table = [list(block.get("padding", [0, 0, 0, 0]))] * count
    doc.set_columns(table)


def _block_unset_columns(doc, block, styles, base_dir):
    doc.unset_columns()


def _block_next_column(doc, block, styles, base_dir):
    doc.next_column()


def _block_font(doc, block, styles, base_dir):
    doc.font(_style(styles, block))


def _block_cell(doc, block, styles, base_dir):
    doc.cell(
        block.get("text", ""),
        block.get("w"),
        block.get("h"),
        block.get("border", 0),
        block.get("align", ""),
        bool(block.get("fill", False)),
    )
    if block.get("ln", True):
        doc.ln()


def _block_paragraph(doc, block, styles, base_dir):
    residual = doc.multi_cell(
        block.get("text", ""),
        block.get("w"),
        block.get("h"),
        block.get("border", 0),
        block.get("align"),
        bool(block.get("fill", False)),
        int(block.get("max_lines", 0)),
    )
    if residual:
        logger.info("Paragraph truncated after %s line(s)", block.get("max_lines"))


def _block_list(doc, block, styles, base_dir):
    doc.bullet_list(block.get("items", []), w=block.get("w"))


def _block_image(doc, block, styles, base_dir):
    if not block.get("path"):
        raise ConfigurationError("Image block needs a 'path'", {"block": block})
    path = Path(block["path"])
    if not path.is_absolute():
        path = base_dir / path
    doc.image_css(path, block.get("css", ""))


def _block_ln(doc, block, styles, base_dir):
    doc.ln(block.get("h"))


BLOCK_RENDERERS: Dict[str, BlockRenderer] = {
    "page": _block_page,
    "columns": _block_columns,
    "unset_columns": _block_unset_columns,
    "next_column": _block_next_column,
    "font": _block_font,
    "cell": _block_cell,
    "paragraph": _block_paragraph,
    "list": _block_list,
    "image": _block_image,
    "ln": _block_ln,
}


def _footer_callback(footer: Mapping, styles: Dict[str, str]) -> Callable[[ColumnDocument], None]:
    text = str(footer.get("text", ""))
    css = _style(styles, footer) if ("style" in footer or "css" in footer) else ""

    def draw(doc: ColumnDocument) -> None:
        # surface font state is restored after the footer, the style snapshot is not
        snapshot = doc.session.style
        if css:
            doc.font(css)
        label = text.format(page=doc.page_no())
        margins = doc.session.baseline_margins()
        x = (doc.page_width() - doc.surface.get_string_width(label)) / 2
        doc.surface.text(x, doc.page_height() - margins.bottom / 2, label)
        doc.session.style = snapshot

    return draw


def build_document(recipe: dict, base_dir: Optional[Path] = None) -> ColumnDocument:
    page = recipe.get("page") or {}
    doc = ColumnDocument(
        page.get("orientation", config.DEFAULT_ORIENTATION),
        page.get("unit", config.DEFAULT_UNIT),
        page.get("size", config.DEFAULT_PAGE_SIZE),
    )
    margins = page.get("margins")
    if margins is not None:
        if len(margins) != 4:
            raise ConfigurationError("Page margins must be [top, right, bottom, left]", {"margins": margins})
        doc.set_margins(*(float(m) for m in margins))
    if "line_height" in page:
        doc.set_line_height(float(page["line_height"]))

    styles = dict(config.load_style_presets())
    styles.update(recipe.get("styles") or {})
    if "footer" in recipe:
        if not isinstance(recipe["footer"], dict):
            raise ConfigurationError("Footer must be a JSON object")
        doc.set_footer_callback(_footer_callback(recipe["footer"], styles))
    if "body" in styles:
        doc.font(styles["body"])

    doc.add_page()
    root = base_dir or Path.cwd()
    for index, block in enumerate(recipe.get("blocks") or []):
        if not isinstance(block, dict):
            raise ConfigurationError("Block must be a JSON object", {"index": index})
        kind = str(block.get("type", ""))
        fn = BLOCK_RENDERERS.get(kind)
        if fn is None:
            raise ConfigurationError("Unknown block type", {"index": index, "type": kind})
        fn(doc, block, styles, root)
    return doc


def render_recipe(recipe: dict, output_path: Path, base_dir: Optional[Path] = None) -> Path:
    doc = build_document(recipe, base_dir=base_dir)
    doc.output(output_path)
    return output_path
