from __future__ import annotations

from pathlib import Path
from typing import List

import fitz  # PyMuPDF

from .. import config
from ..storage import artifact_path


def _pick_preview_pages(page_count: int, count: int) -> List[int]:
    if page_count <= 0:
        return []
    return list(range(min(count, page_count)))


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = 1200) -> None:
    page = doc.load_page(page_index)

    # Scale so the short side of the bitmap is at least min_px
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(1.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_previews(
    slug: str,
    pdf_path: Path,
    base_dir: Path | None = None,
    count: int = config.PREVIEW_COUNT,
) -> List[Path]:
    count = max(1, min(count, config.PREVIEW_COUNT))
    previews: List[Path] = []
    with fitz.open(str(pdf_path)) as doc:
        for index in _pick_preview_pages(doc.page_count, count):
            out_path = artifact_path(slug, f"preview_{index + 1}", base_dir=base_dir)
            _render_page_to_png(doc, index, out_path)
            previews.append(out_path)
    return previews
