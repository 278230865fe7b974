from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from colflow.document import ColumnDocument


def make_document(columns: int = 2, padding=(0, 0, 0, 0), font_size: float = 10) -> ColumnDocument:
    """
    240 x 300 pt page, 20 pt side margins and 50 pt top/bottom margins.

    Each column box is 200 pt tall; with two columns each band is 100 pt wide.
    """
    doc = ColumnDocument("P", "pt", (240, 300))
    doc.set_margins(50, 20, 50, 20)
    doc.add_page()
    doc.set_font("helvetica", "", font_size)
    if columns:
        doc.set_columns([list(padding)] * columns)
    return doc


@pytest.fixture
def two_column_doc() -> ColumnDocument:
    return make_document(columns=2)


@pytest.fixture
def plain_doc() -> ColumnDocument:
    return make_document(columns=0)


@pytest.fixture
def wide_image(tmp_path: Path) -> Path:
    path = tmp_path / "wide.png"
    Image.new("RGB", (200, 100), color=(31, 78, 121)).save(path)
    return path
