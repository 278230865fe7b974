from __future__ import annotations

import math

import pytest

from colflow.document import ColumnDocument

from conftest import make_document


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Integer sed aliquet justo. "
    "Donec eu ultricies velit, porta pharetra massa. Ut non augue a urna iaculis vulputate "
    "ut sit amet sem. Nullam lectus felis, rhoncus sed convallis a, egestas semper risus. "
    "Fusce gravida metus non vulputate vestibulum."
)


def five_line_item(n: int) -> str:
    return "\n".join(f"item {n} line {i}" for i in range(5))


def test_estimate_matches_rendered_height() -> None:
    doc = ColumnDocument()
    doc.add_page()
    doc.set_font("helvetica", "", 12)
    estimate = doc.estimate_height(LOREM)
    line = doc.surface.font_size
    assert estimate > line
    assert estimate == pytest.approx(round(estimate / line) * line)

    y0 = doc.get_y()
    residual = doc.multi_cell(LOREM)
    assert residual == ""
    assert doc.get_y() == pytest.approx(y0 + estimate)


def test_estimate_in_narrow_column_is_taller() -> None:
    wide = make_document(columns=1)
    narrow = make_document(columns=3)
    assert narrow.estimate_height(LOREM) > wide.estimate_height(LOREM)


def test_will_overflow_compares_against_column_bottom(two_column_doc) -> None:
    doc = two_column_doc
    text = "\n".join(["x"] * 20)
    assert doc.estimate_height(text) == pytest.approx(200)
    assert not doc.will_overflow(text)
    doc.ln(10)
    assert doc.will_overflow(text)


def test_paragraph_returns_residual_text(two_column_doc) -> None:
    doc = two_column_doc
    residual = doc.multi_cell("alpha\nbeta\ngamma\ndelta", max_lines=2)
    assert residual == "gamma\ndelta"
    assert doc.get_y() == pytest.approx(70)


def test_cell_uses_string_width_and_line_height(two_column_doc) -> None:
    doc = two_column_doc
    x0, y0 = doc.get_x(), doc.get_y()
    doc.cell("Heading")
    assert doc.get_x() == pytest.approx(x0 + doc.surface.get_string_width("Heading"))
    assert doc.get_y() == pytest.approx(y0)
    assert doc.surface.lasth == pytest.approx(10)


def test_style_margin_top_is_applied_once_per_call(two_column_doc) -> None:
    doc = two_column_doc
    doc.font("margin-top: 5")
    y0 = doc.get_y()
    doc.multi_cell("one\ntwo")
    assert doc.get_y() == pytest.approx(y0 + 5 + 20)


def test_list_of_five_items_advances_once(two_column_doc) -> None:
    doc = two_column_doc
    doc.bullet_list([five_line_item(n) for n in range(5)])
    assert doc.session.cursor == 1
    assert doc.page_no() == 1
    assert doc.get_y() == pytest.approx(100)


@pytest.mark.parametrize("count", range(1, 13))
def test_list_advances_match_total_height(count: int) -> None:
    doc = make_document(columns=2)
    doc.bullet_list([five_line_item(n) for n in range(count)])
    total = 50 * count
    assert doc.session.cursor == math.ceil(total / 200) - 1


def test_item_taller_than_column_is_split_without_looping(two_column_doc) -> None:
    doc = two_column_doc
    doc.bullet_list(["\n".join(["line"] * 25)])
    assert doc.session.cursor == 1
    assert doc.get_y() == pytest.approx(100)
    assert doc.get_x() == pytest.approx(120)


def test_item_that_overflows_is_moved_whole(two_column_doc) -> None:
    doc = two_column_doc
    doc.ln(170)
    doc.bullet_list([five_line_item(0)])
    assert doc.session.cursor == 1
    assert doc.get_y() == pytest.approx(100)


def test_indent_nets_to_zero_across_breaks(two_column_doc) -> None:
    doc = two_column_doc
    left_before = doc.surface.l_margin
    doc.bullet_list([five_line_item(n) for n in range(9)])
    assert doc.session.indent == pytest.approx(0)
    assert doc.surface.l_margin == pytest.approx(doc.geometry.corner_x(0))
    assert doc.page_no() == 2
    assert doc.surface.l_margin == pytest.approx(left_before)


def test_list_transform_is_applied(two_column_doc) -> None:
    doc = two_column_doc
    seen = []

    def decode(raw: bytes) -> str:
        text = raw.decode("utf-8")
        seen.append(text)
        return text

    x0 = doc.get_x()
    doc.bullet_list([b"caf\xc3\xa9", b"na\xc3\xafve"], transform=decode)
    assert seen == ["café", "naïve"]
    assert doc.get_y() == pytest.approx(70)
    assert doc.get_x() == pytest.approx(x0)
    assert doc.session.indent == 0


def test_line_taller_than_column_keeps_bullet_with_text(monkeypatch) -> None:
    doc = make_document(columns=2, font_size=250)
    surface = doc.surface
    bullets, lines = [], []
    draw_circle, draw_cell = surface.circle, surface._cell

    def circle(x, y, r, style="D"):
        bullets.append(doc.column_index())
        draw_circle(x, y, r, style)

    def cell(w, h, txt, *args):
        if txt:
            lines.append((txt, doc.column_index()))
        draw_cell(w, h, txt, *args)

    monkeypatch.setattr(surface, "circle", circle)
    monkeypatch.setattr(surface, "_cell", cell)
    doc.bullet_list(["a", "b"])
    assert bullets == [0, 1]
    assert lines == [("a", 0), ("b", 1)]
    assert doc.session.cursor == 1
    assert doc.page_no() == 1
    assert surface.auto_page_break is True


def test_paragraph_rewraps_after_break_into_narrower_column(monkeypatch) -> None:
    doc = make_document(columns=0)
    doc.set_columns([[0, 0, 0, 0], [0, 30, 0, 0]])
    surface = doc.surface
    drawn = []
    draw_cell = surface._cell

    def cell(w, h, txt, *args):
        drawn.append((doc.column_index(), surface.x, w))
        draw_cell(w, h, txt, *args)

    monkeypatch.setattr(surface, "_cell", cell)
    text = " ".join(["word"] * 100)
    doc.multi_cell(text)
    right_edge = doc.geometry.corner_x(1, 1)
    second = [(x, w) for column, x, w in drawn if column == 1]
    assert second
    assert all(x + w <= right_edge + 1e-6 for x, w in second)
    assert all(x + w <= 120 + 1e-6 for column, x, w in drawn if column == 0)
