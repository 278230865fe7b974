from __future__ import annotations

from typing import List

import pytest

from colflow.errors import ConfigurationError
from colflow.models import HookResult

from conftest import make_document


def _overflow(doc) -> None:
    doc.set_y(245)
    doc.cell("overflow", h=10)


def test_reactive_break_moves_to_next_column(two_column_doc) -> None:
    doc = two_column_doc
    _overflow(doc)
    assert doc.session.cursor == 1
    assert doc.column_index() == 1
    assert doc.page_no() == 1
    assert doc.get_y() == pytest.approx(50)


def test_break_from_last_column_starts_a_page(two_column_doc) -> None:
    doc = two_column_doc
    doc.next_column()
    _overflow(doc)
    assert doc.page_no() == 2
    assert doc.column_index() == 0
    assert doc.get_x() > 20
    assert doc.get_y() == pytest.approx(50)


def test_explicit_advance_cycles_columns_and_pages() -> None:
    doc = make_document(columns=3)
    for _ in range(7):
        doc.next_column()
    assert doc.session.cursor == 7
    assert doc.column_index() == 1
    assert doc.page_no() == 3


def test_advance_reconfigures_margins_and_threshold() -> None:
    doc = make_document(columns=2, padding=(10, 5, 10, 5))
    doc.next_column()
    surface = doc.surface
    assert surface.l_margin == pytest.approx(125)
    assert surface.t_margin == pytest.approx(60)
    assert surface.r_margin == pytest.approx(25)
    assert surface.page_break_trigger == pytest.approx(240)
    assert (doc.get_x(), doc.get_y()) == pytest.approx((125, 60))


def test_veto_hook_blocks_every_break(two_column_doc) -> None:
    doc = two_column_doc
    doc.add_before_page_break("X", lambda d: HookResult.VETO)
    for _ in range(1000):
        _overflow(doc)
    assert doc.session.cursor == 0
    assert doc.page_no() == 1

    doc.remove_before_page_break("X")
    _overflow(doc)
    assert doc.session.cursor == 1


def test_hooks_run_in_order_and_stop_at_veto(two_column_doc) -> None:
    doc = two_column_doc
    calls: List[str] = []

    def hook(name: str, result):
        def run(d):
            assert d is doc
            calls.append(name)
            return result

        return run

    doc.add_before_page_break("first", hook("first", None))
    doc.add_before_page_break("second", hook("second", HookResult.CONTINUE))
    doc.add_before_page_break("veto", hook("veto", HookResult.VETO))
    doc.add_before_page_break("never", hook("never", HookResult.CONTINUE))
    _overflow(doc)
    assert calls == ["first", "second", "veto"]
    assert doc.breaks.hook_names == ["first", "second", "veto", "never"]
    assert doc.session.cursor == 0


def test_completion_callback_only_for_reactive_breaks(two_column_doc) -> None:
    doc = two_column_doc
    seen = []
    doc.set_page_break_callback(lambda d: seen.append(d.column_index()))
    doc.next_column()
    assert seen == []
    _overflow(doc)
    assert seen == [0]


def test_removing_unknown_hook_is_harmless(two_column_doc) -> None:
    two_column_doc.remove_before_page_break("missing")
    assert two_column_doc.breaks.hook_names == []


@pytest.mark.parametrize(
    "table",
    [
        [],
        [[1, 2, 3]],
        [[0, 0, 0, -1]],
        [["a", 0, 0, 0]],
        [[0, 60, 0, 60], [0, 0, 0, 0]],
        [[120, 0, 100, 0]],
    ],
)
def test_invalid_padding_tables_fail_fast(plain_doc, table) -> None:
    with pytest.raises(ConfigurationError):
        plain_doc.set_columns(table)
    assert plain_doc.session.column_count == 1
    assert not plain_doc.session.columns_enabled


def test_unset_then_single_column_restores_margin_box(plain_doc) -> None:
    doc = plain_doc
    surface = doc.surface
    before = (surface.l_margin, surface.t_margin, surface.r_margin, surface.b_margin, surface.page_break_trigger)

    doc.set_columns([[10, 10, 10, 10]] * 3)
    assert doc.session.columns_enabled
    doc.next_column()
    doc.unset_columns()
    assert (surface.l_margin, surface.t_margin, surface.r_margin, surface.b_margin) == before[:4]
    assert doc.session.cursor == 0

    doc.set_columns([[0, 0, 0, 0]])
    after = (surface.l_margin, surface.t_margin, surface.r_margin, surface.b_margin, surface.page_break_trigger)
    assert after == pytest.approx(before)

    doc.unset_columns()
    assert (surface.l_margin, surface.t_margin, surface.r_margin, surface.b_margin) == before[:4]
    assert not doc.session.columns_enabled


def test_reenabling_columns_keeps_first_margin_snapshot(two_column_doc) -> None:
    doc = two_column_doc
    doc.set_columns([[0, 0, 0, 0]] * 4)
    assert doc.geometry.column_width() == pytest.approx(50)
    assert doc.geometry.corner_x(0, 0) == pytest.approx(20)
