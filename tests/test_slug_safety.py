from __future__ import annotations

from pathlib import Path

from colflow.storage import artifact_path, slug_from_title


def test_slug_sanitization() -> None:
    slug = slug_from_title("Budget / Planner: 2025!")
    assert slug == "budget-planner-2025"


def test_slug_never_escapes_output_dir() -> None:
    slug = slug_from_title("../../etc/passwd")
    assert "/" not in slug and ".." not in slug


def test_unsluggable_title_falls_back_to_hash() -> None:
    slug = slug_from_title("!!!")
    assert len(slug) == 12


def test_artifact_paths(tmp_path: Path) -> None:
    path = artifact_path("field-notes", "pdf", base_dir=tmp_path)
    assert path == tmp_path / "field-notes" / "document.pdf"
    assert path.parent.is_dir()
