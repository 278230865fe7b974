from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from colflow import config
from colflow.main import app

runner = CliRunner()


def _write_recipe(path: Path, blocks) -> Path:
    recipe = {
        "title": path.stem.replace("_", " ").title(),
        "page": {"unit": "pt", "size": [240, 300], "margins": [50, 20, 50, 20]},
        "blocks": blocks,
    }
    path.write_text(json.dumps(recipe), encoding="utf-8")
    return path


def test_render_writes_artifacts(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "OUT_DIR", config.OUT_DIR)
    out_dir = tmp_path / "out"
    good = _write_recipe(tmp_path / "field_notes.json", [{"type": "paragraph", "text": "hello"}])
    bad = _write_recipe(tmp_path / "broken.json", [{"type": "nope"}])

    result = runner.invoke(app, ["render", str(good), str(bad), "--out", str(out_dir), "--no-preview"])
    assert result.exit_code == 1
    assert "READY: 1" in result.output
    assert "FAILED: broken" in result.output
    assert (out_dir / "field-notes" / "document.pdf").exists()
    error_log = (out_dir / "broken" / "error.log").read_text(encoding="utf-8")
    assert "Unknown block type" in error_log


def test_render_with_previews(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "OUT_DIR", config.OUT_DIR)
    out_dir = tmp_path / "out"
    recipe = _write_recipe(tmp_path / "one_pager.json", [{"type": "paragraph", "text": "hello"}])

    result = runner.invoke(app, ["render", str(recipe), "--out", str(out_dir)])
    assert result.exit_code == 0, result.output
    assert (out_dir / "one-pager" / "preview_1.png").exists()
    assert not (out_dir / "one-pager" / "preview_2.png").exists()


def test_preview_missing_pdf(tmp_path: Path) -> None:
    result = runner.invoke(app, ["preview", str(tmp_path / "missing.pdf")])
    assert result.exit_code == 1
    assert "PDF not found" in result.output


def test_malformed_recipe_does_not_stop_the_batch(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "OUT_DIR", config.OUT_DIR)
    out_dir = tmp_path / "out"
    bad = _write_recipe(tmp_path / "no_path.json", [{"type": "image"}, "paragraph"])
    good = _write_recipe(tmp_path / "after.json", [{"type": "paragraph", "text": "still here"}])

    result = runner.invoke(app, ["render", str(bad), str(good), "--out", str(out_dir), "--no-preview"])
    assert result.exit_code == 1
    assert "READY: 1" in result.output
    assert (out_dir / "after" / "document.pdf").exists()
    assert "Image block needs a 'path'" in (out_dir / "no-path" / "error.log").read_text(encoding="utf-8")
