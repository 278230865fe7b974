from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import config
from .errors import ColflowError
from .layout.preview import render_previews
from .layout.recipe import load_recipe, render_recipe
from .storage import artifact_path, slug_from_title

app = typer.Typer(help="Column layout PDF composer")
logger = logging.getLogger(__name__)


def _write_error(slug: str, message: str) -> None:
    error_path = artifact_path(slug, "error", base_dir=config.OUT_DIR)
    error_path.write_text(message, encoding="utf-8")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def render(
    recipes: List[Path] = typer.Argument(..., help="JSON recipe file(s)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    preview: bool = typer.Option(True, "--preview/--no-preview", help="Render PNG previews"),
) -> None:
    if out:
        config.set_out_dir(out)
    ready: List[str] = []
    failed: List[str] = []
    for recipe_path in recipes:
        slug = slug_from_title(recipe_path.stem)
        try:
            recipe = load_recipe(recipe_path)
            slug = slug_from_title(str(recipe.get("title") or recipe_path.stem))
            pdf_path = render_recipe(recipe, artifact_path(slug, "pdf"), base_dir=recipe_path.parent)
            if preview:
                render_previews(slug, pdf_path)
        except (ColflowError, OSError, ValueError) as exc:
            logger.exception("Render failed for %s", recipe_path)
            _write_error(slug, str(exc))
            failed.append(slug)
            continue
        ready.append(slug)
    typer.echo(f"READY: {len(ready)}")
    typer.echo(f"FAILED: {len(failed)}")
    for slug in failed:
        typer.echo(f"FAILED: {slug}")
    if failed:
        raise typer.Exit(code=1)


@app.command("preview")
def preview_pdf(
    pdf: Path = typer.Argument(..., help="PDF to preview"),
    pages: int = typer.Option(config.PREVIEW_COUNT, "--pages", help="Number of leading pages"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
) -> None:
    if out:
        config.set_out_dir(out)
    if not pdf.exists():
        typer.echo(f"PDF not found: {pdf}")
        raise typer.Exit(code=1)
    previews = render_previews(slug_from_title(pdf.stem), pdf, count=pages)
    for path in previews:
        typer.echo(str(path))


if __name__ == "__main__":
    app()
