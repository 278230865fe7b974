from __future__ import annotations

import hashlib
import re
from pathlib import Path

from slugify import slugify

from . import config


ARTIFACT_NAMES = {
    "pdf": "document.pdf",
    "preview_1": "preview_1.png",
    "preview_2": "preview_2.png",
    "preview_3": "preview_3.png",
    "error": "error.log",
}


def slug_from_title(title: str) -> str:
    slug = slugify(title)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        slug = hashlib.md5(title.encode("utf-8")).hexdigest()[:12]
    if ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated from title")
    return slug


def document_dir(slug: str, base_dir: Path | None = None) -> Path:
    root = base_dir or config.OUT_DIR
    path = root / slug
    path.mkdir(parents=True, exist_ok=True)
    return path


def artifact_path(slug: str, artifact_type: str, base_dir: Path | None = None) -> Path:
    filename = ARTIFACT_NAMES[artifact_type]
    return document_dir(slug, base_dir=base_dir) / filename
