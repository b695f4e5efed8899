"""Batch build: render every post of a content tree, best effort.

A failure for one post is reported as a warning and the batch goes on.
"""

from __future__ import annotations

import glob
import os
from typing import Dict, List, Optional

from blogpdf.config import Settings, load_settings
from blogpdf.docs.pipeline import process_document
from blogpdf.docs.typst_io import RenderError, compile_typst

POST_PATTERN = os.path.join("blog", "*", "index.md")


def find_posts(content_dir: str) -> List[str]:
    """Post sources under ``content_dir`` in a stable order."""
    return sorted(p for p in glob.glob(os.path.join(content_dir, POST_PATTERN)) if os.path.isfile(p))


def build_all(
    content_dir: str,
    settings: Optional[Settings] = None,
    output_dir: Optional[str] = None,
) -> Dict[str, Optional[str]]:
    """Render all posts; returns post path -> PDF path (None on failure).

    Doxygen:
    - @param content_dir: Site content directory (holds ``blog/<slug>/index.md``).
    - @param settings: Build settings; loaded from the current root if omitted.
    - @param output_dir: Override for the PDF output directory.
    - @return: Mapping of every post found to its PDF, or None if it failed.
    """
    settings = settings or load_settings()
    posts = find_posts(content_dir)
    print(f"Generating PDFs for {len(posts)} post(s)...")

    results: Dict[str, Optional[str]] = {}
    for post in posts:
        try:
            results[post] = process_document(post, settings=settings, output_dir=output_dir)["pdf"]
        except (RenderError, OSError, ValueError) as e:
            print(f"  Warning: Failed to generate PDF for {post}: {e}")
            results[post] = None

    failed = sum(1 for v in results.values() if v is None)
    print(f"Done: {len(results) - failed} generated, {failed} failed")
    return results


def is_stale(source: str, output: str) -> bool:
    """True when ``output`` is missing or older than ``source``."""
    if not os.path.exists(output):
        return True
    return os.path.getmtime(source) > os.path.getmtime(output)


def compile_if_stale(source: str, output: str, settings: Optional[Settings] = None, force: bool = False) -> bool:
    """Compile a standalone Typst document (e.g. the CV) when out of date.

    Returns True if a compile ran and succeeded. A failure is a warning.
    """
    if not os.path.isfile(source):
        print(f"  Warning: {source} not found; skipping")
        return False
    if not force and not is_stale(source, output):
        print(f"  {os.path.basename(output)} up to date")
        return False

    settings = settings or load_settings()
    os.makedirs(os.path.dirname(os.path.abspath(output)), exist_ok=True)
    try:
        compile_typst(source, output, typst_path=settings.typst_path, font_paths=settings.font_paths)
    except RenderError as e:
        print(f"  Warning: Failed to generate {os.path.basename(output)}: {e}")
        return False
    print(f"  Generated: {output}")
    return True
