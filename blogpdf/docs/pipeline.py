from __future__ import annotations

import os
import shutil
from typing import Dict, Optional

from blogpdf.config import Settings, load_settings

from .assets import resolve_assets, resolve_featured_image, rewrite_image_refs
from .buffer import BufferManager
from .frontmatter import read_source, try_format_date
from .markup import normalize_markup
from .model import PreparedDocument
from .typst_io import (
    CONTENT_NAME,
    ENTRY_NAME,
    build_entry_document,
    compile_typst,
    install_template,
)

FATAL = "fatal"
DEFAULT = "default"
WARN = "warn"

FAILURE_POLICY: Dict[str, str] = {
    "missing_source": FATAL,
    "missing_metadata": DEFAULT,
    "missing_field": DEFAULT,
    "unparseable_date": DEFAULT,
    "asset_conversion": WARN,
    "missing_featured": WARN,
    "render": FATAL,
}

_FLAT_PARENTS = ("blog", "content")


def document_slug(file_path: str) -> str:
    """``content/blog/my-post/index.md`` -> ``my-post``; flat posts use the file stem."""
    parent = os.path.basename(os.path.dirname(os.path.abspath(file_path)))
    if parent in _FLAT_PARENTS or not parent:
        return os.path.splitext(os.path.basename(file_path))[0]
    return parent


def _note(prepared: PreparedDocument, kind: str, message: str) -> None:
    """Record a degradation; fatal kinds are raised by the caller instead."""
    policy = FAILURE_POLICY.get(kind, WARN)
    if policy == FATAL:
        raise ValueError(f"{kind} is fatal and cannot be recorded as a note")
    prepared.notes.append(message)
    print(f"  Warning: {message}")


def prepare_document(file_path: str, buffer: BufferManager, settings: Optional[Settings] = None) -> PreparedDocument:
    """Preprocess a post into the working set and return the intermediate document.

    Writes ``frontmatter.toml``, ``content.md`` and the resolved images into
    ``buffer``. Only a missing source file raises; everything else degrades.
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    source = read_source(file_path)
    prepared = PreparedDocument(slug=document_slug(file_path), metadata=source.metadata, body=source.body)

    if not source.has_metadata:
        _note(prepared, "missing_metadata", "No metadata section; using defaults")
    for name in source.missing_fields:
        _note(prepared, "missing_field", f"Missing '{name}'; using default")

    raw_date = prepared.metadata.date
    if raw_date:
        formatted = try_format_date(raw_date)
        if formatted is None:
            _note(prepared, "unparseable_date", f"Unparseable date kept as-is: {raw_date}")
        else:
            prepared.metadata.date = formatted

    buffer.write_text("frontmatter.toml", source.meta_text)

    resolved = resolve_assets(os.path.dirname(os.path.abspath(file_path)), buffer, notes=prepared.notes)

    body = rewrite_image_refs(prepared.body, resolved)
    prepared.body = normalize_markup(body)
    buffer.write_text(CONTENT_NAME, prepared.body)

    featured = prepared.metadata.featured_image
    prepared.featured_image = resolve_featured_image(featured, resolved, buffer)
    if featured and prepared.featured_image is None:
        _note(prepared, "missing_featured", f"Featured image not available, omitted: {featured}")

    if settings is not None and settings.description_as_abstract:
        prepared.abstract = prepared.metadata.description
    return prepared


def process_document(
    file_path: str,
    settings: Optional[Settings] = None,
    output_dir: Optional[str] = None,
    debug_buffer: bool = False,
) -> Dict[str, str]:
    """High-level pipeline for one post: preprocess → write entry document → typst → PDF.

    - The PDF is compiled inside the working directory and moved into
      ``output_dir`` only on success, so failures leave no partial output.
    - Raises FileNotFoundError for a missing source and RenderError when
      the engine fails.
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    settings = settings or load_settings()
    out_dir = output_dir or settings.output_dir or os.path.join(settings.root, "static", "pdf")

    print(f"Generating PDF for: {document_slug(file_path)}")
    with BufferManager(debug=debug_buffer) as buffer:
        prepared = prepare_document(file_path, buffer, settings)

        install_template(buffer.base_dir, settings.template)
        entry = buffer.write_text(ENTRY_NAME, build_entry_document(prepared, settings.author))
        tmp_pdf = buffer.path(f"{prepared.slug}.pdf")
        compile_typst(entry, tmp_pdf, typst_path=settings.typst_path, font_paths=settings.font_paths)

        os.makedirs(out_dir, exist_ok=True)
        out_pdf = os.path.join(out_dir, f"{prepared.slug}.pdf")
        shutil.move(tmp_pdf, out_pdf)

    print(f"Generated: {out_pdf}")
    return {"pdf": out_pdf, "slug": prepared.slug}
