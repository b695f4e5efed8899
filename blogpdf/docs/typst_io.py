from __future__ import annotations

import os
import shutil
import subprocess
from typing import List, Optional, Sequence, Tuple

from .model import PreparedDocument

TEMPLATE_NAME = "academic.typ"
ENTRY_NAME = "document.typ"
CONTENT_NAME = "content.md"

CMARKER_IMPORT = "@preview/cmarker:0.1.8"
MITEX_IMPORT = "@preview/mitex:0.2.6"

DEFAULT_TEMPLATE = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", TEMPLATE_NAME)


class RenderError(RuntimeError):
    """The Typst engine failed (or could not be started) for one document."""


def typst_string(value: str) -> str:
    """Quote ``value`` as a Typst string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("\"", "\\\"")
        .replace("\n", "\\n")
        .replace("\r", "")
        .replace("\t", "\\t")
    )
    return f"\"{escaped}\""


def template_arguments(prepared: PreparedDocument, author: Optional[str]) -> List[Tuple[str, str]]:
    """Named arguments for ``academic.with``; absent values are not emitted."""
    args: List[Tuple[str, str]] = [("title", prepared.metadata.title)]
    if author:
        args.append(("author", author))
    if prepared.metadata.date:
        args.append(("date", prepared.metadata.date))
    if prepared.abstract:
        args.append(("abstract", prepared.abstract))
    if prepared.featured_image:
        args.append(("featured-image", prepared.featured_image))
    return args


def build_entry_document(prepared: PreparedDocument, author: Optional[str] = None) -> str:
    lines = [
        f"#import \"{TEMPLATE_NAME}\": academic",
        f"#import \"{CMARKER_IMPORT}\"",
        f"#import \"{MITEX_IMPORT}\": mitex",
        "",
        "#show: academic.with(",
    ]
    for key, value in template_arguments(prepared, author):
        lines.append(f"  {key}: {typst_string(value)},")
    lines += [
        ")",
        "",
        "#cmarker.render(",
        f"  read(\"{CONTENT_NAME}\"),",
        "  math: mitex,",
        "  smart-punctuation: true,",
        "  scope: (image: (path, alt: none) => image(path, alt: alt)),",
        ")",
        "",
    ]
    return "\n".join(lines)


def install_template(work_dir: str, template_path: Optional[str] = None) -> str:
    src = template_path or DEFAULT_TEMPLATE
    if not os.path.isfile(src):
        raise FileNotFoundError(f"Template not found: {src}")
    dst = os.path.join(work_dir, TEMPLATE_NAME)
    shutil.copyfile(src, dst)
    return dst


def compile_typst(
    entry_path: str,
    output_path: str,
    typst_path: str = "typst",
    font_paths: Sequence[str] = (),
    root: Optional[str] = None,
) -> str:
    """Run ``typst compile`` and return ``output_path``.

    Doxygen:
    - @param entry_path: Typst entry document.
    - @param output_path: PDF to produce.
    - @param typst_path: Typst executable name or path.
    - @param font_paths: Extra font directories passed as ``--font-path``.
    - @param root: Project root for absolute Typst paths (defaults to the entry's folder).
    - @throws RenderError: If typst is missing or exits non-zero.
    """
    cmd: List[str] = [typst_path, "compile"]
    for fp in font_paths:
        cmd += ["--font-path", fp]
    if root:
        cmd += ["--root", root]
    cmd += [entry_path, output_path]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8")
    except FileNotFoundError as e:
        raise RenderError(f"typst executable not found: {typst_path}") from e
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip()
        raise RenderError(f"typst compile failed for {entry_path}: {detail}")
    return output_path
