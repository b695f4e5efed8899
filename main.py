"""
Entry point and facade for the blog post → PDF pipeline.

Packages:
- blogpdf.docs: frontmatter parsing, asset resolution, markup normalization, Typst rendering
- blogpdf.image: image format conversion (WebP → PNG)
- blogpdf.pipeline: batch build over a content tree, standalone CV compile
"""

from __future__ import annotations

import os
import signal
import sys

from blogpdf.config import check_fonts, load_settings
from blogpdf.docs.frontmatter import format_date, parse_metadata, split_frontmatter
from blogpdf.docs.markup import normalize_markup
from blogpdf.docs.pipeline import prepare_document, process_document
from blogpdf.docs.typst_io import RenderError, build_entry_document
from blogpdf.pipeline import build_all, compile_if_stale

__all__ = [
    # preprocessing
    "split_frontmatter",
    "parse_metadata",
    "format_date",
    "normalize_markup",
    "prepare_document",
    # rendering
    "build_entry_document",
    "RenderError",
    # pipeline
    "process_document",
    "build_all",
    "compile_if_stale",
]


def _exit_on_sigterm(signum, frame) -> None:
    # SystemExit unwinds through the working directory cleanup
    raise SystemExit(128 + signum)


def _cli() -> None:
    """CLI for single-post or batch PDF generation.

    Single mode:
    FILE: Path to the post source (e.g. content/blog/my-post/index.md)

    Batch mode:
    --all [CONTENT_DIR]: Render every blog/*/index.md under CONTENT_DIR (default: content)
    --cv: Also compile cv.typ -> static/cv.pdf when it is out of date

    Common:
    --root: Site root (default: current directory)
    --config: Settings file (default: <root>/config/pdf.json)
    --out-dir: Output directory for PDFs (default: <root>/static/pdf)
    --debug-buffer: Keep the working directory after the run
    """
    import argparse

    parser = argparse.ArgumentParser(description="Generate PDFs from blog posts using Typst.")
    parser.add_argument("file", nargs="?", help="Path to the markdown post")
    parser.add_argument("--all", nargs="?", const="content", default=None, metavar="CONTENT_DIR", help="Render every post under CONTENT_DIR (default: content)")
    parser.add_argument("--cv", action="store_true", help="Also compile cv.typ to static/cv.pdf when out of date")
    parser.add_argument("--root", type=str, default=None, help="Site root (default: current directory)")
    parser.add_argument("--config", type=str, default=None, help="Settings file (default: <root>/config/pdf.json)")
    parser.add_argument("--out-dir", type=str, default=None, help="Output directory for PDFs")
    parser.add_argument("--debug-buffer", action="store_true", help="Keep the working directory after the run")

    args = parser.parse_args()

    if not args.file and args.all is None and not args.cv:
        parser.print_usage()
        raise SystemExit(1)

    signal.signal(signal.SIGTERM, _exit_on_sigterm)

    settings = load_settings(root=args.root, path=args.config)
    check_fonts(settings)

    if args.cv:
        print("Generating CV...")
        compile_if_stale(
            os.path.join(settings.root, "cv.typ"),
            os.path.join(settings.root, "static", "cv.pdf"),
            settings=settings,
        )

    if args.all is not None:
        content_dir = args.all if os.path.isabs(args.all) else os.path.join(settings.root, args.all)
        build_all(content_dir, settings=settings, output_dir=args.out_dir)
        return

    if not args.file:
        return

    try:
        process_document(
            args.file,
            settings=settings,
            output_dir=args.out_dir,
            debug_buffer=bool(args.debug_buffer),
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    except RenderError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    except UnicodeDecodeError as e:
        print(f"Error: {args.file} is not valid UTF-8: {e}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    _cli()
