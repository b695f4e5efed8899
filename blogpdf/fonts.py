from __future__ import annotations

import os
from typing import List

from PIL import ImageFont

SCALABLE_FONT_EXTS = (".ttf", ".otf", ".ttc")

SAMPLE_TEXT = "Typography: æøå ÆØÅ “quotes”"


def font_is_loadable(path: str) -> bool:
    """Return True if the font at `path` loads and renders the sample text.

    We load the font and measure a sample; a failure or zero width means the
    file is unusable for Typst as well.
    """
    try:
        font = ImageFont.truetype(path, 20)
        return font.getlength(SAMPLE_TEXT) > 0
    except Exception:
        return False


def usable_fonts(font_dir: str) -> List[str]:
    """Scalable fonts under `font_dir` (recursive) that load correctly."""
    if not os.path.isdir(font_dir):
        return []
    found: List[str] = []
    for root, _dirs, files in os.walk(font_dir):
        for name in sorted(files):
            if not name.lower().endswith(SCALABLE_FONT_EXTS):
                continue
            path = os.path.join(root, name)
            if font_is_loadable(path):
                found.append(path)
    return sorted(found)
