"""Image format conversion for assets Typst cannot embed (WebP)."""

from __future__ import annotations

import os

from PIL import Image

_PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16")


def convert_image(src_path: str, dst_path: str) -> str:
    """Convert an image to the format implied by ``dst_path``'s extension.

    Doxygen:
    - @param src_path: Source image (any format Pillow can open).
    - @param dst_path: Destination path; its extension selects the format.
    - @return: ``dst_path``.
    - @throws OSError: If the source cannot be read or the target written.
    """
    os.makedirs(os.path.dirname(dst_path) or ".", exist_ok=True)
    with Image.open(src_path) as img:
        # animated sources: first frame only
        img.seek(0)
        frame = img if img.mode in _PNG_MODES else img.convert("RGBA")
        frame.save(dst_path)
    return dst_path
