"""Image-level helpers (format conversion)."""

from .processing import convert_image

__all__ = [
    "convert_image",
]
