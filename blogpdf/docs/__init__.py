"""Document processing layer for blog posts.

Exposes:
- Data model: Metadata, SourceDocument, Asset, ResolvedAssets, PreparedDocument
- Buffer manager: BufferManager (private working directory per run)
- Preprocessing: frontmatter parsing, asset resolution, markup normalization
- Rendering: Typst entry document and compiler invocation
"""

from .model import Metadata, SourceDocument, Asset, ResolvedAssets, PreparedDocument
from .buffer import BufferManager
from .typst_io import RenderError

__all__ = [
    "Metadata",
    "SourceDocument",
    "Asset",
    "ResolvedAssets",
    "PreparedDocument",
    "BufferManager",
    "RenderError",
]
