"""Asset resolution: copy or convert images next to the post into the working set."""

from __future__ import annotations

import os
import re
import shutil
from typing import List, Optional

from blogpdf.image import convert_image

from .buffer import BufferManager
from .model import CONVERT_TO, Asset, ResolvedAssets

# markdown image/link targets and html src attributes ending in .webp
_WEBP_REF_RE = re.compile(r"(?P<pre>\]\(|src=\")(?P<name>[^)\"\s]+?\.webp)(?P<post>[)\"\s])", re.IGNORECASE)


def list_assets(src_dir: str) -> List[Asset]:
    """Image files directly inside ``src_dir``, sorted by name."""
    if not os.path.isdir(src_dir):
        return []
    assets: List[Asset] = []
    for name in sorted(os.listdir(src_dir)):
        path = os.path.join(src_dir, name)
        if not os.path.isfile(path):
            continue
        asset = Asset(name=name, src_path=path)
        if asset.is_native or asset.is_convertible:
            assets.append(asset)
    return assets


def resolve_assets(src_dir: str, buffer: BufferManager, notes: Optional[List[str]] = None) -> ResolvedAssets:
    """Populate the working set with every renderer-usable image.

    Native formats are copied first so a native file always wins over a
    converted one with the same name. Thumbnails are never converted.
    """
    resolved = ResolvedAssets()
    assets = list_assets(src_dir)

    for asset in assets:
        if asset.is_native:
            shutil.copy2(asset.src_path, buffer.path(asset.name))
            resolved.copied.append(asset.name)

    for asset in assets:
        if not asset.is_convertible:
            continue
        if asset.is_thumbnail:
            resolved.skipped.append(asset.name)
            continue
        target = f"{asset.stem}.{CONVERT_TO}"
        if target in resolved.copied:
            resolved.converted[asset.name] = target
            continue
        try:
            convert_image(asset.src_path, buffer.path(target))
        except (OSError, ValueError) as e:
            msg = f"Could not convert {asset.name}: {e}"
            print(f"  Warning: {msg}")
            if notes is not None:
                notes.append(msg)
            resolved.skipped.append(asset.name)
            continue
        resolved.converted[asset.name] = target
        print(f"  Converted {asset.name} -> {target}")
    return resolved


def rewrite_image_refs(body: str, resolved: ResolvedAssets) -> str:
    """Point ``.webp`` references at the converted file when it exists."""

    def _sub(m: re.Match) -> str:
        ref = m.group("name")
        head, base = os.path.split(ref)
        new_base = resolved.converted.get(base)
        if new_base is None:
            return m.group(0)
        new_ref = f"{head}/{new_base}" if head else new_base
        return f"{m.group('pre')}{new_ref}{m.group('post')}"

    return _WEBP_REF_RE.sub(_sub, body)


def resolve_featured_image(name: Optional[str], resolved: ResolvedAssets, buffer: BufferManager) -> Optional[str]:
    """Working-set name of the featured image, or None if it is not present."""
    if not name:
        return None
    base = os.path.basename(name)
    target = resolved.resolve(base)
    if os.path.isfile(os.path.join(buffer.base_dir, target)):
        return target
    return None
