from __future__ import annotations

import os
import shutil
import tempfile
from typing import Optional


class BufferManager:
    """Private working directory for a single document run.

    Release mode removes the directory on cleanup(); debug mode keeps it on
    disk for inspection. Usable as a context manager so the directory is
    released on every exit path.
    """

    def __init__(self, base_dir: Optional[str] = None, debug: bool = False) -> None:
        self.debug = bool(debug)
        if base_dir:
            os.makedirs(base_dir, exist_ok=True)
        self.base_dir = tempfile.mkdtemp(prefix="blogpdf-", dir=base_dir)

    def path(self, *parts: str) -> str:
        p = os.path.join(self.base_dir, *parts)
        os.makedirs(os.path.dirname(p), exist_ok=True)
        return p

    def write_text(self, name: str, text: str) -> str:
        p = self.path(name)
        with open(p, "w", encoding="utf-8") as f:
            f.write(text)
        return p

    def cleanup(self) -> None:
        if self.debug:
            print(f"Working directory kept at: {self.base_dir}")
            return
        shutil.rmtree(self.base_dir, ignore_errors=True)

    def __enter__(self) -> "BufferManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
