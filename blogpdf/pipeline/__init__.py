"""High-level orchestration over many documents."""

from .batch import (
    build_all,
    compile_if_stale,
    find_posts,
)

__all__ = [
    "build_all",
    "compile_if_stale",
    "find_posts",
]
