from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

NATIVE_FORMATS = ("png", "jpg", "jpeg", "gif", "svg")
CONVERTIBLE_FORMATS = ("webp",)
CONVERT_TO = "png"
THUMB_MARKER = "-thumb"


@dataclass
class Metadata:
    title: str = "Untitled"
    date: str = ""
    featured_image: Optional[str] = None
    description: Optional[str] = None


@dataclass
class SourceDocument:
    path: str
    metadata: Metadata
    body: str
    has_metadata: bool = False
    missing_fields: List[str] = field(default_factory=list)
    meta_text: str = ""


@dataclass
class Asset:
    name: str
    src_path: str

    @property
    def fmt(self) -> str:
        return os.path.splitext(self.name)[1].lstrip(".").lower()

    @property
    def stem(self) -> str:
        return os.path.splitext(self.name)[0]

    @property
    def is_native(self) -> bool:
        return self.fmt in NATIVE_FORMATS

    @property
    def is_convertible(self) -> bool:
        return self.fmt in CONVERTIBLE_FORMATS

    @property
    def is_thumbnail(self) -> bool:
        return THUMB_MARKER in self.stem


@dataclass
class ResolvedAssets:
    copied: List[str] = field(default_factory=list)
    # original name -> name present in the working set
    converted: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    def resolve(self, name: str) -> str:
        return self.converted.get(name, name)


@dataclass
class PreparedDocument:
    slug: str
    metadata: Metadata
    body: str
    featured_image: Optional[str] = None
    abstract: Optional[str] = None
    notes: List[str] = field(default_factory=list)
