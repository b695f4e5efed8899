import json
import os
from dataclasses import dataclass, field
from typing import List, Optional

from blogpdf.fonts import usable_fonts

CONFIG_RELATIVE_PATH = os.path.join("config", "pdf.json")

DEFAULT_AUTHOR = "Emil Lindfors"


@dataclass
class Settings:
    root: str
    typst_path: str = "typst"
    font_paths: List[str] = field(default_factory=list)
    output_dir: str = ""
    template: Optional[str] = None
    author: str = DEFAULT_AUTHOR
    description_as_abstract: bool = False


def _resolve_path(base: str, relative: str) -> str:
    return os.path.abspath(os.path.join(base, relative))


def default_settings(root: str) -> Settings:
    return Settings(
        root=root,
        font_paths=[_resolve_path(root, os.path.join("fonts", "inter")), _resolve_path(root, os.path.join("fonts", "literata"))],
        output_dir=_resolve_path(root, os.path.join("static", "pdf")),
    )


def load_settings(root: Optional[str] = None, path: Optional[str] = None) -> Settings:
    """Load PDF build settings from config/pdf.json under the site root.

    Missing or unreadable config is not fatal: a warning is printed and
    defaults are used. Relative paths resolve against the site root.
    """
    project_root = os.path.abspath(root or os.getcwd())
    settings = default_settings(project_root)
    cfg_path = path or os.path.join(project_root, CONFIG_RELATIVE_PATH)

    if not os.path.exists(cfg_path):
        if path:
            print(f"Warning: config not found at {cfg_path}; using defaults")
        return settings

    try:
        with open(cfg_path, "r", encoding="utf-8") as cfg_file:
            cfg = json.load(cfg_file) or {}
    except (OSError, ValueError) as exc:
        print(f"Warning: Could not load settings from {cfg_path}: {exc}")
        return settings

    typst_path = cfg.get("typst_path")
    if typst_path:
        # bare command names are looked up on PATH
        settings.typst_path = _resolve_path(project_root, typst_path) if os.sep in typst_path or "/" in typst_path else typst_path

    font_paths = cfg.get("font_paths")
    if isinstance(font_paths, list):
        settings.font_paths = [_resolve_path(project_root, p) for p in font_paths if p]

    output_rel = cfg.get("output_dir")
    if output_rel:
        settings.output_dir = _resolve_path(project_root, output_rel)

    template_rel = cfg.get("template")
    if template_rel:
        candidate = _resolve_path(project_root, template_rel)
        if os.path.isfile(candidate):
            settings.template = candidate
        else:
            print(f"Warning: Template from config does not exist: {candidate}; using the bundled template")

    if "author" in cfg and cfg["author"]:
        settings.author = str(cfg["author"])

    settings.description_as_abstract = bool(cfg.get("description_as_abstract", False))
    return settings


def check_fonts(settings: Settings) -> List[str]:
    """Warn about font directories Typst would find no usable font in."""
    problems: List[str] = []
    for font_dir in settings.font_paths:
        if not os.path.isdir(font_dir):
            problems.append(f"Font path does not exist or is not a directory: {font_dir}")
        elif not usable_fonts(font_dir):
            problems.append(f"No loadable fonts (.ttf/.otf/.ttc) in: {font_dir}")
    for msg in problems:
        print(f"Warning: {msg}")
    return problems
