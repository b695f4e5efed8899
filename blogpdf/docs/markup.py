"""Body normalization: rewrite web-only constructs for the Typst renderer.

Each rule maps one line to its rewritten form (``None`` drops the line).
Rules are idempotent and do not depend on each other's order. Lines inside
fenced code blocks are passed through untouched.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator, List, Optional, Tuple

Rule = Callable[[str], Optional[str]]

_MORE_RE = re.compile(r"^\s*<!--\s*more\s*-->\s*$")
_XREF_RE = re.compile(r"\[([A-Za-z0-9 ]+)\]\(#ref-[^)]+\)")
_REF_P_OPEN_RE = re.compile(r"<p\b[^>]*\bclass=\"reference\"[^>]*>")
_P_CLOSE_RE = re.compile(r"</p>")
_EM_RE = re.compile(r"</?(?:em|i)>")
_STRONG_RE = re.compile(r"</?(?:strong|b)>")
_ANCHOR_RE = re.compile(r"<a\s+href=\"([^\"]+)\"[^>]*>([^<]+)</a>")
_FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
_FENCE_CLOSE_RE = re.compile(r"^\s*(`{3,}|~{3,})\s*$")


def strip_more_separator(line: str) -> Optional[str]:
    """Drop the ``<!-- more -->`` summary separator."""
    if _MORE_RE.match(line):
        return None
    return line


def unlink_cross_references(line: str) -> Optional[str]:
    """``[3](#ref-smith2020)`` -> ``3``; the referenced entry is on the same page."""
    return _XREF_RE.sub(r"\1", line)


def reference_paragraphs(line: str) -> Optional[str]:
    """Reference-list paragraphs become list items."""
    line = _REF_P_OPEN_RE.sub("- ", line)
    return _P_CLOSE_RE.sub("", line)


def inline_html(line: str) -> Optional[str]:
    """Emphasis and anchor tags to their markdown forms."""
    line = _STRONG_RE.sub("**", line)
    line = _EM_RE.sub("*", line)
    return _ANCHOR_RE.sub(r"[\2](\1)", line)


RULES: List[Tuple[str, Rule]] = [
    ("strip_more_separator", strip_more_separator),
    ("unlink_cross_references", unlink_cross_references),
    ("reference_paragraphs", reference_paragraphs),
    ("inline_html", inline_html),
]


def iter_segments(body: str) -> Iterator[Tuple[bool, str]]:
    """Yield (in_code, line) pairs, tracking fenced code blocks."""
    fence: Optional[str] = None
    for line in body.split("\n"):
        m = _FENCE_RE.match(line)
        if fence is None:
            if m:
                fence = m.group(1)
                yield True, line
                continue
            yield False, line
        else:
            yield True, line
            # closes only on a bare run of the same character, at least as long
            close = _FENCE_CLOSE_RE.match(line)
            if close and close.group(1)[0] == fence[0] and len(close.group(1)) >= len(fence):
                fence = None


def apply_rules(line: str, rules: List[Tuple[str, Rule]]) -> Optional[str]:
    current: Optional[str] = line
    for _name, rule in rules:
        if current is None:
            break
        current = rule(current)
    return current


def normalize_markup(body: str, rules: Optional[List[Tuple[str, Rule]]] = None) -> str:
    active = RULES if rules is None else rules
    out: List[str] = []
    for in_code, line in iter_segments(body or ""):
        if in_code:
            out.append(line)
            continue
        rewritten = apply_rules(line, active)
        if rewritten is not None:
            out.append(rewritten)
    return "\n".join(out)
