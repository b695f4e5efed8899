import os
import subprocess

import pytest

from blogpdf.docs.model import Metadata, PreparedDocument
from blogpdf.docs.typst_io import (
    DEFAULT_TEMPLATE,
    RenderError,
    build_entry_document,
    compile_typst,
    install_template,
    typst_string,
)


def _prepared(**kwargs):
    meta = Metadata(title=kwargs.pop("title", "Test Post"), date=kwargs.pop("date", "January 15, 2024"))
    return PreparedDocument(slug="test-post", metadata=meta, body="# Heading", **kwargs)


def test_typst_string_escapes_quotes_and_backslashes():
    assert typst_string('Say "hi"') == '"Say \\"hi\\""'
    assert typst_string("a\\b") == '"a\\\\b"'


def test_entry_document_has_imports_and_parameters():
    doc = build_entry_document(_prepared(featured_image="hero.png"), author="Jane Doe")
    assert '#import "academic.typ": academic' in doc
    assert "@preview/cmarker" in doc
    assert "@preview/mitex" in doc
    assert '  title: "Test Post",' in doc
    assert '  author: "Jane Doe",' in doc
    assert '  date: "January 15, 2024",' in doc
    assert '  featured-image: "hero.png",' in doc
    assert 'read("content.md")' in doc
    assert "smart-punctuation: true" in doc


def test_entry_document_omits_absent_parameters():
    doc = build_entry_document(_prepared(date=""), author=None)
    assert "featured-image" not in doc
    assert "date:" not in doc
    assert "author:" not in doc
    assert "abstract:" not in doc


def test_entry_document_includes_abstract_when_given():
    doc = build_entry_document(_prepared(abstract="Short summary"))
    assert '  abstract: "Short summary",' in doc


def test_bundled_template_defines_academic():
    assert os.path.isfile(DEFAULT_TEMPLATE)
    with open(DEFAULT_TEMPLATE, "r", encoding="utf-8") as f:
        src = f.read()
    assert "#let academic(" in src
    assert "numbering: none" in src
    assert 'featured-image: none' in src
    assert "show image: it => align(center, block(width: 85%, align(center, it)))" in src


def test_install_template_copies_into_work_dir(tmp_path):
    dst = install_template(str(tmp_path))
    assert os.path.basename(dst) == "academic.typ"
    assert os.path.isfile(dst)


def test_install_template_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        install_template(str(tmp_path), str(tmp_path / "nope.typ"))


def test_compile_typst_builds_command(monkeypatch, tmp_path):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    out = compile_typst("doc.typ", "out.pdf", typst_path="typst", font_paths=["/f/inter", "/f/literata"])
    assert out == "out.pdf"
    assert seen["cmd"] == [
        "typst", "compile",
        "--font-path", "/f/inter",
        "--font-path", "/f/literata",
        "doc.typ", "out.pdf",
    ]


def test_compile_typst_failure_raises_render_error(monkeypatch):
    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="error: unexpected token\n  ┌─ content.md:3:1")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(RenderError) as exc:
        compile_typst("doc.typ", "out.pdf")
    assert "content.md:3:1" in str(exc.value)


def test_compile_typst_missing_binary_raises_render_error():
    with pytest.raises(RenderError):
        compile_typst("doc.typ", "out.pdf", typst_path="definitely-not-a-real-typst-binary")
