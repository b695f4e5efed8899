import json
import os

from blogpdf.config import DEFAULT_AUTHOR, check_fonts, load_settings
from blogpdf.fonts import font_is_loadable, usable_fonts


def test_defaults_without_config(tmp_path):
    s = load_settings(root=str(tmp_path))
    assert s.root == str(tmp_path)
    assert s.typst_path == "typst"
    assert s.output_dir == os.path.join(str(tmp_path), "static", "pdf")
    assert s.font_paths == [
        os.path.join(str(tmp_path), "fonts", "inter"),
        os.path.join(str(tmp_path), "fonts", "literata"),
    ]
    assert s.author == DEFAULT_AUTHOR
    assert s.template is None
    assert s.description_as_abstract is False


def test_config_values_resolve_against_root(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "tpl.typ").write_text("#let academic(body) = body", encoding="utf-8")
    (tmp_path / "config" / "pdf.json").write_text(json.dumps({
        "typst_path": "bin/typst",
        "font_paths": ["assets/fonts"],
        "output_dir": "public/pdf",
        "template": "tpl.typ",
        "author": "Jane Doe",
        "description_as_abstract": True,
    }), encoding="utf-8")
    s = load_settings(root=str(tmp_path))
    assert s.typst_path == os.path.join(str(tmp_path), "bin", "typst")
    assert s.font_paths == [os.path.join(str(tmp_path), "assets", "fonts")]
    assert s.output_dir == os.path.join(str(tmp_path), "public", "pdf")
    assert s.template == os.path.join(str(tmp_path), "tpl.typ")
    assert s.author == "Jane Doe"
    assert s.description_as_abstract is True


def test_invalid_config_falls_back_with_warning(tmp_path, capsys):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "pdf.json").write_text("{not json", encoding="utf-8")
    s = load_settings(root=str(tmp_path))
    assert s.typst_path == "typst"
    assert "Warning" in capsys.readouterr().out


def test_missing_template_in_config_keeps_bundled(tmp_path, capsys):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "pdf.json").write_text(json.dumps({"template": "missing.typ"}), encoding="utf-8")
    s = load_settings(root=str(tmp_path))
    assert s.template is None
    assert "Template from config does not exist" in capsys.readouterr().out


def test_check_fonts_reports_missing_and_empty_dirs(tmp_path):
    empty = tmp_path / "fonts" / "inter"
    empty.mkdir(parents=True)
    (empty / "readme.txt").write_text("no fonts", encoding="utf-8")
    s = load_settings(root=str(tmp_path))
    problems = check_fonts(s)
    assert len(problems) == 2
    assert "No loadable fonts" in problems[0]
    assert "does not exist" in problems[1]


def test_font_helpers_reject_non_fonts(tmp_path):
    bogus = tmp_path / "Fake.ttf"
    bogus.write_bytes(b"\x00\x01garbage")
    assert font_is_loadable(str(bogus)) is False
    assert usable_fonts(str(tmp_path)) == []
    assert usable_fonts(str(tmp_path / "missing")) == []
