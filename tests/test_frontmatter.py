from blogpdf.docs.frontmatter import (
    format_date,
    parse_metadata,
    read_source,
    split_frontmatter,
)


POST = """+++
title = "Test Post"
date = 2024-01-15
description = "A short summary"

[extra]
featured_image = "hero.webp"
+++

# Heading

Body text.
"""


def test_split_frontmatter_well_formed():
    meta, body, found = split_frontmatter(POST)
    assert found
    assert 'title = "Test Post"' in meta
    assert "+++" not in meta
    assert body.lstrip().startswith("# Heading")


def test_split_frontmatter_missing_delimiters_keeps_whole_body():
    text = "# Just a heading\n\nNo metadata here."
    meta, body, found = split_frontmatter(text)
    assert not found
    assert meta == ""
    assert body == text


def test_split_frontmatter_unclosed_section_is_lenient():
    text = "+++\ntitle = \"Oops\"\n\nBody without closing delimiter"
    meta, body, found = split_frontmatter(text)
    assert not found
    assert meta == ""
    assert body == text


def test_split_frontmatter_delimiter_must_open_document():
    text = "Intro line\n+++\ntitle = \"x\"\n+++\nrest"
    _meta, body, found = split_frontmatter(text)
    assert not found
    assert body == text


def test_parse_metadata_extracts_literal_values():
    meta, _body, _found = split_frontmatter(POST)
    md = parse_metadata(meta)
    assert md.title == "Test Post"
    assert md.date == "2024-01-15"
    assert md.featured_image == "hero.webp"
    assert md.description == "A short summary"


def test_parse_metadata_defaults_when_empty():
    md = parse_metadata("")
    assert md.title == "Untitled"
    assert md.date == ""
    assert md.featured_image is None


def test_parse_metadata_first_match_wins_and_unknown_keys_ignored():
    md = parse_metadata('title = "First"\ntitle = "Second"\ntemplate = "page.html"\nweight = 3')
    assert md.title == "First"


def test_parse_metadata_quote_styles_and_comments():
    md = parse_metadata("title = 'Single quoted' # note\ndate = 2023-05-02 # published\nfeatured-image = \"a \\\"b\\\".png\"")
    assert md.title == "Single quoted"
    assert md.date == "2023-05-02"
    assert md.featured_image == 'a "b".png'


def test_format_date_reformats_known_shapes():
    assert format_date("2024-01-15") == "January 15, 2024"
    assert format_date("2024-01-15T10:30:00Z") == "January 15, 2024"
    assert format_date("2024-01-15T10:30:00+02:00") == "January 15, 2024"
    assert format_date("2024/03/09") == "March 09, 2024"


def test_format_date_keeps_unparseable_value():
    assert format_date("sometime in spring") == "sometime in spring"
    assert format_date("") == ""


def test_read_source_records_missing_fields(tmp_path):
    post = tmp_path / "index.md"
    post.write_text("+++\ntitle = \"Only title\"\n+++\nbody\n", encoding="utf-8")
    src = read_source(str(post))
    assert src.has_metadata
    assert src.metadata.title == "Only title"
    assert src.missing_fields == ["date"]
    assert "Only title" in src.meta_text


def test_read_source_without_metadata_uses_defaults(tmp_path):
    post = tmp_path / "index.md"
    post.write_text("Hello world\n", encoding="utf-8")
    src = read_source(str(post))
    assert not src.has_metadata
    assert src.metadata.title == "Untitled"
    assert src.metadata.date == ""
    assert src.missing_fields == ["title", "date"]
    assert src.body == "Hello world\n"
