import pytest

from preview import (
    PREVIEW_MAX_CHARS,
    build_preview,
    first_paragraphs,
    markdown_to_html,
    select_preview_source,
    strip_leading_boilerplate,
)

BOILERPLATE_SAMPLES = [
    "# Title\n\nBody",
    "\n\n# T\n[TOC]\n\n## Sub\n\nText\n",
    "Intro\n# H\n\nX",
    "# Only heading",
    "# Title\n!!! note\n\nReal text.",
    "",
    "\n\n\n",
]


def test_markdown_to_html_renders_paragraph():
    assert markdown_to_html("Hello world.") == "<p>Hello world.</p>"
    assert markdown_to_html("   ") == ""


def test_strip_heading_block():
    assert strip_leading_boilerplate("# Title\n\nBody") == "Body"


def test_strip_consecutive_heading_blocks():
    assert strip_leading_boilerplate("\n\n# T\n[TOC]\n\n## Sub\n\nText\n") == "Text\n"


def test_strip_keeps_text_before_first_heading():
    assert strip_leading_boilerplate("Intro\n# H\n\nX") == "Intro\n# H\n\nX"


def test_strip_keeps_heading_without_following_blank_line():
    assert strip_leading_boilerplate("# Only heading") == "# Only heading"


def test_strip_drops_admonition_lines_in_heading_block():
    assert strip_leading_boilerplate("# Title\n!!! note\n\nReal text.") == "Real text."


@pytest.mark.parametrize("text", BOILERPLATE_SAMPLES)
def test_strip_is_idempotent(text):
    once = strip_leading_boilerplate(text)
    assert strip_leading_boilerplate(once) == once


def test_select_summary_for_short_body():
    assert select_preview_source("  short  ", "Sum", 80) == "Sum"


def test_select_body_when_long_enough():
    body = "x" * 80
    assert select_preview_source(f"\n{body}\n", "Sum", 80) == body


def test_select_body_without_summary():
    assert select_preview_source("  short  ", None, 80) == "short"


def test_select_body_when_threshold_is_zero():
    assert select_preview_source("", "Sum", 0) == ""


def test_first_paragraphs_skips_non_paragraph_blocks():
    html = (
        "<h1>T</h1>\n<p>a</p>\n<pre><code>x\n</code></pre>\n"
        "<p>b</p>\n<p>c</p>\n<p>d</p>"
    )
    assert first_paragraphs(html, 3) == "<p>a</p><p>b</p><p>c</p>"


def test_first_paragraphs_ignores_nested_paragraphs():
    html = "<blockquote>\n<p>quoted</p>\n</blockquote>\n<p>top</p>"
    assert first_paragraphs(html, 3) == "<p>top</p>"


def test_first_paragraphs_keeps_markup_verbatim():
    html = '<p>See <a href="https://example.com/x">this</a> &amp; <em>that</em>.</p>'
    assert first_paragraphs(html, 3) == html


def test_first_paragraphs_without_paragraphs_returns_input():
    html = "<ul>\n<li>x</li>\n</ul>"
    assert first_paragraphs(html, 3) == html


def test_preview_from_body():
    assert build_preview("# Post A\n\nHello world.\n") == "<p>Hello world.</p>"


def test_preview_limits_paragraphs():
    body = "First para.\n\nSecond para.\n\nThird para.\n\nFourth para."
    assert build_preview(body) == "<p>First para.</p><p>Second para.</p><p>Third para.</p>"


def test_preview_from_summary_when_body_empty():
    assert build_preview("", "Custom summary.") == "<p>Custom summary.</p>"


def test_preview_empty_source_is_empty():
    assert build_preview("", None) == ""
    assert build_preview("\n\n", None) == ""


@pytest.mark.parametrize("char", ["é", "中", "😀"])
def test_preview_capped_on_character_boundary(char):
    preview = build_preview(char * 1000)
    assert len(preview) == PREVIEW_MAX_CHARS
    assert preview.startswith("<p>")
    assert preview.encode("utf-8").decode("utf-8") == preview
    assert "\ufffd" not in preview


def test_full_preview_renders_whole_body():
    body = "# T\n\nA\n\nB\n\nC\n\nD\n"
    preview = build_preview(body, "ignored", full_preview=True)
    assert "<h1>T</h1>" in preview
    assert "<p>D</p>" in preview


def test_full_preview_is_not_capped():
    preview = build_preview("x" * 2000, full_preview=True)
    assert len(preview) > PREVIEW_MAX_CHARS
