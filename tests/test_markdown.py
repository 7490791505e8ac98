from __future__ import annotations

import pytest

from directive_markdown.markdown import MarkdownConverter, plain_text
from directive_markdown.models import HeadingRecord
from directive_markdown.slugify import HeadingCollector


def _tagging_highlighter(lang: str | None, code: str) -> str:
    return f"[{lang}|{code}]"


@pytest.fixture()
def converter() -> MarkdownConverter:
    return MarkdownConverter(highlighter=_tagging_highlighter)


def test_headings_get_ids_and_are_collected(converter: MarkdownConverter):
    collector = HeadingCollector()

    html = converter.render("# Setup\n\n## Setup\n", collector)

    assert html == '<h1 id="setup">Setup</h1>\n<h2 id="setup-1">Setup</h2>\n'
    assert collector.headings == [
        HeadingRecord(level=1, text="Setup", slug="setup"),
        HeadingRecord(level=2, text="Setup", slug="setup-1"),
    ]


def test_collector_is_shared_across_runs(converter: MarkdownConverter):
    collector = HeadingCollector()
    render = converter.bind(collector)

    render("## Usage\n")
    html = render("## Usage\n")

    assert html == '<h2 id="usage-1">Usage</h2>\n'
    assert [heading.slug for heading in collector.headings] == ["usage", "usage-1"]


def test_explicit_heading_id(converter: MarkdownConverter):
    collector = HeadingCollector()

    html = converter.render("## Results {#custom}\n\n## Custom\n", collector)

    assert '<h2 id="custom">Results</h2>' in html
    assert '<h2 id="custom-1">Custom</h2>' in html
    assert collector.headings[0] == HeadingRecord(level=2, text="Results", slug="custom")


def test_heading_text_drops_inline_markup(converter: MarkdownConverter):
    collector = HeadingCollector()

    converter.render("## Use `pip` *now*\n", collector)

    assert collector.headings == [HeadingRecord(level=2, text="Use pip now", slug="use-pip-now")]


def test_setext_headings_are_collected(converter: MarkdownConverter):
    collector = HeadingCollector()

    converter.render("Title\n=====\n", collector)

    assert collector.headings == [HeadingRecord(level=1, text="Title", slug="title")]


def test_render_without_collector_uses_fresh_one(converter: MarkdownConverter):
    assert converter.render("# A\n") == '<h1 id="a">A</h1>\n'
    assert converter.render("# A\n") == '<h1 id="a">A</h1>\n'


def test_fenced_code_uses_highlighter(converter: MarkdownConverter):
    assert converter.render("```py\nx = 1\n```\n") == "[py|x = 1\n]"


def test_fence_without_info_passes_none(converter: MarkdownConverter):
    assert converter.render("~~~\nplain\n~~~\n") == "[None|plain\n]"


def test_indented_code_uses_highlighter(converter: MarkdownConverter):
    assert converter.render("    indented\n") == "[None|indented\n]"


def test_block_image_becomes_figure(converter: MarkdownConverter):
    html = converter.render("![A cat](cat.png)\n")

    assert html == (
        "<figure>\n"
        '<img src="cat.png" alt="A cat" loading="lazy" />\n'
        "<figcaption>A cat</figcaption>\n"
        "</figure>\n"
    )


def test_inline_image_stays_inline(converter: MarkdownConverter):
    html = converter.render('See ![icon](i.svg "Icon") here\n')

    assert html == (
        '<p>See <img src="i.svg" alt="icon" title="Icon" loading="lazy" /> here</p>\n'
    )


def test_custom_image_renderer():
    calls = []

    def _image(alt, src, title, is_block):
        calls.append((alt, src, title, is_block))
        return "IMG"

    converter = MarkdownConverter(image_renderer=_image)
    converter.render("![solo](a.png)\n\nText ![inline](b.png)\n")

    assert calls == [("solo", "a.png", None, True), ("inline", "b.png", None, False)]


def test_gfm_extensions(converter: MarkdownConverter):
    html = converter.render("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~\n")

    assert "<table>" in html
    assert "<s>gone</s>" in html


def test_task_lists(converter: MarkdownConverter):
    html = converter.render("- [x] done\n- [ ] todo\n")

    assert 'type="checkbox"' in html
    assert "checked" in html


def test_footnotes(converter: MarkdownConverter):
    html = converter.render("Text[^1]\n\n[^1]: A note.\n")

    assert 'class="footnote-ref"' in html
    assert "A note." in html


def test_footnote_anchors_are_prefixed_after_first_run(converter: MarkdownConverter):
    render = converter.bind(HeadingCollector())

    first = render("A[^1]\n\n[^1]: One.\n")
    second = render("B[^1]\n\n[^1]: Two.\n")

    assert 'href="#fn1" id="fnref1"' in first
    assert '<li id="fn1" class="footnote-item">' in first
    assert 'href="#fn-2-1" id="fnref-2-1"' in second
    assert '<li id="fn-2-1" class="footnote-item">' in second


def test_math(converter: MarkdownConverter):
    html = converter.render("Euler: $e^{i\\pi}$\n")

    assert 'class="math inline"' in html


def test_raw_html_passthrough_can_be_disabled():
    allowed = MarkdownConverter(allow_html=True).render("<b>bold</b>\n")
    escaped = MarkdownConverter(allow_html=False).render("<b>bold</b>\n")

    assert "<b>bold</b>" in allowed
    assert "&lt;b&gt;bold&lt;/b&gt;" in escaped


def test_plain_text_flattens_inline_tokens(converter: MarkdownConverter):
    inline = converter.md.parseInline("Use `pip`  \n*now*")[0]

    assert plain_text(inline.children or []) == "Use pip now"
