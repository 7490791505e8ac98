from __future__ import annotations

import pytest

from directive_markdown.models import AttributeSet, DirectiveBlock, TextBlock
from directive_markdown.parser import parse_directives
from directive_markdown.render import (
    callout_title,
    render_block,
    render_callout,
    render_directive,
    render_div,
)


def _fake_markdown(text: str) -> str:
    return f"<p>{text.strip()}</p>\n"


def test_callout_closed_with_custom_title():
    attrs = AttributeSet(pairs={"type": "warning", "open": "false", "title": "Careful"})

    html = render_callout(attrs, "<p>Body</p>\n")

    assert html == (
        '<details class="callout warning">\n'
        '<summary class="callout-title">Careful</summary>\n'
        '<div class="callout-body"><p>Body</p>\n</div>\n'
        "</details>\n"
    )
    assert " open" not in html


def test_callout_defaults_to_open_note():
    html = render_callout(AttributeSet(), "")

    assert html.startswith('<details class="callout note" open>\n')
    assert '<summary class="callout-title">Note</summary>' in html


@pytest.mark.parametrize("value", ["FALSE", "False", "false"])
def test_callout_open_false_is_case_insensitive(value: str):
    html = render_callout(AttributeSet(pairs={"open": value}), "")

    assert " open>" not in html


@pytest.mark.parametrize("value", ["true", "no", "0", ""])
def test_callout_other_open_values_stay_open(value: str):
    html = render_callout(AttributeSet(pairs={"open": value}), "")

    assert '<details class="callout note" open>' in html


def test_callout_with_id_and_extra_classes():
    attrs = AttributeSet(id="tip-1", classes=["wide"], pairs={"type": "tip"})

    html = render_callout(attrs, "")

    assert html.startswith('<details id="tip-1" class="callout tip wide" open>\n')
    assert '<summary class="callout-title">Tip</summary>' in html


def test_callout_escapes_attribute_values():
    attrs = AttributeSet(pairs={"type": 'x"y', "title": "<b>Bold</b>"})

    html = render_callout(attrs, "")

    assert 'class="callout x&quot;y"' in html
    assert "&lt;b&gt;Bold&lt;/b&gt;" in html


def test_callout_title_lookup():
    assert callout_title("WARNING") == "Warning"
    assert callout_title("tip") == "Tip"
    assert callout_title("custom") == "Custom"


def test_render_div_with_id_and_classes():
    assert (
        render_div(["wide", "striped"], "results", "<p>Body</p>\n")
        == '<div id="results" class="wide striped"><p>Body</p>\n</div>\n'
    )


def test_render_div_without_attributes_keeps_body():
    assert render_div([], None, "<p>Body</p>\n") == "<div><p>Body</p>\n</div>\n"


def test_unknown_directive_uses_name_as_only_class():
    block = DirectiveBlock(
        name="custom-type",
        attrs=AttributeSet(id="ignored", classes=["also-ignored"], pairs={"k": "v"}),
    )

    assert render_directive(block, "<p>X</p>\n") == '<div class="custom-type"><p>X</p>\n</div>\n'


def test_render_block_text_run():
    assert render_block(TextBlock("Hello\n"), _fake_markdown) == "<p>Hello</p>\n"


def test_render_block_document_concatenates_top_level_blocks():
    document = parse_directives("A\n::: {.box}\nB\n:::\nC\n")

    assert render_block(document, _fake_markdown) == (
        "<p>A</p>\n" '<div class="box"><p>B</p>\n</div>\n' "<p>C</p>\n"
    )


def test_render_block_nested_callout_and_div():
    document = parse_directives(
        ':::: callout {type=warning open=false title="Careful"}\n'
        "Outer\n"
        "::: {#results .wide .striped}\n"
        "Inner\n"
        ":::\n"
        "::::\n"
    )

    assert render_block(document, _fake_markdown) == (
        '<details class="callout warning">\n'
        '<summary class="callout-title">Careful</summary>\n'
        '<div class="callout-body"><p>Outer</p>\n'
        '<div id="results" class="wide striped"><p>Inner</p>\n</div>\n'
        "</div>\n"
        "</details>\n"
    )


def test_render_block_converts_text_in_document_order():
    seen: list[str] = []

    def _recording_markdown(text: str) -> str:
        seen.append(text.strip())
        return ""

    document = parse_directives("one\n::: a\ntwo\n::: b\nthree\n:::\nfour\n:::\nfive\n")
    render_block(document, _recording_markdown)

    assert seen == ["one", "two", "three", "four", "five"]


def test_render_block_handles_deep_nesting():
    depth = 5000
    document = parse_directives("::: box\n" * depth + "core\n")

    html = render_block(document, _fake_markdown)

    assert html.count('<div class="box">') == depth
    assert "<p>core</p>" in html
