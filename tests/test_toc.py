from __future__ import annotations

from directive_markdown.models import HeadingRecord
from directive_markdown.toc import build_toc, filter_headings, render_toc_html


def _headings(*levels: int) -> list[HeadingRecord]:
    return [
        HeadingRecord(level=level, text=f"H{index}", slug=f"h{index}")
        for index, level in enumerate(levels)
    ]


def test_build_toc_shape():
    toc = build_toc(_headings(1, 2, 2, 3, 1))

    assert len(toc) == 2
    first, second = toc
    assert [child.heading.slug for child in first.children] == ["h1", "h2"]
    assert first.children[0].children == []
    assert [child.heading.slug for child in first.children[1].children] == ["h3"]
    assert second.heading.slug == "h4"
    assert second.children == []


def test_build_toc_empty():
    assert build_toc([]) == []


def test_skipped_levels_nest_directly():
    toc = build_toc(_headings(1, 3, 2))

    assert len(toc) == 1
    assert [child.heading.level for child in toc[0].children] == [3, 2]


def test_document_starting_below_top_level():
    toc = build_toc(_headings(3, 2, 1))

    assert [node.heading.level for node in toc] == [3, 2, 1]


def test_build_toc_preserves_every_heading():
    headings = _headings(2, 4, 3, 2, 6, 1, 2)
    seen: list[HeadingRecord] = []
    pending = list(reversed(build_toc(headings)))
    while pending:
        node = pending.pop()
        seen.append(node.heading)
        pending.extend(reversed(node.children))

    assert seen == headings


def test_filter_headings():
    headings = _headings(1, 2, 3, 4)

    assert [heading.level for heading in filter_headings(headings, 2, 3)] == [2, 3]
    assert filter_headings(headings) == headings


def test_render_toc_html():
    toc = build_toc(
        [
            HeadingRecord(level=1, text="Guide", slug="guide"),
            HeadingRecord(level=2, text="Install & run", slug="install-run"),
            HeadingRecord(level=1, text="FAQ", slug="faq"),
        ]
    )

    assert render_toc_html(toc) == (
        '<nav class="toc">\n'
        "  <ul>\n"
        '    <li><a href="#guide">Guide</a>\n'
        "      <ul>\n"
        '        <li><a href="#install-run">Install &amp; run</a></li>\n'
        "      </ul>\n"
        "    </li>\n"
        '    <li><a href="#faq">FAQ</a></li>\n'
        "  </ul>\n"
        "</nav>\n"
    )


def test_render_toc_html_custom_class():
    toc = build_toc(_headings(2))

    assert render_toc_html(toc, "page-toc").startswith('<nav class="page-toc">\n')


def test_render_toc_html_empty():
    assert render_toc_html([]) == ""
