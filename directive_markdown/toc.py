"""Table of contents construction from collected headings."""

from __future__ import annotations

from .models import HeadingRecord, TocNode
from .render import escape_html


def filter_headings(
    headings: list[HeadingRecord], min_level: int = 1, max_level: int = 6
) -> list[HeadingRecord]:
    """Keep headings whose level lies within ``[min_level, max_level]``.

    Examples:
        filter_headings(headings, min_level=2, max_level=3)
    """
    return [heading for heading in headings if min_level <= heading.level <= max_level]


def build_toc(headings: list[HeadingRecord]) -> list[TocNode]:
    """Rebuild the heading hierarchy from a flat, ordered heading list.

    Each heading nests under the closest preceding heading with a smaller
    level. Skipped levels are not filled in: a level-3 heading right after a
    level-1 heading becomes its direct child.

    Args:
        headings: Headings in document order.

    Returns:
        list[TocNode]: Root nodes in document order.

    Examples:
        build_toc([HeadingRecord(1, "A", "a"), HeadingRecord(2, "B", "b")])
    """
    roots: list[TocNode] = []
    stack: list[tuple[int, TocNode]] = []

    for heading in headings:
        while stack and stack[-1][0] >= heading.level:
            stack.pop()

        node = TocNode(heading=heading)
        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)
        stack.append((heading.level, node))

    return roots


def _render_list(nodes: list[TocNode], depth: int, lines: list[str]) -> None:
    indent = "  " * depth
    lines.append(f"{indent}<ul>")
    for node in nodes:
        link = (
            f'<a href="#{escape_html(node.heading.slug)}">{escape_html(node.heading.text)}</a>'
        )
        if node.children:
            lines.append(f"{indent}  <li>{link}")
            _render_list(node.children, depth + 2, lines)
            lines.append(f"{indent}  </li>")
        else:
            lines.append(f"{indent}  <li>{link}</li>")
    lines.append(f"{indent}</ul>")


def render_toc_html(toc: list[TocNode], css_class: str = "toc") -> str:
    """Render a table-of-contents forest as a ``<nav>`` of nested lists.

    Args:
        toc: Root nodes from `build_toc`.
        css_class: Class placed on the ``<nav>`` element.

    Returns:
        str: Navigation HTML, or an empty string when `toc` is empty.

    Examples:
        render_toc_html(build_toc(result.headings))
    """
    if not toc:
        return ""

    lines = [f'<nav class="{escape_html(css_class)}">']
    _render_list(toc, 1, lines)
    lines.append("</nav>")
    return "\n".join(lines) + "\n"
