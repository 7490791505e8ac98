"""HTML rendering for parsed directive trees."""

from __future__ import annotations

import html
from collections.abc import Callable, Iterator

from .constants import CALLOUT_DIRECTIVE, CALLOUT_TITLES, DEFAULT_CALLOUT_TYPE
from .models import AttributeSet, Block, DirectiveBlock, Document, TextBlock

MarkdownRender = Callable[[str], str]


def escape_html(value: str) -> str:
    """Escape text for use in element content and attribute values."""
    return html.escape(value, quote=True)


def callout_title(callout_type: str) -> str:
    """Return the default title for a callout type.

    Known types are matched case-insensitively; anything else is capitalized.

    Examples:
        callout_title("WARNING")  # "Warning"
        callout_title("custom")  # "Custom"
    """
    known = CALLOUT_TITLES.get(callout_type.lower())
    if known is not None:
        return known
    return callout_type[:1].upper() + callout_type[1:]


def render_callout(attrs: AttributeSet, body_html: str) -> str:
    """Render a callout directive as a collapsible ``<details>`` element.

    Recognized pairs are ``type`` (default ``note``), ``title`` (default taken
    from the type) and ``open`` (anything but ``false`` keeps it open). The
    outer class is ``callout <type>`` followed by the directive's classes.

    Args:
        attrs: Attributes from the directive header.
        body_html: Already-rendered body.

    Returns:
        str: Callout HTML.

    Examples:
        render_callout(AttributeSet(pairs={"type": "tip"}), "<p>Hi</p>\\n")
    """
    callout_type = attrs.pairs.get("type") or DEFAULT_CALLOUT_TYPE
    title = attrs.pairs.get("title") or callout_title(callout_type)
    is_open = attrs.pairs.get("open", "true").lower() != "false"

    id_attr = f' id="{escape_html(attrs.id)}"' if attrs.id is not None else ""
    class_value = " ".join(escape_html(token) for token in ["callout", callout_type, *attrs.classes])
    open_attr = " open" if is_open else ""

    return (
        f'<details{id_attr} class="{class_value}"{open_attr}>\n'
        f'<summary class="callout-title">{escape_html(title)}</summary>\n'
        f'<div class="callout-body">{body_html}</div>\n'
        "</details>\n"
    )


def render_div(classes: list[str], element_id: str | None, body_html: str) -> str:
    """Render a plain ``<div>`` container.

    The container is always emitted, even without id or classes, so the body
    is never dropped.

    Examples:
        render_div(["wide", "striped"], "results", "<p>Body</p>\\n")
    """
    id_attr = f' id="{escape_html(element_id)}"' if element_id is not None else ""
    class_attr = ""
    if classes:
        class_attr = f' class="{" ".join(escape_html(token) for token in classes)}"'
    return f"<div{id_attr}{class_attr}>{body_html}</div>\n"


def render_directive(block: DirectiveBlock, body_html: str) -> str:
    """Wrap an already-rendered body according to the directive's kind.

    - ``callout``: collapsible callout.
    - No name: fenced div carrying the header's id and classes.
    - Any other name: ``<div>`` whose class is exactly the name; other
      attributes are ignored until a dedicated renderer exists.
    """
    if block.name == CALLOUT_DIRECTIVE:
        return render_callout(block.attrs, body_html)
    if block.name is None:
        return render_div(block.attrs.classes, block.attrs.id, body_html)
    return render_div([block.name], None, body_html)


class _Frame:
    """A directive whose children are still being rendered."""

    __slots__ = ("block", "children", "parts")

    def __init__(self, block: DirectiveBlock | Document):
        self.block = block
        self.children: Iterator[Block] = iter(block.children)
        self.parts: list[str] = []


def render_block(block: Block | Document, markdown_render: MarkdownRender) -> str:
    """Render a block tree to HTML, children before the directives that wrap them.

    Text runs are converted with `markdown_render` in document order, so any
    heading collection it performs sees headings in the order they appear.
    The walk uses an explicit stack and handles any nesting depth.

    Args:
        block: A text run, a directive, or a whole document.
        markdown_render: ``(markdown) -> html`` converter for text runs.

    Returns:
        str: Rendered HTML. A document renders as the concatenation of its
            top-level blocks.

    Examples:
        render_block(parse_directives("::: callout\\nHi\\n:::\\n"), converter.render)
    """
    if isinstance(block, TextBlock):
        return markdown_render(block.text)

    stack = [_Frame(block)]
    while True:
        frame = stack[-1]
        child = next(frame.children, None)
        if child is None:
            stack.pop()
            body_html = "".join(frame.parts)
            if isinstance(frame.block, Document):
                rendered = body_html
            else:
                rendered = render_directive(frame.block, body_html)
            if not stack:
                return rendered
            stack[-1].parts.append(rendered)
        elif isinstance(child, TextBlock):
            frame.parts.append(markdown_render(child.text))
        else:
            stack.append(_Frame(child))
