"""Data models for directive-markdown."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class ParserState(Enum):
    """Parser states used while scanning document lines.

    Attributes:
        NORMAL: Directive fences are recognized.
        IN_FENCED_CODE: Inside a backtick or tilde code fence; every line is
            copied verbatim and directive fences are ignored.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()


@dataclass
class ParserContext:
    """Code-fence state carried between lines.

    Attributes:
        state: Current parser state.
        fence_char: Fence character (`` ` `` or ``~``) that opened the code block.
        fence_length: Number of fence characters that opened the code block.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0


@dataclass
class AttributeSet:
    """Attributes parsed from a directive header.

    Attributes:
        id: Element id; the first ``#id`` token wins.
        classes: Class tokens in source order, duplicates preserved.
        pairs: ``key=value`` pairs in insertion order; the last write wins.
    """

    id: str | None = None
    classes: list[str] = field(default_factory=list)
    pairs: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return self.id is None and not self.classes and not self.pairs


@dataclass
class TextBlock:
    """A run of raw Markdown between directive fences."""

    text: str


@dataclass
class DirectiveBlock:
    """A ``:::``-fenced directive and its nested content.

    Attributes:
        name: Directive name, or None for a fenced div.
        attrs: Parsed header attributes.
        children: Nested text runs and directives in source order.
        fence_length: Number of colons on the opening fence.
    """

    name: str | None
    attrs: AttributeSet = field(default_factory=AttributeSet)
    children: list[Block] = field(default_factory=list)
    fence_length: int = 3


Block = Union[TextBlock, DirectiveBlock]


@dataclass
class Document:
    """Root of a parsed document."""

    children: list[Block] = field(default_factory=list)


@dataclass
class FenceFrame:
    """An open directive on the parser stack."""

    length: int
    block: DirectiveBlock


@dataclass(frozen=True)
class HeadingRecord:
    """A heading discovered while converting Markdown.

    Attributes:
        level: Heading level from 1 to 6.
        text: Plain-text heading content.
        slug: Unique id assigned to the heading element.
    """

    level: int
    text: str
    slug: str


@dataclass
class TocNode:
    """A heading and the headings nested beneath it."""

    heading: HeadingRecord
    children: list[TocNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "level": self.heading.level,
            "text": self.heading.text,
            "slug": self.heading.slug,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class RenderResult:
    """HTML and headings produced from one document.

    Attributes:
        html: Rendered HTML fragment.
        headings: Headings in document order.
    """

    html: str
    headings: list[HeadingRecord]


@dataclass
class RenderedPage:
    """Everything a template needs to display one page.

    Attributes:
        content_html: Rendered document body.
        headings: Headings in document order.
        toc: Table-of-contents forest built from the filtered headings.
        toc_html: ``<nav>`` markup for the table of contents, empty when there
            are no headings.
    """

    content_html: str
    headings: list[HeadingRecord]
    toc: list[TocNode]
    toc_html: str
