"""Markdown-to-HTML conversion for the text runs between directives.

Wraps a configured ``MarkdownIt`` instance with core rules that collect
headings (with ``{#id}`` overrides and deduplicated slugs), promote
paragraphs holding a single image to figures, and route code blocks through
the injected highlighter.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Sequence

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from markdown_it.utils import EnvType, OptionsDict
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .constants import HEADING_ID_PATTERN
from .highlight import highlight
from .images import render_image
from .slugify import HeadingCollector

Highlighter = Callable[[str | None, str], str]
ImageRenderer = Callable[[str, str, str | None, bool], str]

COLLECTOR_ENV_KEY = "heading_collector"
EXPLICIT_ID_META_KEY = "explicit_id"
# Read by the footnote plugin when naming anchors.
FOOTNOTE_PREFIX_ENV_KEY = "docId"


def plain_text(tokens: Sequence[Token]) -> str:
    """Flatten inline tokens into the text a reader would see.

    Args:
        tokens: Inline child tokens.

    Returns:
        str: Concatenated text, inline code, and math content; line breaks
            become spaces and markup is dropped.

    Examples:
        plain_text(md.parseInline("Use `pip` *now*")[0].children)  # "Use pip now"
    """
    parts: list[str] = []
    for token in tokens:
        if token.type in ("text", "code_inline", "math_inline", "math_inline_double"):
            parts.append(token.content)
        elif token.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif token.children:
            parts.append(plain_text(token.children))
    return "".join(parts)


def _extract_heading_ids(state: StateCore) -> None:
    """Strip trailing ``{#id}`` markers from heading lines before inline parsing."""
    tokens = state.tokens
    for index, token in enumerate(tokens):
        if token.type != "heading_open" or index + 1 >= len(tokens):
            continue
        inline = tokens[index + 1]
        id_match = HEADING_ID_PATTERN.search(inline.content)
        if id_match is None:
            continue
        inline.content = inline.content[: id_match.start()]
        token.meta[EXPLICIT_ID_META_KEY] = id_match.group("id")


def _collect_headings(state: StateCore) -> None:
    """Assign ids to headings and record them on the document's collector."""
    collector = state.env.get(COLLECTOR_ENV_KEY)
    if collector is None:
        collector = state.env[COLLECTOR_ENV_KEY] = HeadingCollector()

    tokens = state.tokens
    for index, token in enumerate(tokens):
        if token.type != "heading_open":
            continue
        inline = tokens[index + 1] if index + 1 < len(tokens) else None
        text = plain_text(inline.children or []).strip() if inline is not None else ""
        slug = collector.record(int(token.tag[1:]), text, token.meta.get(EXPLICIT_ID_META_KEY))
        token.attrSet("id", slug)


def _sole_image(inline: Token) -> Token | None:
    children = [
        child
        for child in inline.children or []
        if not (child.type == "text" and not child.content.strip())
    ]
    if len(children) == 1 and children[0].type == "image":
        return children[0]
    return None


def _promote_block_images(state: StateCore) -> None:
    """Replace paragraphs that contain only an image with a ``block_image`` token."""
    tokens = state.tokens
    promoted: list[Token] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if (
            token.type == "paragraph_open"
            and not token.hidden
            and index + 2 < len(tokens)
            and tokens[index + 2].type == "paragraph_close"
        ):
            image = _sole_image(tokens[index + 1])
            if image is not None:
                promoted.append(
                    Token(
                        "block_image",
                        "img",
                        0,
                        attrs=dict(image.attrs),
                        map=token.map,
                        level=token.level,
                        children=image.children,
                        content=image.content,
                        block=True,
                    )
                )
                index += 3
                continue
        promoted.append(token)
        index += 1
    state.tokens = promoted


class MarkdownConverter:
    """Convert Markdown text runs to HTML, collecting headings as it goes.

    Args:
        highlighter: ``(lang, code) -> html`` used for fenced and indented code.
        image_renderer: ``(alt, src, title, is_block) -> html`` used for images.
        allow_html: Whether raw HTML in the source is passed through.
    """

    def __init__(
        self,
        highlighter: Highlighter = highlight,
        image_renderer: ImageRenderer = render_image,
        allow_html: bool = True,
    ):
        self.highlighter = highlighter
        self.image_renderer = image_renderer
        self.md = self._build(allow_html)

    def _build(self, allow_html: bool) -> MarkdownIt:
        md = (
            MarkdownIt("commonmark", {"html": allow_html})
            .enable(["table", "strikethrough"])
            .use(footnote_plugin)
            .use(tasklists_plugin)
            .use(dollarmath_plugin)
        )
        md.core.ruler.before("inline", "heading_ids", _extract_heading_ids)
        md.core.ruler.push("block_images", _promote_block_images)
        md.core.ruler.push("collect_headings", _collect_headings)

        md.renderer.rules["fence"] = self._render_fence
        md.renderer.rules["code_block"] = self._render_code_block
        md.renderer.rules["image"] = self._render_inline_image
        md.renderer.rules["block_image"] = self._render_block_image
        return md

    def _render_fence(
        self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType
    ) -> str:
        token = tokens[idx]
        return self.highlighter(token.info.strip() or None, token.content)

    def _render_code_block(
        self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType
    ) -> str:
        return self.highlighter(None, tokens[idx].content)

    def _image_args(self, token: Token) -> tuple[str, str, str | None]:
        alt = plain_text(token.children or [])
        src = str(token.attrGet("src") or "")
        title = token.attrGet("title")
        return alt, src, str(title) if title else None

    def _render_inline_image(
        self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType
    ) -> str:
        alt, src, title = self._image_args(tokens[idx])
        return self.image_renderer(alt, src, title, False)

    def _render_block_image(
        self, tokens: Sequence[Token], idx: int, options: OptionsDict, env: EnvType
    ) -> str:
        alt, src, title = self._image_args(tokens[idx])
        return self.image_renderer(alt, src, title, True)

    def render(
        self,
        text: str,
        collector: HeadingCollector | None = None,
        run_id: str | None = None,
    ) -> str:
        """Convert one Markdown text run to HTML.

        Footnote definitions and references resolve within the run. Runs
        rendered with a `run_id` prefix their footnote anchors with it
        (``fn-2-1`` rather than ``fn1``).

        Args:
            text: Markdown source.
            collector: Heading collector shared by every run of the same
                document. A fresh one is used when omitted.
            run_id: Footnote anchor prefix for this run.

        Returns:
            str: Rendered HTML.

        Examples:
            collector = HeadingCollector()
            converter.render("# Setup\\n", collector)  # '<h1 id="setup">Setup</h1>\\n'
        """
        env: dict = {COLLECTOR_ENV_KEY: collector if collector is not None else HeadingCollector()}
        if run_id is not None:
            env[FOOTNOTE_PREFIX_ENV_KEY] = run_id
        return self.md.render(text, env)

    def bind(self, collector: HeadingCollector) -> Callable[[str], str]:
        """Return a ``markdown_render(text)`` callable bound to `collector`.

        The first run keeps plain footnote anchors; every later run gets its
        own prefix so footnote ids stay unique across the document.
        """
        run_numbers = itertools.count(1)

        def markdown_render(text: str) -> str:
            run_number = next(run_numbers)
            run_id = str(run_number) if run_number > 1 else None
            return self.render(text, collector, run_id)

        return markdown_render
