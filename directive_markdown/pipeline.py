"""Document rendering pipeline: directives, Markdown, headings, and ToC."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path

from .config import RenderConfig, validate_config
from .exceptions import FileTooLargeError, RenderFileError
from .filesystem import collect_file_stat, enforce_file_size, get_max_file_size, read_markdown
from .highlight import highlight, plain_code
from .images import render_image
from .markdown import MarkdownConverter
from .models import RenderedPage, RenderResult
from .parser import parse_directives
from .render import render_block
from .slugify import HeadingCollector
from .toc import build_toc, filter_headings, render_toc_html

logger = logging.getLogger(__name__)


def create_converter(config: RenderConfig | None = None) -> MarkdownConverter:
    """Build a Markdown converter configured from `config`.

    Args:
        config: Rendering configuration; defaults to a new `RenderConfig`.

    Returns:
        MarkdownConverter: Converter using Pygments highlighting (or plain code
            blocks when highlighting is off) and the standard image markup.
    """
    config = config or RenderConfig()
    if config.highlight:
        highlighter = partial(highlight, line_numbers=config.line_numbers)
    else:
        highlighter = plain_code
    return MarkdownConverter(
        highlighter=highlighter,
        image_renderer=render_image,
        allow_html=config.allow_html,
    )


def parse_document(
    text: str,
    config: RenderConfig | None = None,
    converter: MarkdownConverter | None = None,
) -> RenderResult:
    """Render a document to HTML and collect its headings.

    Each call uses its own heading collector, so documents can be rendered
    concurrently with independent calls. Never raises for any input text.

    Args:
        text: Raw document text.
        config: Rendering configuration, used when `converter` is omitted.
        converter: Converter to reuse across documents.

    Returns:
        RenderResult: The HTML fragment and headings in document order.

    Examples:
        result = parse_document("# Title\\n\\n::: callout {type=tip}\\nHi\\n:::\\n")
        result.headings[0].slug  # "title"
    """
    converter = converter or create_converter(config)
    collector = HeadingCollector()
    document = parse_directives(text)
    html = render_block(document, converter.bind(collector))
    return RenderResult(html=html, headings=list(collector.headings))


def render_page(
    text: str,
    config: RenderConfig | None = None,
    converter: MarkdownConverter | None = None,
) -> RenderedPage:
    """Render a document together with its table of contents.

    Args:
        text: Raw document text.
        config: Rendering configuration; ToC level limits and class come from here.
        converter: Converter to reuse across documents.

    Returns:
        RenderedPage: Content HTML, headings, ToC forest, and ToC HTML.

    Examples:
        page = render_page(Path("guide.md").read_text(), RenderConfig(toc_max_level=3))
    """
    config = config or RenderConfig()
    result = parse_document(text, config, converter)
    toc = build_toc(filter_headings(result.headings, config.toc_min_level, config.toc_max_level))
    return RenderedPage(
        content_html=result.html,
        headings=result.headings,
        toc=toc,
        toc_html=render_toc_html(toc, config.toc_class),
    )


def render_file(filepath: Path, config: RenderConfig | None = None) -> RenderedPage:
    """Read and render a Markdown file.

    Args:
        filepath: Path to the Markdown file.
        config: Rendering configuration; defaults to a new `RenderConfig`.

    Returns:
        RenderedPage: The rendered page.

    Raises:
        RenderFileError: If the configuration is invalid, or the file is too
            large, unreadable, or not valid UTF-8.

    Examples:
        page = render_file(Path("docs/guide.md"))
    """
    config = config or RenderConfig()
    try:
        validate_config(config)
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise RenderFileError(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
        content = read_markdown(filepath)
    except FileTooLargeError as error:
        raise RenderFileError(str(error)) from error
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise RenderFileError(error_message) from error
    except IOError as error:
        raise RenderFileError(str(error)) from error

    logger.info("Rendering %s (%d bytes)", filepath, len(content))
    return render_page(content, config)
