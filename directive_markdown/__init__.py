"""
directive-markdown: Markdown with nestable ::: directives, rendered to HTML.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    directive-markdown docs/guide.md --toc

Library Usage:
    from directive_markdown import build_toc, parse_document, render_toc_html

    result = parse_document(text)
    toc = build_toc(result.headings)
    nav_html = render_toc_html(toc)
"""

from .attributes import parse_header
from .config import RenderConfig
from .exceptions import ConfigError, DirectiveMarkdownError, FileTooLargeError, RenderFileError
from .highlight import highlight
from .images import render_image
from .markdown import MarkdownConverter
from .models import (
    AttributeSet,
    DirectiveBlock,
    Document,
    HeadingRecord,
    RenderedPage,
    RenderResult,
    TextBlock,
    TocNode,
)
from .parser import parse_directives
from .pipeline import create_converter, parse_document, render_file, render_page
from .render import render_block
from .slugify import HeadingCollector, SlugRegistry, generate_slug
from .toc import build_toc, filter_headings, render_toc_html

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_document",
    "parse_directives",
    "parse_header",
    "render_block",
    "build_toc",
    "render_page",
    "render_file",
    # Collaborators
    "MarkdownConverter",
    "create_converter",
    "highlight",
    "render_image",
    "render_toc_html",
    "filter_headings",
    # Headings
    "generate_slug",
    "SlugRegistry",
    "HeadingCollector",
    # Data models
    "AttributeSet",
    "DirectiveBlock",
    "Document",
    "HeadingRecord",
    "RenderConfig",
    "RenderResult",
    "RenderedPage",
    "TextBlock",
    "TocNode",
    # Exceptions
    "ConfigError",
    "DirectiveMarkdownError",
    "FileTooLargeError",
    "RenderFileError",
    # Version
    "__version__",
]
