"""Constants used across the directive-markdown package."""

from __future__ import annotations

import re

from .config import RenderConfig

# Markdown patterns
# Only "\n" ends a line; "\r" before it is stripped per line.
LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+\Z")
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent> {0,3})(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
CLOSING_FENCE_MAX_INDENT = 3

# Directive fences only match at column zero.
DIRECTIVE_FENCE_PATTERN = re.compile(r"^(?P<colons>:{3,})(?P<header>.*)$")

# Trailing `{#custom-id}` on a heading line.
HEADING_ID_PATTERN = re.compile(r"\s*\{#(?P<id>[^\s{}]+)\}\s*$")

# Directive names with dedicated renderers
CALLOUT_DIRECTIVE = "callout"
KNOWN_DIRECTIVES = frozenset({CALLOUT_DIRECTIVE})

DEFAULT_CALLOUT_TYPE = "note"
CALLOUT_TITLES = {
    "abstract": "Abstract",
    "bug": "Bug",
    "danger": "Danger",
    "example": "Example",
    "failure": "Failure",
    "info": "Info",
    "note": "Note",
    "question": "Question",
    "quote": "Quote",
    "success": "Success",
    "tip": "Tip",
    "warning": "Warning",
}

# Slugs
FALLBACK_SLUG = "heading"

# File handling
MARKDOWN_EXTENSIONS = (".md", ".markdown")
DEFAULT_MAX_FILE_SIZE = RenderConfig().max_file_size
