"""Syntax highlighting for fenced code blocks."""

from __future__ import annotations

import html
import logging

from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

PLAIN_TEXT_LABEL = "plaintext"


def _language_token(lang: str | None) -> str:
    """Return the first word of a code fence info string, lowercased."""
    if not lang:
        return ""
    words = lang.split()
    return words[0].lower() if words else ""


def _plain_code_block(code: str, label: str) -> str:
    escaped_label = html.escape(label, quote=True)
    return (
        f'<pre><code class="language-{escaped_label}" data-lang="{escaped_label}">'
        f"{html.escape(code, quote=False)}</code></pre>\n"
    )


def highlight(lang: str | None, code: str, line_numbers: bool = True) -> str:
    """Highlight a code block with Pygments CSS classes.

    Args:
        lang: Info string of the code fence; only its first word is used.
        code: Code to highlight.
        line_numbers: Whether to render a line-number column.

    Returns:
        str: Class-annotated HTML. Missing or unknown languages produce escaped
            plain text instead. Never raises.

    Examples:
        highlight("python", "print('hi')\\n")
        highlight(None, "<not code>")  # escaped <pre><code>
    """
    token = _language_token(lang)
    if not token:
        return _plain_code_block(code, PLAIN_TEXT_LABEL)

    try:
        lexer = get_lexer_by_name(token)
    except ClassNotFound:
        logger.warning("Unrecognized language %r, falling back to plain text", token)
        return _plain_code_block(code, token)

    formatter = HtmlFormatter(cssclass="highlight", linenos="table" if line_numbers else False)
    label = html.escape(lexer.aliases[0] if lexer.aliases else token, quote=True)
    highlighted = pygments_highlight(code, lexer, formatter)
    return f'<div class="code-block" data-lang="{label}">\n{highlighted}</div>\n'


def plain_code(lang: str | None, code: str) -> str:
    """Render a code block without highlighting, keeping the language label."""
    return _plain_code_block(code, _language_token(lang) or PLAIN_TEXT_LABEL)
