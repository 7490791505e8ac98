"""Attribute parsing for directive headers.

A directive header is everything after the colons of an opening fence::

    ::: callout {#intro .wide type=tip title="Read this first"}
    ::: {#results .wide .striped}
    ::: custom-type

Inside braces, tokens are separated by whitespace: ``#id`` sets the id (first
one wins), ``.class`` appends a class, and ``key=value`` or ``key="quoted
value"`` records a pair (last one wins). Anything else is ignored so that new
syntax never breaks older renderers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .constants import KNOWN_DIRECTIVES
from .models import AttributeSet

IDENTIFIER_PATTERN = re.compile(r"^[\w-][\w:.-]*$")
KEY_PATTERN = re.compile(r"^[A-Za-z_][\w-]*$")


@dataclass(frozen=True)
class HeaderToken:
    """A single recognized token from a directive header.

    Attributes:
        kind: One of ``"id"``, ``"class"``, ``"pair"``, or ``"word"``.
        key: Identifier, class name, pair key, or bare word.
        value: Pair value; empty for other kinds.
    """

    kind: str
    key: str
    value: str = ""


def _find_whitespace(text: str, start: int = 0) -> int:
    """Return the index of the first whitespace character, or ``len(text)``."""
    for index in range(start, len(text)):
        if text[index].isspace():
            return index
    return len(text)


def _scan_quoted_value(text: str) -> tuple[str, int] | None:
    r"""Scan a quoted value whose opening quote has already been consumed.

    ``\"`` and ``\\`` are unescaped; any other backslash is kept literally.

    Args:
        text: Text immediately following the opening double quote.

    Returns:
        tuple[str, int] | None: The unescaped value and the index just past the
            closing quote, or None when the quote is never closed.

    Examples:
        _scan_quoted_value('Careful" open=false')  # ("Careful", 8)
        _scan_quoted_value('no closing quote')  # None
    """
    value: list[str] = []
    index = 0
    while index < len(text):
        character = text[index]
        if character == "\\" and index + 1 < len(text) and text[index + 1] in '"\\':
            value.append(text[index + 1])
            index += 2
            continue
        if character == '"':
            return "".join(value), index + 1
        value.append(character)
        index += 1
    return None


def tokenize_attributes(text: str) -> list[HeaderToken]:
    """Split attribute text into recognized tokens.

    Malformed tokens (a stray ``=``, an unclosed quote, ``#`` or ``.`` without
    an identifier) are dropped and scanning resumes at the next token.

    Args:
        text: Attribute text without surrounding braces.

    Returns:
        list[HeaderToken]: Recognized tokens in source order.

    Examples:
        tokenize_attributes('#main .wide title="Hi there"')
    """
    tokens: list[HeaderToken] = []
    rest = text.strip()

    while rest:
        if rest[0] in "#.":
            end = _find_whitespace(rest)
            identifier = rest[1:end]
            if IDENTIFIER_PATTERN.match(identifier):
                tokens.append(HeaderToken("id" if rest[0] == "#" else "class", identifier))
            rest = rest[end:].lstrip()
            continue

        next_space = _find_whitespace(rest)
        equals = rest.find("=", 0, next_space)
        if equals == -1:
            tokens.append(HeaderToken("word", rest[:next_space]))
            rest = rest[next_space:].lstrip()
            continue

        key = rest[:equals]
        after_equals = rest[equals + 1 :]
        if after_equals.startswith('"'):
            scanned = _scan_quoted_value(after_equals[1:])
            if scanned is None:
                # Unclosed quote: drop the pair, resume after its first word.
                rest = after_equals[_find_whitespace(after_equals) :].lstrip()
                continue
            value, consumed = scanned
            rest = after_equals[1 + consumed :].lstrip()
        else:
            end = _find_whitespace(after_equals)
            value = after_equals[:end]
            rest = after_equals[end:].lstrip()

        if KEY_PATTERN.match(key):
            tokens.append(HeaderToken("pair", key, value))

    return tokens


def _apply_tokens(attrs: AttributeSet, tokens: list[HeaderToken]) -> None:
    for token in tokens:
        if token.kind == "id":
            if attrs.id is None:
                attrs.id = token.key
        elif token.kind == "class":
            attrs.classes.append(token.key)
        elif token.kind == "pair":
            attrs.pairs[token.key] = token.value


def _split_braces(text: str) -> tuple[str, str] | None:
    """Split a header into the text before ``{`` and the text inside the braces.

    An unterminated brace group runs to the end of the header.
    """
    start = text.find("{")
    if start == -1:
        return None
    end = text.rfind("}")
    inner = text[start + 1 : end] if end > start else text[start + 1 :]
    return text[:start].strip(), inner


def parse_header(raw: str) -> tuple[str | None, AttributeSet]:
    """Parse a directive header into a name and attributes.

    The name is the first bare word before any brace group, or a leading
    ``.name`` inside the braces when it names a known directive (Pandoc style,
    ``{.callout type=tip}``). Without braces, the first bare word is the name
    and the remaining ``#id``, ``.class``, and ``key=value`` tokens still apply.

    Args:
        raw: Text following the colons of an opening fence.

    Returns:
        tuple[str | None, AttributeSet]: Directive name (None for fenced divs)
            and the parsed attributes.

    Examples:
        parse_header("callout {type=warning open=false}")
        parse_header(" {#results .wide .striped}")
        parse_header("custom-type")
    """
    text = raw.strip()
    attrs = AttributeSet()
    if not text:
        return None, attrs

    name: str | None = None
    braces = _split_braces(text)
    if braces is not None:
        prefix, inner = braces
        prefix_tokens = tokenize_attributes(prefix)
        tokens = tokenize_attributes(inner)
        if prefix_tokens and prefix_tokens[0].kind == "word":
            name = prefix_tokens[0].key
            prefix_tokens = prefix_tokens[1:]
        elif tokens and tokens[0].kind == "class" and tokens[0].key in KNOWN_DIRECTIVES:
            name = tokens[0].key
            tokens = tokens[1:]
        _apply_tokens(attrs, prefix_tokens + tokens)
        return name, attrs

    tokens = tokenize_attributes(text)
    if tokens and tokens[0].kind == "word":
        name = tokens[0].key
        tokens = tokens[1:]
    _apply_tokens(attrs, tokens)
    return name, attrs
