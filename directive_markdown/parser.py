"""Directive fence parsing.

Turns raw document text into a tree of text runs and ``:::``-fenced
directives. Nesting is tracked with an explicit stack of open frames, so
arbitrarily deep input never grows the Python call stack.
"""

from __future__ import annotations

import logging

from .attributes import parse_header
from .constants import (
    CLOSING_FENCE_MAX_INDENT,
    CODE_FENCE_PATTERN,
    DIRECTIVE_FENCE_PATTERN,
    LINE_PATTERN,
)
from .models import (
    Block,
    DirectiveBlock,
    Document,
    FenceFrame,
    ParserContext,
    ParserState,
    TextBlock,
)

logger = logging.getLogger(__name__)


def _strip_line_ending(line: str) -> str:
    return line.rstrip("\r\n")


def _try_open_fence(ctx: ParserContext, line: str) -> bool:
    """Detect the start of a fenced code block.

    Backtick fences whose info string contains a backtick are not fences.

    Args:
        ctx: Parser context to update when a fence opens.
        line: Current line being scanned.

    Returns:
        bool: True when the line begins a fence and the context is updated.

    Examples:
        _try_open_fence(ParserContext(), "```python\\n")  # True
    """
    if ctx.state is not ParserState.NORMAL:
        return False

    fence_match = CODE_FENCE_PATTERN.match(_strip_line_ending(line))
    if not fence_match:
        return False

    fence_sequence = fence_match.group("fence")
    if fence_sequence[0] == "`" and "`" in fence_match.group("info"):
        return False

    ctx.state = ParserState.IN_FENCED_CODE
    ctx.fence_char = fence_sequence[0]
    ctx.fence_length = len(fence_sequence)
    return True


def _try_close_fence(ctx: ParserContext, line: str) -> bool:
    """Attempt to close the active fenced code block.

    Args:
        ctx: Parser context describing the active fence.
        line: Current line being scanned.

    Returns:
        bool: True when the line closes the fence; otherwise False.

    Examples:
        ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)
        _try_close_fence(ctx, "```\\n")
    """
    if ctx.state is not ParserState.IN_FENCED_CODE or ctx.fence_char is None:
        return False

    line = _strip_line_ending(line)
    stripped_line = line.lstrip(" ")
    if len(line) - len(stripped_line) > CLOSING_FENCE_MAX_INDENT:
        return False
    if not stripped_line or stripped_line[0] != ctx.fence_char:
        return False

    fence_run_length = len(stripped_line) - len(stripped_line.lstrip(ctx.fence_char))
    if fence_run_length < ctx.fence_length:
        return False

    if stripped_line[fence_run_length:].strip():
        return False

    ctx.state = ParserState.NORMAL
    ctx.fence_char = None
    ctx.fence_length = 0
    return True


def match_directive_fence(line: str) -> tuple[int, str] | None:
    """Match a directive fence line.

    Args:
        line: Line to inspect, with or without its line ending.

    Returns:
        tuple[int, str] | None: Colon count and stripped header text, or None
            when the line is not a directive fence.

    Examples:
        match_directive_fence("::: callout {type=tip}\\n")  # (3, "callout {type=tip}")
        match_directive_fence("::::\\n")  # (4, "")
    """
    fence_match = DIRECTIVE_FENCE_PATTERN.match(_strip_line_ending(line))
    if not fence_match:
        return None
    return len(fence_match.group("colons")), fence_match.group("header").strip()


class _TreeBuilder:
    """Mutable state for a single parse: open frames plus the pending text run."""

    def __init__(self) -> None:
        self.root = Document()
        self.frames: list[FenceFrame] = []
        self.buffer: list[str] = []

    def current_children(self) -> list[Block]:
        if self.frames:
            return self.frames[-1].block.children
        return self.root.children

    def flush(self) -> None:
        if self.buffer:
            self.current_children().append(TextBlock("".join(self.buffer)))
            self.buffer = []

    def open_frame(self, length: int, header: str) -> None:
        self.flush()
        name, attrs = parse_header(header)
        block = DirectiveBlock(name=name, attrs=attrs, fence_length=length)
        self.frames.append(FenceFrame(length=length, block=block))

    def close_frame(self) -> None:
        self.flush()
        frame = self.frames.pop()
        self.current_children().append(frame.block)

    def can_close(self, length: int) -> bool:
        return bool(self.frames) and length >= self.frames[-1].length


def parse_directives(text: str) -> Document:
    """Parse directive fences into a block tree.

    Lines inside backtick or tilde code fences are copied verbatim and never
    treated as directive boundaries. A bare colon fence closes the innermost
    open directive when it has at least as many colons; otherwise it opens a
    new, nameless directive. Directives still open at the end of input are
    closed innermost first and keep their accumulated content. Lines end at
    ``\\n`` only; form feeds and Unicode line separators stay inside a line.

    Args:
        text: Raw document text.

    Returns:
        Document: Root of the parsed tree. Never raises for any input.

    Examples:
        parse_directives("::: callout\\nHello\\n:::\\n")
        parse_directives(":::: outer\\n::: inner\\nBody\\n:::\\n::::\\n")
    """
    builder = _TreeBuilder()
    ctx = ParserContext()

    for line in LINE_PATTERN.findall(text):
        if ctx.state is ParserState.IN_FENCED_CODE:
            _try_close_fence(ctx, line)
            builder.buffer.append(line)
            continue

        if _try_open_fence(ctx, line):
            builder.flush()
            builder.buffer.append(line)
            continue

        directive_fence = match_directive_fence(line)
        if directive_fence is None:
            builder.buffer.append(line)
            continue

        length, header = directive_fence
        if not header and builder.can_close(length):
            builder.close_frame()
        else:
            builder.open_frame(length, header)

    builder.flush()
    if builder.frames:
        logger.debug("Closing %d unterminated directive(s) at end of input", len(builder.frames))
    while builder.frames:
        builder.close_frame()

    return builder.root


def iter_directives(document: Document) -> list[DirectiveBlock]:
    """Collect every directive in the tree in document (pre-)order.

    Args:
        document: Parsed document.

    Returns:
        list[DirectiveBlock]: Directives, outer blocks before the blocks they contain.
    """
    directives: list[DirectiveBlock] = []
    pending: list[Block] = list(reversed(document.children))
    while pending:
        block = pending.pop()
        if isinstance(block, DirectiveBlock):
            directives.append(block)
            pending.extend(reversed(block.children))
    return directives
