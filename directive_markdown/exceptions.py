"""Package-specific exception types.

Parsing and rendering never raise for document content; these exceptions
cover configuration and file access only.
"""

from __future__ import annotations

from pathlib import Path


class DirectiveMarkdownError(ValueError):
    """Base class for errors raised by directive-markdown."""


class ConfigError(DirectiveMarkdownError):
    """Raised when configuration values are invalid.

    Examples:
        raise ConfigError("`toc_max_level` must be >= `toc_min_level`")
    """


class FileTooLargeError(DirectiveMarkdownError):
    """Raised when a document exceeds the configured size limit.

    Args:
        filepath: Path to the offending file.
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, filepath: Path, max_size: int):
        self.filepath = filepath
        self.max_size = max_size
        super().__init__(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")


class RenderFileError(DirectiveMarkdownError):
    """Raised when a Markdown file cannot be read for rendering."""
