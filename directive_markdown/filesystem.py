"""Path safety checks plus the reads and writes done by the CLI."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, MARKDOWN_EXTENSIONS
from .exceptions import FileTooLargeError

MAX_FILE_SIZE_ENV_VAR = "DIRECTIVE_MARKDOWN_MAX_FILE_SIZE"
DEFAULT_OUTPUT_MODE = 0o644

_SPECIAL_FILE_KINDS = (
    (stat.S_ISDIR, "a directory"),
    (stat.S_ISFIFO, "a named pipe"),
    (stat.S_ISSOCK, "a socket"),
    (stat.S_ISCHR, "a character device"),
    (stat.S_ISBLK, "a block device"),
)


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit in bytes, preferring the environment override.

    Args:
        default: Limit used when ``DIRECTIVE_MARKDOWN_MAX_FILE_SIZE`` is unset.

    Raises:
        ValueError: If the override is not a positive integer.

    Examples:
        get_max_file_size(default=config.max_file_size)
    """
    raw_limit = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_limit is None:
        return default

    try:
        limit = int(raw_limit)
    except ValueError:
        limit = 0
    if limit <= 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw_limit!r}")
    return limit


def contains_symlink(path: Path) -> bool:
    """Return True when `path` or one of its ancestors is a symbolic link."""
    for segment in (path, *path.parents):
        try:
            is_link = segment.is_symlink()
        except OSError:
            is_link = False
        if is_link:
            return True
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied path into an absolute path to a Markdown source.

    Args:
        raw_path: Path given on the command line.
        base_dir: Resolved working directory; sources must live beneath it.

    Returns:
        Path: The resolved source path.

    Raises:
        ValueError: If the path involves a symlink, is missing, is not a regular
            file, lies outside `base_dir`, or lacks a Markdown extension.

    Examples:
        normalize_filepath("docs/guide.md", Path.cwd().resolve())
    """
    candidate = Path(raw_path).expanduser()
    if contains_symlink(candidate):
        raise ValueError(f"Symlinks are not supported for security reasons: {candidate}")

    try:
        resolved = candidate.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{candidate} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Cannot resolve {candidate}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        allowed = ", ".join(MARKDOWN_EXTENSIONS)
        raise ValueError(f"{resolved} is not a Markdown file (expected one of: {allowed}).")

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat `filepath` without following links and require a regular file.

    Raises:
        IOError: If the file cannot be stat'ed, is a symlink, or is any other
            kind of special file.
    """
    try:
        info = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Cannot access {filepath}: {error}") from error

    if stat.S_ISLNK(info.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}")
    for predicate, label in _SPECIAL_FILE_KINDS:
        if predicate(info.st_mode):
            raise IOError(f"{filepath} is not a regular file ({label}).")
    if not stat.S_ISREG(info.st_mode):
        raise IOError(f"{filepath} is not a regular file.")
    return info


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path) -> None:
    """Raise `FileTooLargeError` when the stat'ed size is above `max_size`."""
    if stat_result.st_size > max_size:
        raise FileTooLargeError(filepath, max_size)


def read_markdown(filepath: Path) -> str:
    """Read a source file as UTF-8.

    Raises:
        IOError: If the file cannot be opened.
        UnicodeDecodeError: If the content is not valid UTF-8.

    Examples:
        text = read_markdown(Path("guide.md"))
    """
    try:
        handle = open(filepath, "r", encoding="UTF-8")
    except OSError as error:
        raise IOError(f"Cannot open {filepath}: {error}") from error
    with handle:
        return handle.read()


def write_output(filepath: Path, content: str) -> None:
    """Replace `filepath` with `content` in one step.

    A sibling temporary file is written, synced, given the destination's
    current mode (or 0o644 for new files), and renamed over the destination.

    Raises:
        IOError: If the destination is a symlink or the write fails.

    Examples:
        write_output(Path("public/guide.html"), page.content_html)
    """
    if filepath.is_symlink():
        raise IOError(f"Refusing to write through symlink: {filepath}")

    try:
        mode = stat.S_IMODE(filepath.stat().st_mode)
    except FileNotFoundError:
        mode = DEFAULT_OUTPUT_MODE
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error

    temp_name: str | None = None
    try:
        descriptor, temp_name = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
        with os.fdopen(descriptor, "w", encoding="UTF-8") as stream:
            stream.write(content)
            stream.flush()
            os.fsync(stream.fileno())
        os.chmod(temp_name, mode)
        os.replace(temp_name, filepath)
        temp_name = None
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)
