"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .exceptions import ConfigError

CONFIG_TABLE = "directive-markdown"
DOTFILE_NAME = ".directive-markdown.toml"


@dataclass
class RenderConfig:
    """Configuration for rendering directive-annotated Markdown.

    Attributes:
        highlight: Whether fenced code blocks are syntax-highlighted.
        line_numbers: Whether highlighted code carries a line-number column.
        allow_html: Whether raw HTML in the Markdown source is passed through.
        toc_min_level: Smallest heading level included in the table of contents.
        toc_max_level: Largest heading level included in the table of contents.
        toc_class: CSS class placed on the table-of-contents ``<nav>``.
        max_file_size: Maximum file size in bytes that will be rendered.

    Examples:
        RenderConfig(toc_min_level=2, toc_max_level=3, line_numbers=False)
    """

    # Markdown conversion
    highlight: bool = True
    line_numbers: bool = True
    allow_html: bool = True

    # Table of contents
    toc_min_level: int = 1
    toc_max_level: int = 6
    toc_class: str = "toc"

    # Limits
    max_file_size: int = 10 * 1024 * 1024


_FIELD_NAMES = frozenset(config_field.name for config_field in fields(RenderConfig))

# Files checked in each directory, with the tables they may hold.
CONFIG_SOURCES = (
    ("pyproject.toml", (("tool", CONFIG_TABLE),)),
    (DOTFILE_NAME, ((CONFIG_TABLE,), ("tool", CONFIG_TABLE))),
)


def load_config(search_path: Path) -> RenderConfig:
    """Find and load the closest configuration.

    Starting at `search_path` and moving up one directory at a time, each
    directory is checked for `pyproject.toml` (``[tool.directive-markdown]``)
    and then `.directive-markdown.toml` (``[directive-markdown]`` or
    ``[tool.directive-markdown]``). The first file holding a matching table
    wins, even when that table is empty. Unreadable or malformed TOML files
    are passed over.

    Args:
        search_path: Directory where the search begins.

    Returns:
        RenderConfig: The configuration found, or defaults.

    Raises:
        ConfigError: If a matching table is not a table or has unknown keys.

    Examples:
        load_config(Path("docs"))
    """
    for directory in (search_path.resolve(), *search_path.resolve().parents):
        for filename, table_paths in CONFIG_SOURCES:
            config = _load_from_file(directory / filename, table_paths)
            if config is not None:
                return config
    return RenderConfig()


_MISSING = object()


def _read_toml(config_file: Path) -> dict | None:
    if not config_file.is_file():
        return None
    try:
        return tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None


def _load_from_file(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> RenderConfig | None:
    data = _read_toml(config_file)
    if data is None:
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is not _MISSING:
            return _build_config_from_raw(raw_config, config_file, table_path)
    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    node = data
    for key in table_path:
        if not isinstance(node, dict):
            return _MISSING
        node = node.get(key, _MISSING)
        if node is _MISSING:
            return _MISSING
    return node


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RenderConfig:
    location = f"`[{'.'.join(table_path)}]` in {config_file}"

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid settings: {location} must be a table")

    # TOML keys may be written with hyphens.
    settings = {key.replace("-", "_"): value for key, value in raw_config.items()}
    unknown = sorted(set(settings) - _FIELD_NAMES)
    if unknown:
        raise ConfigError(f"Invalid settings: unknown key(s) {', '.join(unknown)} in {location}")
    return RenderConfig(**settings)


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If flags are not booleans, heading levels are inconsistent,
            the ToC class is empty, or the size limit is not a positive integer.

    Examples:
        validate_config(RenderConfig(toc_min_level=2, toc_max_level=3))
    """
    _ensure_booleans(
        {
            "highlight": config.highlight,
            "line_numbers": config.line_numbers,
            "allow_html": config.allow_html,
        }
    )
    _ensure_integers(
        {
            "toc_min_level": config.toc_min_level,
            "toc_max_level": config.toc_max_level,
            "max_file_size": config.max_file_size,
        }
    )

    if config.toc_min_level < 1:
        raise ConfigError("`toc_min_level` must be >= 1")
    if config.toc_max_level < config.toc_min_level:
        raise ConfigError("`toc_max_level` must be >= `toc_min_level`")
    if config.toc_max_level > 6:
        raise ConfigError("`toc_max_level` must be <= 6")

    if not isinstance(config.toc_class, str) or not config.toc_class.strip():
        raise ConfigError("`toc_class` must be a non-empty string")

    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Apply override values to a `RenderConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RenderConfig: New configuration with the overrides applied, or the
        original configuration when no changes are supplied.

    Raises:
        ConfigError: If an override name is not a `RenderConfig` field.

    Examples:
        updated = apply_overrides(config, toc_max_level=3, highlight=None)
    """
    unknown = sorted(set(overrides) - _FIELD_NAMES)
    if unknown:
        raise ConfigError(f"Unknown configuration option(s): {', '.join(unknown)}")

    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        RenderConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), toc_max_level=3, line_numbers=False)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
