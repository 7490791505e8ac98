"""Slug generation for Markdown headings."""

from __future__ import annotations

from .constants import FALLBACK_SLUG
from .models import HeadingRecord

# Code point ranges kept verbatim in slugs (CJK ideographs, kana, hangul, bopomofo).
PRESERVED_SCRIPT_RANGES = (
    (0x1100, 0x11FF),  # Hangul Jamo
    (0x3040, 0x309F),  # Hiragana
    (0x30A0, 0x30FF),  # Katakana
    (0x3100, 0x312F),  # Bopomofo
    (0x3130, 0x318F),  # Hangul Compatibility Jamo
    (0x31F0, 0x31FF),  # Katakana Phonetic Extensions
    (0x3400, 0x4DBF),  # CJK Unified Ideographs Extension A
    (0x4E00, 0x9FFF),  # CJK Unified Ideographs
    (0xAC00, 0xD7AF),  # Hangul Syllables
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0x20000, 0x2FA1F),  # CJK Unified Ideographs Extensions B-F and supplements
    (0x30000, 0x323AF),  # CJK Unified Ideographs Extensions G-H
)


def is_preserved_script(character: str) -> bool:
    """Return True when `character` belongs to a script kept verbatim in slugs.

    Examples:
        is_preserved_script("你")  # True
        is_preserved_script("é")  # False
    """
    code_point = ord(character)
    return any(start <= code_point <= end for start, end in PRESERVED_SCRIPT_RANGES)


def generate_slug(title: str) -> str:
    """Generate a URL-style slug from heading text.

    ASCII letters are lowercased and ASCII digits kept. CJK characters are kept
    verbatim. Every maximal run of other characters becomes a single hyphen,
    and leading or trailing hyphens are dropped.

    Args:
        title: The heading text to convert into a slug.

    Returns:
        str: Hyphen-separated slug, or ``"heading"`` when nothing remains.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("1.1 Foobar - 测试文本")  # "1-1-foobar-测试文本"
        generate_slug("你好世界")  # "你好世界"
        generate_slug("...")  # "heading"
    """
    parts: list[str] = []
    pending_hyphen = False

    for character in title:
        if character.isascii() and character.isalnum():
            kept = character.lower()
        elif is_preserved_script(character):
            kept = character
        else:
            pending_hyphen = True
            continue

        if pending_hyphen and parts:
            parts.append("-")
        pending_hyphen = False
        parts.append(kept)

    slug = "".join(parts)
    return slug if slug else FALLBACK_SLUG


class SlugRegistry:
    """Assign unique heading ids within one document.

    The first heading with a given base slug keeps it; later ones get ``-1``,
    ``-2``, and so on. Ids already taken (by an explicit ``{#id}`` or by an
    earlier suffixed slug) are skipped, so ``"Setup"``, ``"Setup"``,
    ``"Setup 1"`` yields ``setup``, ``setup-1``, ``setup-1-1``.

    A registry must not be shared between documents.
    """

    def __init__(self) -> None:
        # next suffix per base slug, plus every id handed out so far
        self._counters: dict[str, int] = {}
        self._used: set[str] = set()

    def __contains__(self, slug: object) -> bool:
        return slug in self._used

    def assign(self, title: str) -> str:
        """Return a unique id for a heading with text `title`.

        Examples:
            registry = SlugRegistry()
            registry.assign("Setup")  # "setup"
            registry.assign("Setup")  # "setup-1"
        """
        base_slug = generate_slug(title)
        count = self._counters.get(base_slug, 0)
        slug = base_slug if count == 0 else f"{base_slug}-{count}"

        while slug in self._used:
            count += 1
            slug = f"{base_slug}-{count}"

        self._counters[base_slug] = count + 1
        self._used.add(slug)
        return slug

    def reserve(self, explicit_id: str) -> str:
        """Record an explicit heading id and return it unchanged.

        Explicit ids bypass slug generation and do not advance any counter, but
        later generated slugs will not reuse them. Two explicit ids that are
        equal are both kept as written.
        """
        self._used.add(explicit_id)
        return explicit_id


class HeadingCollector:
    """Record the headings of one document in order, assigning unique ids.

    Every Markdown conversion belonging to the same document must share one
    collector; concurrent documents each need their own.
    """

    def __init__(self) -> None:
        self.registry = SlugRegistry()
        self.headings: list[HeadingRecord] = []

    def record(self, level: int, text: str, explicit_id: str | None = None) -> str:
        """Register a heading and return the id assigned to it.

        Args:
            level: Heading level from 1 to 6.
            text: Plain-text heading content.
            explicit_id: Id written as a ``{#id}`` suffix in the source, if any.

        Returns:
            str: The explicit id when given, otherwise a deduplicated slug.

        Examples:
            collector = HeadingCollector()
            collector.record(2, "Setup")  # "setup"
            collector.record(2, "Setup")  # "setup-1"
            collector.record(3, "Anything", "custom")  # "custom"
        """
        if explicit_id:
            slug = self.registry.reserve(explicit_id)
        else:
            slug = self.registry.assign(text)
        self.headings.append(HeadingRecord(level=level, text=text, slug=slug))
        return slug
