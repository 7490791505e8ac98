import pytest

from directive_markdown.models import HeadingRecord
from directive_markdown.slugify import (
    HeadingCollector,
    SlugRegistry,
    generate_slug,
    is_preserved_script,
)


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello World", "hello-world"),
        ("Setup", "setup"),
        ("  Leading and trailing  ", "leading-and-trailing"),
        ("C++ & Rust!", "c-rust"),
        ("snake_case_name", "snake-case-name"),
        ("Version 2.0", "version-2-0"),
        ("Café crème", "caf-cr-me"),
        ("你好世界", "你好世界"),
        ("1.1 Foobar - 测试文本", "1-1-foobar-测试文本"),
        ("ひらがな カタカナ", "ひらがな-カタカナ"),
        ("한국어 제목", "한국어-제목"),
        ("...", "heading"),
        ("", "heading"),
        ("🎉🎉", "heading"),
    ],
)
def test_generate_slug(title: str, expected: str):
    assert generate_slug(title) == expected


def test_is_preserved_script():
    assert is_preserved_script("你")
    assert is_preserved_script("カ")
    assert is_preserved_script("한")
    assert not is_preserved_script("é")
    assert not is_preserved_script("a")


def test_registry_appends_numeric_suffixes():
    registry = SlugRegistry()

    assert [registry.assign("Setup") for _ in range(3)] == ["setup", "setup-1", "setup-2"]


def test_registry_skips_taken_suffixed_slugs():
    registry = SlugRegistry()

    assert registry.assign("Setup") == "setup"
    assert registry.assign("Setup") == "setup-1"
    assert registry.assign("Setup 1") == "setup-1-1"


def test_registry_skips_literal_suffix_collision():
    registry = SlugRegistry()

    assert registry.assign("Setup 1") == "setup-1"
    assert registry.assign("Setup") == "setup"
    assert registry.assign("Setup") == "setup-2"


def test_registry_reserved_ids_are_not_reused():
    registry = SlugRegistry()

    assert registry.reserve("install") == "install"
    assert "install" in registry
    assert registry.assign("Install") == "install-1"


def test_registry_reserve_keeps_duplicate_explicit_ids():
    registry = SlugRegistry()

    assert registry.reserve("same") == "same"
    assert registry.reserve("same") == "same"


def test_collector_records_headings_in_order():
    collector = HeadingCollector()

    assert collector.record(1, "Guide") == "guide"
    assert collector.record(2, "Setup") == "setup"
    assert collector.record(2, "Setup") == "setup-1"
    assert collector.record(3, "Anything", "custom") == "custom"

    assert collector.headings == [
        HeadingRecord(level=1, text="Guide", slug="guide"),
        HeadingRecord(level=2, text="Setup", slug="setup"),
        HeadingRecord(level=2, text="Setup", slug="setup-1"),
        HeadingRecord(level=3, text="Anything", slug="custom"),
    ]


def test_collectors_are_independent():
    first = HeadingCollector()
    second = HeadingCollector()

    first.record(1, "Title")

    assert second.record(1, "Title") == "title"
