import re

import pytest

from issue_catalog.normalize import SLUG_FALLBACK, slugify

SAMPLE_TITLES = [
    "CoMapeo Config Spreadsheet Plugin",
    "  Hello,  World!! ",
    "--already-slugged--",
    "Café Ünïcode / 2024 edition",
    "snake_case_and.dots",
    "!!!",
    "",
    "UPPER lower 123",
]


def test_slug_from_title():
    assert slugify("CoMapeo Config Spreadsheet Plugin") == "comapeo-config-spreadsheet-plugin"
    assert slugify("  Hello,  World!! ") == "hello-world"
    assert slugify("snake_case_and.dots") == "snake-case-and-dots"
    assert slugify("Café Ünïcode") == "caf-n-code"


@pytest.mark.parametrize("value", ["", "   ", "!!!", None, 42, ["a"]])
def test_slug_fallback(value):
    assert slugify(value) == SLUG_FALLBACK


@pytest.mark.parametrize("title", SAMPLE_TITLES)
def test_slug_is_idempotent(title):
    once = slugify(title)
    assert slugify(once) == once


@pytest.mark.parametrize("title", SAMPLE_TITLES)
def test_slug_character_class(title):
    slug = slugify(title)
    assert re.fullmatch(r"[a-z0-9-]+", slug)
    assert not slug.startswith("-")
    assert not slug.endswith("-")
