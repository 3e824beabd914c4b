from __future__ import annotations

import re
from typing import Any

SLUG_FALLBACK = "unknown"
_NON_SLUG_RUN_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: Any) -> str:
    """
    Derive a URL-safe identifier from a title.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single hyphen and trims hyphens from both ends. Non-string input, or a
    title with nothing left after cleaning, yields ``"unknown"`` so that
    ``slugify(slugify(x)) == slugify(x)`` holds for every input.
    """
    if not isinstance(text, str):
        return SLUG_FALLBACK
    slug = _NON_SLUG_RUN_RE.sub("-", text.lower()).strip("-")
    return slug or SLUG_FALLBACK
