from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Pattern

from .markdown_parser import Section

URL_RE = re.compile(r"https?://\S+", re.IGNORECASE)
BOLD_EDGES_RE = re.compile(r"^\*\*|\*\*$")


@lru_cache(maxsize=None)
def _key_pattern(key: str) -> Pattern[str]:
    escaped = re.escape(key)
    return re.compile(rf"^\*{{0,2}}{escaped}\*{{0,2}}:\s*(.*)$", re.IGNORECASE)


def _strip_bold(value: str) -> str:
    return BOLD_EDGES_RE.sub("", value.strip()).strip()


def _find_marker(section: Section, marker: str) -> int:
    prefix = f"**{marker.lower()}"
    for idx, line in enumerate(section.lines):
        if line.lower().startswith(prefix):
            return idx
    return -1


def extract_key_value(section: Optional[Section], key: str) -> str:
    """
    Pull the value of a ``Key: value`` line, tolerating ``**`` around the key.

    When the key line carries no value the following line is used instead.
    That fallback can bind an unrelated line to the key when two marker lines
    are adjacent.
    """
    if section is None:
        return ""
    pattern = _key_pattern(key)
    for idx, line in enumerate(section.lines):
        match = pattern.match(line)
        if not match:
            continue
        value = _strip_bold(match.group(1))
        if not value and idx + 1 < len(section.lines):
            value = _strip_bold(section.lines[idx + 1])
        return value
    return ""


def parse_tags(section: Optional[Section]) -> List[str]:
    if section is None or not section.raw_text:
        return []
    return [tag.strip() for tag in section.raw_text.split(",") if tag.strip()]


def extract_logo(section: Optional[Section]) -> str:
    if section is None:
        return ""
    idx = _find_marker(section, "logo")
    if idx == -1:
        return ""
    for line in section.lines[idx : idx + 2]:
        match = URL_RE.search(line)
        if match:
            return match.group(0).strip()
    return ""


def parse_images(section: Optional[Section], logo: Optional[str] = None) -> List[str]:
    """URLs listed after the ``**Images`` marker (or anywhere, without one), minus the logo."""
    if section is None or not section.raw_text:
        return []
    if logo is None:
        logo = extract_logo(section)
    idx = _find_marker(section, "images")
    candidates = section.lines[idx + 1 :] if idx != -1 else section.lines
    urls: List[str] = []
    for match in URL_RE.finditer("\n".join(candidates)):
        url = match.group(0).strip()
        if url and url != logo:
            urls.append(url)
    return urls


def parse_notes(section: Optional[Section]) -> str:
    if section is None or not section.raw_text:
        return ""
    idx = _find_marker(section, "notes")
    if idx == -1:
        return ""

    fragments: List[str] = []
    marker_line = section.lines[idx]
    colon = marker_line.find(":")
    if colon >= 0:
        same_line = marker_line[colon + 1 :].replace("*", "").strip()
        if same_line:
            fragments.append(same_line)

    for line in section.lines[idx + 1 :]:
        if line.startswith("**"):
            break
        if line:
            fragments.append(line)
    return " ".join(fragments).strip()


def parse_description(section: Optional[Section]) -> str:
    if section is None or not section.raw_text:
        return ""
    paragraphs = [line.strip() for line in section.raw_text.split("\n") if line.strip()]
    return "\n\n".join(paragraphs)
