from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

HEADING_RE = re.compile(r"^#{1,3}\s+(.+)$")
TITLE_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
HORIZONTAL_RULE_RE = re.compile(r"^[-*_]{3,}\s*$")


@dataclass
class Section:
    name: str
    raw_text: str
    lines: List[str] = field(default_factory=list)


class _ScanState(Enum):
    BEFORE_SECTION = "before_section"
    IN_SECTION = "in_section"


def is_heading(line: str) -> bool:
    return HEADING_RE.match(line.strip()) is not None


def is_horizontal_rule(line: str) -> bool:
    return HORIZONTAL_RULE_RE.match(line.strip()) is not None


def extract_title(body: str) -> str:
    """Return the text of the first level-1 heading, or an empty string."""
    match = TITLE_RE.search(body)
    return match.group(1).strip() if match else ""


def extract_section(body: str, name: str) -> Optional[Section]:
    """
    Isolate the block of lines under the first heading named ``name``.

    Headings are one to three ``#`` characters; the comparison is on the
    trimmed, case-folded heading text. The block ends at the next heading or
    horizontal rule. Returns None when no heading matches.
    """
    target = name.strip().casefold()
    state = _ScanState.BEFORE_SECTION
    collected: List[str] = []

    for line in body.splitlines():
        stripped = line.strip()
        if state is _ScanState.BEFORE_SECTION:
            heading = HEADING_RE.match(stripped)
            if heading and heading.group(1).strip().casefold() == target:
                state = _ScanState.IN_SECTION
            continue
        if HEADING_RE.match(stripped) or HORIZONTAL_RULE_RE.match(stripped):
            break
        collected.append(line)

    if state is _ScanState.BEFORE_SECTION:
        return None
    return Section(
        name=name,
        raw_text="\n".join(collected).strip(),
        lines=[line.strip() for line in collected],
    )
