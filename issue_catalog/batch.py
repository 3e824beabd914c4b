from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from .assembler import ParseResult, parse_issue_body
from .errors import EmptyBodyError
from .schema import ProjectRecord, ProjectsDocument, ProjectState

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueInput:
    number: int
    body: str
    created_at: str
    updated_at: str

    @classmethod
    def from_github(cls, payload: Mapping[str, Any]) -> "IssueInput":
        """
        Build from a GitHub REST issue object; a ``null`` body becomes ``""``.

        Raises ValueError when the number is not an integer or a body or
        timestamp is present but not a string.
        """
        number = payload.get("number")
        if isinstance(number, bool) or not isinstance(number, int):
            raise ValueError(f"Issue number must be an integer, got {number!r}")
        values: Dict[str, str] = {}
        for key in ("body", "created_at", "updated_at"):
            value = payload.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Issue #{number}: {key} must be a string, got {type(value).__name__}")
            values[key] = value or ""
        return cls(number=number, **values)


@dataclass
class CatalogBuild:
    attempted: int = 0
    records: List[ProjectRecord] = field(default_factory=list)
    failures: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def accepted(self) -> int:
        return len(self.records)

    def state_counts(self) -> Dict[str, int]:
        counts = {state.value: 0 for state in ProjectState}
        for record in self.records:
            counts[record.status.state.value] += 1
        return counts

    def summary_lines(self, latest: int = 5) -> List[str]:
        counts = self.state_counts()
        lines = [
            f"Attempted: {self.attempted}, accepted: {self.accepted}, rejected: {len(self.failures)}",
            f"Active: {counts['active']}, Paused: {counts['paused']}, Archived: {counts['archived']}",
        ]
        if self.records and latest > 0:
            lines.append("Latest projects:")
            for record in self.records[:latest]:
                lines.append(f"  #{record.issue_number}: {record.title} ({record.status.state.value})")
        if self.failures:
            lines.append("Rejected issues:")
            for number, reason in self.failures:
                lines.append(f"  #{number}: {reason}")
        return lines


def _parse_one(issue: IssueInput) -> ParseResult:
    if not issue.body:
        return ParseResult(issue_number=issue.number, error=EmptyBodyError())
    return parse_issue_body(issue.body, issue.number, issue.created_at, issue.updated_at)


def build_catalog(issues: Iterable[IssueInput], workers: int = 1) -> CatalogBuild:
    """
    Parse every issue independently and collect accepted records in input order.

    A rejected issue is logged and recorded in ``failures``; it never stops
    the rest of the batch.
    """
    worklist = list(issues)
    if workers > 1 and len(worklist) > 1:
        with ThreadPoolExecutor(max_workers=workers) as ex:
            results = list(ex.map(_parse_one, worklist))
    else:
        results = [_parse_one(issue) for issue in worklist]

    build = CatalogBuild(attempted=len(worklist))
    for result in results:
        if result.ok:
            build.records.append(result.unwrap())
        else:
            LOGGER.warning("Failed to parse issue #%s: %s", result.issue_number, result.reason)
            build.failures.append((result.issue_number, result.reason))
    return build


def write_projects_file(path: Path, records: Sequence[ProjectRecord]) -> Path:
    document = ProjectsDocument(projects=tuple(records))
    path.parent.mkdir(parents=True, exist_ok=True)
    # The previous file stays in place until the new one is complete.
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document.to_json_dict(), f, indent=2, ensure_ascii=False)
            f.write("\n")
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    LOGGER.info("Wrote %d projects to %s", len(records), path)
    return path


def load_projects_file(path: Path) -> ProjectsDocument:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return ProjectsDocument.model_validate(data)


def load_issue_dump(path: Path) -> List[IssueInput]:
    """Read GitHub issue JSON saved to disk: a list, or ``{"issues": [...]}``."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("issues", [])
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"{path} must hold a list of issue objects")
    return [IssueInput.from_github(item) for item in data]
