from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple


class IssueParseError(ValueError):
    """Base class for per-record failures; the batch recovers from all of these."""


class EmptyBodyError(IssueParseError):
    def __init__(self) -> None:
        super().__init__("Issue has no body content")


class MissingTitleError(IssueParseError):
    def __init__(self) -> None:
        super().__init__("No level-1 heading found for the project title")


class MissingRequiredFieldError(IssueParseError):
    def __init__(self, field_name: str, missing_fields: Sequence[str] = ()) -> None:
        self.field_name = field_name
        self.missing_fields: Tuple[str, ...] = tuple(missing_fields) or (field_name,)
        super().__init__(f"Missing required field: {field_name}")


@dataclass(frozen=True)
class SchemaViolation:
    field_path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field_path}: {self.reason}"


class SchemaViolationError(IssueParseError):
    def __init__(self, violations: Sequence[SchemaViolation]) -> None:
        self.violations: List[SchemaViolation] = list(violations)
        detail = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Schema validation failed: {detail}")

    def by_field(self) -> dict:
        grouped: dict = {}
        for violation in self.violations:
            grouped.setdefault(violation.field_path, []).append(violation.reason)
        return grouped
