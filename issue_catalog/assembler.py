from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .errors import (
    EmptyBodyError,
    IssueParseError,
    MissingRequiredFieldError,
    MissingTitleError,
)
from .field_extract import (
    extract_key_value,
    extract_logo,
    parse_description,
    parse_images,
    parse_notes,
    parse_tags,
)
from .markdown_parser import extract_section, extract_title
from .normalize import slugify
from .schema import (
    DraftLinks,
    DraftMedia,
    DraftOrganization,
    DraftRecord,
    DraftStatus,
    DraftTimestamps,
    ProjectRecord,
    validate_draft,
)

LOGGER = logging.getLogger(__name__)

DESCRIPTION_SECTION = "Description"
ORGANIZATION_SECTION = "Organization"
STATUS_SECTION = "Project Status"
TAGS_SECTION = "Tags"
MEDIA_SECTION = "Media"
LINKS_SECTION = "Links"

# Absent usage is carried into the schema gate as-is and rejected there.
USAGE_FALLBACK = "unknown"

REQUIRED_FIELDS: Tuple[Tuple[str, Callable[[DraftRecord], str]], ...] = (
    ("title", lambda d: d.title),
    ("description", lambda d: d.description),
    ("organization.name", lambda d: d.organization.name),
    ("organization.shortName", lambda d: d.organization.short_name),
    ("organization.url", lambda d: d.organization.url),
    ("status.state", lambda d: d.status.state),
    ("links.homepage", lambda d: d.links.homepage),
)


class PipelineStage(str, Enum):
    START = "start"
    TITLE_EXTRACTED = "title_extracted"
    SECTIONS_EXTRACTED = "sections_extracted"
    REQUIRED_FIELDS_CHECKED = "required_fields_checked"
    VALIDATED = "validated"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one issue body: a validated record, or the error that rejected it."""

    issue_number: int
    record: Optional[ProjectRecord] = None
    error: Optional[IssueParseError] = None
    reached: PipelineStage = PipelineStage.START

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def stage(self) -> PipelineStage:
        return PipelineStage.VALIDATED if self.ok else PipelineStage.REJECTED

    @property
    def reason(self) -> str:
        return str(self.error) if self.error else ""

    def unwrap(self) -> ProjectRecord:
        if self.record is None:
            raise self.error or IssueParseError(f"Issue #{self.issue_number} was not parsed")
        return self.record


def missing_required(draft: DraftRecord) -> List[str]:
    return [name for name, getter in REQUIRED_FIELDS if not (getter(draft) or "").strip()]


def assemble_draft(
    body: str,
    issue_number: int,
    created_at: str,
    updated_at: str,
    *,
    stage_hook: Optional[Callable[[PipelineStage], None]] = None,
) -> DraftRecord:
    """
    Run the section and field extractors over one issue body.

    Raises MissingTitleError before any section is read when the body has no
    level-1 heading, and MissingRequiredFieldError naming the first empty
    mandatory field otherwise.
    """
    notify = stage_hook or (lambda _stage: None)

    title = extract_title(body)
    if not title:
        raise MissingTitleError()
    notify(PipelineStage.TITLE_EXTRACTED)

    slug = slugify(title)
    description = extract_section(body, DESCRIPTION_SECTION)
    organization = extract_section(body, ORGANIZATION_SECTION)
    status = extract_section(body, STATUS_SECTION)
    tags = extract_section(body, TAGS_SECTION)
    media = extract_section(body, MEDIA_SECTION)
    links = extract_section(body, LINKS_SECTION)

    logo = extract_logo(media)
    draft = DraftRecord(
        id=slug,
        issue_number=issue_number,
        title=title,
        slug=slug,
        description=parse_description(description),
        organization=DraftOrganization(
            name=extract_key_value(organization, "Name"),
            short_name=extract_key_value(organization, "Short name"),
            url=extract_key_value(organization, "Website"),
        ),
        status=DraftStatus(
            state=extract_key_value(status, "State"),
            usage=extract_key_value(status, "Usage") or USAGE_FALLBACK,
            notes=parse_notes(status),
        ),
        tags=parse_tags(tags),
        media=DraftMedia(logo=logo, images=parse_images(media, logo=logo)),
        links=DraftLinks(
            homepage=extract_key_value(links, "Homepage"),
            repository=extract_key_value(links, "Repository"),
            documentation=extract_key_value(links, "Documentation"),
        ),
        timestamps=DraftTimestamps(created_at=created_at, last_updated_at=updated_at),
    )
    notify(PipelineStage.SECTIONS_EXTRACTED)

    missing = missing_required(draft)
    if missing:
        raise MissingRequiredFieldError(missing[0], missing)
    notify(PipelineStage.REQUIRED_FIELDS_CHECKED)
    return draft


def _check_arguments(body: object, issue_number: object, created_at: object, updated_at: object) -> None:
    if not isinstance(body, str):
        raise TypeError(f"issue body must be str, got {type(body).__name__}")
    if isinstance(issue_number, bool) or not isinstance(issue_number, int):
        raise TypeError(f"issue number must be int, got {type(issue_number).__name__}")
    for label, value in (("created_at", created_at), ("updated_at", updated_at)):
        if not isinstance(value, str):
            raise TypeError(f"{label} must be an ISO 8601 string, got {type(value).__name__}")


def parse_issue_body(body: str, issue_number: int, created_at: str, updated_at: str) -> ParseResult:
    """
    Parse one issue body into a validated ``ProjectRecord``.

    Malformed markdown never raises: the returned ``ParseResult`` carries the
    record or the rejecting error plus the last stage that was reached.
    Wrong argument types are caller bugs and raise ``TypeError``.
    """
    _check_arguments(body, issue_number, created_at, updated_at)

    reached = [PipelineStage.START]
    if not body.strip():
        return ParseResult(issue_number=issue_number, error=EmptyBodyError(), reached=reached[-1])

    try:
        draft = assemble_draft(body, issue_number, created_at, updated_at, stage_hook=reached.append)
        record = validate_draft(draft)
    except IssueParseError as exc:
        LOGGER.debug("Issue #%s rejected after %s: %s", issue_number, reached[-1].value, exc)
        return ParseResult(issue_number=issue_number, error=exc, reached=reached[-1])

    return ParseResult(issue_number=issue_number, record=record, reached=reached[-1])
