"""
Draft and validated shapes of a project record.

The draft is what the extractors fill in: plain strings and lists, nothing
checked. ``validate_draft`` is the gate between the two; it either returns a
frozen ``ProjectRecord`` or raises ``SchemaViolationError`` listing every
failed constraint keyed by its dotted JSON path (``organization.shortName``,
``tags.2``, ...).
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Tuple

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import SchemaViolation, SchemaViolationError

SLUG_PATTERN = r"^[a-z0-9-]+$"
TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
SHORT_NAME_MAX_LENGTH = 50
TAG_MAX_LENGTH = 50

ISO_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"
)

_URL_ADAPTER = TypeAdapter(AnyUrl)


########################
# DRAFT (UNVALIDATED)
########################


@dataclass
class DraftOrganization:
    name: str = ""
    short_name: str = ""
    url: str = ""


@dataclass
class DraftStatus:
    state: str = ""
    usage: str = ""
    notes: str = ""


@dataclass
class DraftMedia:
    logo: str = ""
    images: List[str] = field(default_factory=list)


@dataclass
class DraftLinks:
    homepage: str = ""
    repository: str = ""
    documentation: str = ""


@dataclass
class DraftTimestamps:
    created_at: str = ""
    last_updated_at: str = ""


@dataclass
class DraftRecord:
    id: str
    issue_number: int
    title: str
    slug: str
    description: str = ""
    organization: DraftOrganization = field(default_factory=DraftOrganization)
    status: DraftStatus = field(default_factory=DraftStatus)
    tags: List[str] = field(default_factory=list)
    media: DraftMedia = field(default_factory=DraftMedia)
    links: DraftLinks = field(default_factory=DraftLinks)
    timestamps: DraftTimestamps = field(default_factory=DraftTimestamps)

    def to_payload(self) -> Dict[str, Any]:
        """Nested dict keyed the way the published JSON is (camelCase)."""
        return _camelize(asdict(self))


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(key): _camelize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_camelize(item) for item in value]
    return value


########################
# VALIDATED RECORD
########################


class ProjectState(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class ProjectUsage(str, Enum):
    EXPERIMENTAL = "experimental"
    USED = "used"
    WIDELY_USED = "widely-used"


def _valid_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid URL") from None
    return value


def _valid_url_or_empty(value: str) -> str:
    return value if value == "" else _valid_url(value)


UrlStr = Annotated[str, AfterValidator(_valid_url)]
OptionalUrlStr = Annotated[str, AfterValidator(_valid_url_or_empty)]
Tag = Annotated[str, Field(min_length=1, max_length=TAG_MAX_LENGTH)]


class _RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


class Organization(_RecordModel):
    name: str = Field(..., min_length=1)
    short_name: str = Field(..., min_length=1, max_length=SHORT_NAME_MAX_LENGTH)
    url: UrlStr


class Status(_RecordModel):
    state: ProjectState
    usage: ProjectUsage
    notes: str = ""


class Media(_RecordModel):
    logo: OptionalUrlStr = ""
    images: Tuple[UrlStr, ...] = ()

    @model_validator(mode="after")
    def _images_exclude_logo(self) -> "Media":
        if self.logo and self.logo in self.images:
            raise ValueError("images must not repeat the logo URL")
        return self


class Links(_RecordModel):
    homepage: UrlStr
    repository: OptionalUrlStr = ""
    documentation: OptionalUrlStr = ""


class Timestamps(_RecordModel):
    created_at: str
    last_updated_at: str

    @field_validator("created_at", "last_updated_at")
    @classmethod
    def _iso_datetime(cls, value: str) -> str:
        if not ISO_DATETIME_RE.match(value):
            raise ValueError("must be an ISO 8601 datetime")
        try:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("must be an ISO 8601 datetime") from None
        return value


class ProjectRecord(_RecordModel):
    id: str = Field(..., min_length=1)
    issue_number: int = Field(..., gt=0, strict=True)
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    slug: str = Field(..., min_length=1, pattern=SLUG_PATTERN)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    organization: Organization
    status: Status
    tags: Tuple[Tag, ...] = ()
    media: Media = Field(default_factory=Media)
    links: Links
    timestamps: Timestamps

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProjectsDocument(_RecordModel):
    projects: Tuple[ProjectRecord, ...] = ()

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


########################
# GATE
########################


def violations_from(exc: ValidationError) -> List[SchemaViolation]:
    violations: List[SchemaViolation] = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error.get("loc", ())) or "<record>"
        violations.append(SchemaViolation(field_path=path, reason=error.get("msg", "invalid value")))
    return violations


def validate_draft(draft: DraftRecord) -> ProjectRecord:
    if not isinstance(draft, DraftRecord):
        raise TypeError(f"validate_draft expects a DraftRecord, got {type(draft).__name__}")
    try:
        return ProjectRecord.model_validate(draft.to_payload())
    except ValidationError as exc:
        raise SchemaViolationError(violations_from(exc)) from None
