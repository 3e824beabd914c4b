"""
Turn GitHub issue bodies into validated project records for the static
showcase site.
"""

from .assembler import (  # noqa: F401
    ParseResult,
    PipelineStage,
    assemble_draft,
    parse_issue_body,
)
from .batch import (  # noqa: F401
    CatalogBuild,
    IssueInput,
    build_catalog,
    load_projects_file,
    write_projects_file,
)
from .errors import (  # noqa: F401
    EmptyBodyError,
    IssueParseError,
    MissingRequiredFieldError,
    MissingTitleError,
    SchemaViolation,
    SchemaViolationError,
)
from .markdown_parser import Section, extract_section  # noqa: F401
from .normalize import slugify  # noqa: F401
from .schema import (  # noqa: F401
    DraftRecord,
    ProjectRecord,
    ProjectsDocument,
    ProjectState,
    ProjectUsage,
    validate_draft,
)

__all__ = [
    "ParseResult",
    "PipelineStage",
    "assemble_draft",
    "parse_issue_body",
    "CatalogBuild",
    "IssueInput",
    "build_catalog",
    "load_projects_file",
    "write_projects_file",
    "EmptyBodyError",
    "IssueParseError",
    "MissingRequiredFieldError",
    "MissingTitleError",
    "SchemaViolation",
    "SchemaViolationError",
    "Section",
    "extract_section",
    "slugify",
    "DraftRecord",
    "ProjectRecord",
    "ProjectsDocument",
    "ProjectState",
    "ProjectUsage",
    "validate_draft",
]
