from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def comapeo_body() -> str:
    return (FIXTURES / "comapeo_issue.md").read_text(encoding="utf-8")


@pytest.fixture
def minimal_body():
    """Builds a complete issue body; keyword overrides replace whole sections."""

    def _build(**overrides: str) -> str:
        sections = {
            "title": "# Field Notes App",
            "description": "## Description\n\nOffline note taking for field teams.",
            "organization": (
                "## Organization\n\n**Name:** Field Org\n**Short name:** fieldorg\n"
                "**Website:** https://field.example.org"
            ),
            "status": "## Project Status\n\n**State:** paused\n**Usage:** experimental",
            "tags": "## Tags\n\nNotes, Offline",
            "media": "## Media\n\n**Logo:** https://field.example.org/logo.svg",
            "links": "## Links\n\n**Homepage:** https://field.example.org/app",
        }
        sections.update(overrides)
        return "\n\n".join(part for part in sections.values() if part)

    return _build
