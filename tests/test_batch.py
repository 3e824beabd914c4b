import json
from pathlib import Path

import pytest

from issue_catalog.batch import (
    CatalogBuild,
    IssueInput,
    build_catalog,
    load_issue_dump,
    load_projects_file,
    write_projects_file,
)

CREATED_AT = "2026-02-03T18:34:20Z"
UPDATED_AT = "2026-02-05T09:12:00Z"


def github_issue(number: int, body, state: str = "open") -> dict:
    return {
        "number": number,
        "title": f"Issue {number}",
        "body": body,
        "state": state,
        "created_at": CREATED_AT,
        "updated_at": UPDATED_AT,
        "labels": [{"name": "publish:yes"}],
    }


@pytest.fixture
def mixed_issues(comapeo_body, minimal_body):
    return [
        IssueInput(2, comapeo_body, CREATED_AT, UPDATED_AT),
        IssueInput(3, "", CREATED_AT, UPDATED_AT),
        IssueInput(4, minimal_body(title="# Second Project"), CREATED_AT, UPDATED_AT),
        IssueInput(5, minimal_body(organization=""), CREATED_AT, UPDATED_AT),
        IssueInput(6, minimal_body(title="# Archived Tool", status="## Project Status\n**State:** archived\n**Usage:** used"), CREATED_AT, UPDATED_AT),
    ]


def test_from_github_tolerates_null_body():
    issue = IssueInput.from_github(github_issue(9, None))
    assert issue.number == 9
    assert issue.body == ""
    assert issue.created_at == CREATED_AT


def test_build_catalog_skips_failures_without_aborting(mixed_issues):
    build = build_catalog(mixed_issues)

    assert build.attempted == 5
    assert build.accepted == 3
    assert [r.issue_number for r in build.records] == [2, 4, 6]
    assert [number for number, _ in build.failures] == [3, 5]
    assert build.failures[0][1] == "Issue has no body content"
    assert "organization.name" in build.failures[1][1]


def test_threaded_build_matches_sequential_order(mixed_issues):
    sequential = build_catalog(mixed_issues, workers=1)
    threaded = build_catalog(mixed_issues, workers=4)

    assert threaded.records == sequential.records
    assert threaded.failures == sequential.failures


def test_state_counts_and_summary(mixed_issues):
    build = build_catalog(mixed_issues)

    assert build.state_counts() == {"active": 1, "paused": 1, "archived": 1}
    lines = build.summary_lines(latest=2)
    assert lines[0] == "Attempted: 5, accepted: 3, rejected: 2"
    assert lines[1] == "Active: 1, Paused: 1, Archived: 1"
    assert "  #2: CoMapeo Config Spreadsheet Plugin (active)" in lines
    assert "  #6: Archived Tool (archived)" not in lines
    assert "  #3: Issue has no body content" in lines


def test_empty_build_summary():
    build = build_catalog([])
    assert build == CatalogBuild(attempted=0)
    assert build.summary_lines() == [
        "Attempted: 0, accepted: 0, rejected: 0",
        "Active: 0, Paused: 0, Archived: 0",
    ]


def test_projects_file_written_and_reloaded(tmp_path: Path, mixed_issues):
    build = build_catalog(mixed_issues)
    output = tmp_path / "public" / "projects.json"

    write_projects_file(output, build.records)

    raw = json.loads(output.read_text(encoding="utf-8"))
    assert [p["slug"] for p in raw["projects"]] == [
        "comapeo-config-spreadsheet-plugin",
        "second-project",
        "archived-tool",
    ]
    assert raw["projects"][0]["organization"]["shortName"] == "digidem"
    assert list(load_projects_file(output).projects) == build.records


def test_load_issue_dump_accepts_list_or_wrapper(tmp_path: Path, comapeo_body):
    as_list = tmp_path / "issues.json"
    as_list.write_text(json.dumps([github_issue(2, comapeo_body)]), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"issues": [github_issue(2, comapeo_body), github_issue(3, None)]}), encoding="utf-8")

    assert [i.number for i in load_issue_dump(as_list)] == [2]
    assert [i.body == "" for i in load_issue_dump(wrapped)] == [False, True]


def test_load_issue_dump_rejects_other_shapes(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps("just a string"), encoding="utf-8")
    with pytest.raises(ValueError):
        load_issue_dump(bad)


@pytest.mark.parametrize(
    "overrides",
    [
        {"number": "2"},
        {"number": True},
        {"number": None},
        {"created_at": 1738607660},
        {"body": ["# Title"]},
    ],
)
def test_from_github_rejects_wrong_types(overrides):
    payload = {**github_issue(2, "# Title"), **overrides}
    with pytest.raises(ValueError):
        IssueInput.from_github(payload)


def test_load_issue_dump_rejects_non_object_entries(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_issue_dump(bad)


def test_failed_write_keeps_previous_projects_file(tmp_path: Path, mixed_issues, monkeypatch):
    output = tmp_path / "projects.json"
    output.write_text('{"projects": []}\n', encoding="utf-8")
    build = build_catalog(mixed_issues)

    def broken_dump(obj, fp, **kwargs):
        fp.write('{"projects": [')
        raise OSError("disk full")

    monkeypatch.setattr(json, "dump", broken_dump)
    with pytest.raises(OSError, match="disk full"):
        write_projects_file(output, build.records)

    assert output.read_text(encoding="utf-8") == '{"projects": []}\n'
    assert list(tmp_path.iterdir()) == [output]
