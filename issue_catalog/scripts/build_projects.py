from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from issue_catalog.batch import IssueInput, build_catalog, load_issue_dump, write_projects_file
from issue_catalog.config import DEFAULT_CONFIG_PATH, Settings, load_settings
from issue_catalog.github_client import GitHubAPIError, GitHubIssueClient

LOGGER = logging.getLogger("issue_catalog.build_projects")


def configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity > 0 else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build projects.json from GitHub issues labelled for publication.",
    )
    parser.add_argument(
        "--issues",
        type=Path,
        help="JSON file with GitHub issue objects; when omitted, issues are fetched from the GitHub API.",
    )
    parser.add_argument("--output", type=Path, help="Where to write projects.json (overrides settings)")
    parser.add_argument("--workers", type=int, help="Parse issues on this many threads (overrides settings)")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Optional YAML settings file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity")
    return parser.parse_args(argv)


def collect_issues(args: argparse.Namespace, settings: Settings) -> List[IssueInput]:
    if args.issues:
        LOGGER.info("Reading issues from %s", args.issues)
        return load_issue_dump(args.issues)
    settings.validate_for_fetch()
    client = GitHubIssueClient(
        settings.github_token,
        settings.github_repository,
        label=settings.publish_label,
        per_page=settings.per_page,
        timeout=settings.request_timeout,
    )
    return [IssueInput.from_github(payload) for payload in client.fetch_publishable_issues()]


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_settings(args.config)
        issues = collect_issues(args, settings)
    except (GitHubAPIError, OSError, ValueError, KeyError) as exc:
        LOGGER.error("Error: %s", exc)
        return 1

    workers = args.workers if args.workers is not None else settings.workers
    build = build_catalog(issues, workers=max(1, workers))

    output = args.output or settings.output_path
    try:
        write_projects_file(output, build.records)
    except OSError as exc:
        LOGGER.error("Failed to write %s: %s", output, exc)
        return 1

    for line in build.summary_lines():
        LOGGER.info(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
