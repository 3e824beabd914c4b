from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

import requests

LOGGER = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"
USER_AGENT = "issue-catalog-fetch-projects"
API_VERSION = "2022-11-28"
MAX_PER_PAGE = 100


class GitHubAPIError(RuntimeError):
    pass


class GitHubIssueClient:
    def __init__(
        self,
        token: str,
        repository: str,
        label: str = "publish:yes",
        per_page: int = 100,
        timeout: int = 30,
        base_url: str = GITHUB_API_BASE,
    ) -> None:
        parts = repository.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f'Invalid GITHUB_REPOSITORY format: "{repository}". Expected "owner/repo".')
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}, got {per_page}")
        self.owner, self.name = parts
        self.token = token
        self.label = label
        self.per_page = per_page
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/vnd.github.v3+json",
            "Authorization": f"Bearer {self.token}",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": API_VERSION,
        }

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.ok:
            return
        status = response.status_code
        if status == 401:
            raise GitHubAPIError("GitHub API authentication failed. Please check your GITHUB_TOKEN is valid.")
        if status == 404:
            raise GitHubAPIError(f"Repository {self.owner}/{self.name} not found or token lacks access.")
        if status == 403:
            reset = response.headers.get("X-RateLimit-Reset")
            reset_time = (
                datetime.fromtimestamp(int(reset), tz=timezone.utc).isoformat() if reset and reset.isdigit() else "unknown"
            )
            raise GitHubAPIError(f"GitHub API rate limit exceeded. Resets at: {reset_time}")
        raise GitHubAPIError(f"GitHub API request failed: {status} {response.reason}")

    def fetch_page(self, page: int) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/repos/{self.owner}/{self.name}/issues"
        params = {
            "labels": self.label,
            "state": "all",
            "per_page": self.per_page,
            "page": page,
            "sort": "created",
            "direction": "desc",
        }
        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise GitHubAPIError(f"Network error fetching issues: {exc}") from exc
        self._raise_for_status(response)
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise GitHubAPIError(f"Expected JSON response from GitHub API, got: {content_type}")
        data = response.json()
        if not isinstance(data, list):
            raise GitHubAPIError(f"Unexpected payload from GitHub API: {type(data).__name__}")
        return data

    def fetch_publishable_issues(self) -> List[Dict[str, Any]]:
        LOGGER.info('Fetching issues with label "%s" from %s/%s...', self.label, self.owner, self.name)
        issues: List[Dict[str, Any]] = []
        page = 1
        while True:
            batch = self.fetch_page(page)
            issues.extend(batch)
            if not batch or len(batch) < self.per_page:
                break
            LOGGER.debug("Fetched %d issues so far", len(issues))
            page += 1
        LOGGER.info('Fetched %d issues with label "%s"', len(issues), self.label)
        return issues
