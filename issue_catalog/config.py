from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = Path("catalog.yaml")
DEFAULT_PUBLISH_LABEL = "publish:yes"
DEFAULT_OUTPUT_PATH = Path("public/projects.json")


def _parse_int(value: Any, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    github_token: str
    github_repository: str
    publish_label: str = DEFAULT_PUBLISH_LABEL
    output_path: Path = DEFAULT_OUTPUT_PATH
    per_page: int = 100
    request_timeout: int = 30
    workers: int = 1

    def validate_for_fetch(self) -> None:
        if not self.github_token:
            raise ValueError("GITHUB_TOKEN environment variable is required")
        if not self.github_repository:
            raise ValueError("GITHUB_REPOSITORY environment variable is required")


def _settings_from_env() -> Dict[str, Any]:
    return {
        "github_token": os.getenv("GITHUB_TOKEN", ""),
        "github_repository": os.getenv("GITHUB_REPOSITORY", ""),
        "publish_label": os.getenv("PUBLISH_LABEL", DEFAULT_PUBLISH_LABEL),
        "output_path": os.getenv("PROJECTS_OUTPUT", str(DEFAULT_OUTPUT_PATH)),
        "per_page": os.getenv("ISSUES_PER_PAGE"),
        "request_timeout": os.getenv("REQUEST_TIMEOUT"),
        "workers": os.getenv("CATALOG_WORKERS"),
    }


def load_yaml_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")
    return data


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Environment (and ``.env``) first, then the YAML file on top."""
    load_dotenv()
    merged = {**_settings_from_env(), **load_yaml_config(config_path or DEFAULT_CONFIG_PATH)}
    return Settings(
        github_token=str(merged.get("github_token") or ""),
        github_repository=str(merged.get("github_repository") or ""),
        publish_label=str(merged.get("publish_label") or DEFAULT_PUBLISH_LABEL),
        output_path=Path(merged.get("output_path") or DEFAULT_OUTPUT_PATH),
        per_page=_parse_int(merged.get("per_page"), 100),
        request_timeout=_parse_int(merged.get("request_timeout"), 30),
        workers=max(1, _parse_int(merged.get("workers"), 1)),
    )
