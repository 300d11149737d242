"""Runtime settings for the release drafter.

Settings are resolved in three layers, later ones winning:
1. Defaults declared on DrafterSettings
2. An optional YAML file (explicit path or RELEASE_DRAFTER_CONFIG)
3. Environment variables for secrets and endpoints (GITHUB_TOKEN,
   GITHUB_API_URL)

Example YAML:

    heading: "## Changes"
    first_release_text: "Initial release!"
    compare_head: HEAD
    ignored_issue_authors: [octocat]
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

CONFIG_PATH_ENV = "RELEASE_DRAFTER_CONFIG"


class DrafterSettings(BaseModel):
    """Configuration for the drafter, the responder and the GitHub client.

    Attributes:
        github_token: Token used for API calls (empty means anonymous)
        api_base_url: GitHub REST API root
        timeout: Per-request timeout in seconds for the HTTP transport
        compare_head: Head ref for the commit comparison ("HEAD" is the
            default branch tip)
        heading: First line of every non-empty release body
        first_release_text: Body used when no prior release exists
        line_separator: Joins changelog lines; trailing spaces force a
            markdown hard break
        issue_greeting: Comment posted on newly opened issues
        ignored_issue_authors: Logins whose issues get no comment
    """

    github_token: str = ""
    api_base_url: str = "https://api.github.com"
    timeout: float = Field(30.0, gt=0)
    compare_head: str = Field("HEAD", min_length=1)
    heading: str = "## Changes"
    first_release_text: str = "Initial release!"
    line_separator: str = "    \n"
    issue_greeting: str = "Thanks for opening this issue!"
    ignored_issue_authors: list[str] = Field(default_factory=list)


def load_settings(path: str | Path | None = None) -> DrafterSettings:
    """Load settings from YAML (if any) and the environment.

    Args:
        path: YAML file to read. Falls back to RELEASE_DRAFTER_CONFIG.
              A missing file yields the defaults.

    Returns:
        Validated DrafterSettings

    Raises:
        ValueError: If the YAML is unparsable or fails validation.
    """
    path = path or os.environ.get(CONFIG_PATH_ENV)
    raw: dict = {}
    if path and Path(path).exists():
        try:
            raw = yaml.safe_load(Path(path).read_text()) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid drafter config in {path}: expected a mapping")

    token = os.environ.get("GITHUB_TOKEN")
    if token:
        raw["github_token"] = token
    api_url = os.environ.get("GITHUB_API_URL")
    if api_url:
        raw["api_base_url"] = api_url

    try:
        return DrafterSettings.model_validate(raw)
    except Exception as exc:
        raise ValueError(f"Invalid drafter config: {exc}") from exc
