"""Markdown rendering of a commit range into a release body.

Output for a non-empty range:

    ## Changes

    [`d2d2d2d`](https://github.com/...) feat: x
    [`d1d1d1d`](https://github.com/...) fix: bug

Lines are newest first and end in a markdown hard break. An empty range
renders as the first-release placeholder alone.
"""

from __future__ import annotations

from collections.abc import Sequence

from release_drafter.config import DrafterSettings
from release_drafter.schemas import Commit


class ChangelogFormatter:
    """Renders commits as a release body.

    Usage:
        formatter = ChangelogFormatter(heading="## 변경 사항")
        body = formatter.render(commits)
    """

    def __init__(
        self,
        heading: str = "## Changes",
        first_release_text: str = "Initial release!",
        line_separator: str = "    \n",
    ) -> None:
        self.heading = heading
        self.first_release_text = first_release_text
        self.line_separator = line_separator

    @classmethod
    def from_settings(cls, settings: DrafterSettings) -> ChangelogFormatter:
        return cls(
            heading=settings.heading,
            first_release_text=settings.first_release_text,
            line_separator=settings.line_separator,
        )

    @staticmethod
    def render_line(commit: Commit) -> str:
        return f"[`{commit.short_sha}`]({commit.url}) {commit.summary}"

    def render(self, commits: Sequence[Commit]) -> str:
        """Render a commit range (oldest first) as a release body."""
        if not commits:
            return self.first_release_text

        lines = self.line_separator.join(
            self.render_line(c) for c in reversed(commits)
        )
        return f"{self.heading}\n\n{lines}"
