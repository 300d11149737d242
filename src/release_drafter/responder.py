"""Auto-reply to newly opened issues."""

from __future__ import annotations

from release_drafter.config import DrafterSettings
from release_drafter.logging_config import get_logger
from release_drafter.platform.github import GitHubPlatformProtocol
from release_drafter.schemas import IssueEvent

logger = get_logger(__name__)


class IssueResponder:
    """Posts a fixed greeting on every issue opened by someone else.

    Maintainers listed in ``ignored_issue_authors`` don't get thanked for
    their own issues.
    """

    def __init__(
        self,
        platform: GitHubPlatformProtocol,
        settings: DrafterSettings | None = None,
    ) -> None:
        self.platform = platform
        self.settings = settings or DrafterSettings()

    async def respond(self, event: IssueEvent) -> bool:
        """Comment on the issue if it was just opened.

        Returns:
            True if a comment was posted
        """
        if event.action != "opened":
            return False
        if event.author in self.settings.ignored_issue_authors:
            logger.info(
                "issue_comment_skipped",
                repo=event.repository.full_name,
                issue=event.issue_number,
                author=event.author,
            )
            return False

        await self.platform.create_comment(
            event.repository.owner,
            event.repository.name,
            event.issue_number,
            body=self.settings.issue_greeting,
        )
        logger.info(
            "issue_comment_posted",
            repo=event.repository.full_name,
            issue=event.issue_number,
        )
        return True
