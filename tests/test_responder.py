"""Tests for the issue responder."""

from __future__ import annotations

import pytest

from release_drafter.config import DrafterSettings
from release_drafter.coordinates import RepositoryCoordinate
from release_drafter.platform.github import InMemoryGitHubPlatform
from release_drafter.responder import IssueResponder
from release_drafter.schemas import IssueEvent


def issue_event(action: str = "opened", author: str = "reporter") -> IssueEvent:
    return IssueEvent(
        action=action,
        issue_number=12,
        author=author,
        repository=RepositoryCoordinate(owner="myorg", name="api"),
    )


class TestIssueResponder:
    @pytest.mark.asyncio
    async def test_comments_on_opened_issue(self) -> None:
        platform = InMemoryGitHubPlatform()
        responder = IssueResponder(platform, DrafterSettings(issue_greeting="Thanks!"))

        assert await responder.respond(issue_event()) is True
        assert platform.comments == [("myorg", "api", 12, "Thanks!")]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["edited", "closed", "labeled"])
    async def test_other_actions_ignored(self, action: str) -> None:
        platform = InMemoryGitHubPlatform()
        assert await IssueResponder(platform).respond(issue_event(action=action)) is False
        assert platform.calls == []

    @pytest.mark.asyncio
    async def test_ignored_author(self) -> None:
        platform = InMemoryGitHubPlatform()
        responder = IssueResponder(
            platform, DrafterSettings(ignored_issue_authors=["owner-login"])
        )
        assert await responder.respond(issue_event(author="owner-login")) is False
        assert platform.calls == []
