"""Commit range retrieval between the prior release and the new head."""

from __future__ import annotations

from release_drafter.coordinates import RepositoryCoordinate
from release_drafter.logging_config import get_logger
from release_drafter.platform.github import GitHubPlatformProtocol
from release_drafter.schemas import CommitRange, ReleaseAnchor

logger = get_logger(__name__)


class CommitRangeFetcher:
    """Fetches the commits introduced since an anchor commit.

    The range keeps the platform's order (oldest first); the changelog
    formatter relies on that.
    """

    def __init__(self, platform: GitHubPlatformProtocol) -> None:
        self.platform = platform

    async def fetch(
        self,
        coordinate: RepositoryCoordinate,
        anchor: ReleaseAnchor,
        head: str = "HEAD",
    ) -> CommitRange:
        """Return the commits reachable from head but not from anchor.

        Args:
            coordinate: Repository to compare in
            anchor: Base commit SHA; None means there is nothing to diff
                    against and no call is made
            head: Head ref of the comparison

        Returns:
            The commit range, oldest first, never including the anchor
        """
        if anchor is None:
            return ()

        commits = await self.platform.compare_commits(
            coordinate.owner, coordinate.name, base=anchor, head=head
        )
        commit_range = tuple(c for c in commits if c.sha != anchor)

        logger.info(
            "commit_range_fetched",
            repo=coordinate.full_name,
            base=anchor,
            head=head,
            commits=[c.short_sha for c in commit_range],
        )
        return commit_range
