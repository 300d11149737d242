"""Latest-release resolution.

Finds the commit the most recent published release points at. That
commit is the base ("anchor") of the next comparison.
"""

from __future__ import annotations

from release_drafter.coordinates import RepositoryCoordinate
from release_drafter.logging_config import get_logger
from release_drafter.platform.github import GitHubPlatformProtocol
from release_drafter.schemas import ReleaseAnchor

logger = get_logger(__name__)


class LatestReleaseResolver:
    """Resolves a repository's latest release to a commit SHA."""

    def __init__(self, platform: GitHubPlatformProtocol) -> None:
        self.platform = platform

    async def resolve(self, coordinate: RepositoryCoordinate) -> ReleaseAnchor:
        """Return the anchor SHA, or None if the repository has no release.

        A repository without releases is the normal first-release state.
        Every platform failure, including a latest release whose tag no
        longer exists, propagates to the caller.
        """
        latest = await self.platform.get_latest_release(coordinate.owner, coordinate.name)
        if latest is None:
            logger.info("no_prior_release", repo=coordinate.full_name)
            return None

        sha = await self.platform.get_ref(
            coordinate.owner, coordinate.name, f"tags/{latest.tag_name}"
        )
        logger.info(
            "anchor_resolved",
            repo=coordinate.full_name,
            latest_tag=latest.tag_name,
            anchor=sha,
        )
        return sha
