"""Release creation on the hosting platform."""

from __future__ import annotations

from release_drafter.coordinates import RepositoryCoordinate
from release_drafter.logging_config import get_logger
from release_drafter.platform.github import GitHubPlatformProtocol
from release_drafter.schemas import Release

logger = get_logger(__name__)


class ReleasePublisher:
    """Creates the release for a newly pushed tag.

    There is no existence check: if the tag already has a release, the
    platform rejects the call and ConflictError propagates.
    """

    def __init__(self, platform: GitHubPlatformProtocol) -> None:
        self.platform = platform

    async def publish(
        self, coordinate: RepositoryCoordinate, tag_name: str, body: str
    ) -> Release:
        release = await self.platform.create_release(
            coordinate.owner,
            coordinate.name,
            tag_name=tag_name,
            name=tag_name,
            body=body,
        )
        logger.info(
            "release_published",
            repo=coordinate.full_name,
            tag=tag_name,
            release_id=release.id,
            url=release.html_url,
        )
        return release
