"""Release drafting orchestrator.

This module ties together the pipeline steps:
- Coordinate extraction and event validation (schemas.py, coordinates.py)
- Prior release resolution (resolver.py)
- Commit range retrieval (commits.py)
- Changelog rendering (changelog.py)
- Release creation (publisher.py)

The drafter follows this flow for each "create" event:
1. Validate the payload into a TagEvent (fails before any network call)
2. Skip anything that isn't a tag
3. Resolve the latest release to an anchor commit (None for a first release)
4. Fetch the commits since the anchor
5. Render the release body
6. Create the release

Each invocation is independent and holds no state afterwards. Two
events for the same tag produce two create-release calls; concurrent
events for one repository are not coordinated.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Mapping
from typing import Any

from release_drafter.changelog import ChangelogFormatter
from release_drafter.commits import CommitRangeFetcher
from release_drafter.config import DrafterSettings, load_settings
from release_drafter.logging_config import get_logger, setup_logging
from release_drafter.platform.github import GitHubClient, GitHubPlatformProtocol
from release_drafter.publisher import ReleasePublisher
from release_drafter.resolver import LatestReleaseResolver
from release_drafter.schemas import DraftOutcome, DraftState, TagEvent

logger = get_logger(__name__)


class ReleaseDrafter:
    """Drafts and publishes a release note for each new tag.

    Usage:
        drafter = ReleaseDrafter(GitHubClient(token="ghp_..."))
        outcome = await drafter.handle_payload(create_event_payload)
    """

    def __init__(
        self,
        platform: GitHubPlatformProtocol,
        settings: DrafterSettings | None = None,
    ) -> None:
        """Initialize the drafter and its pipeline steps.

        Args:
            platform: GitHub capability handle shared by all steps
            settings: Formatting and comparison settings. Defaults if None.
        """
        self.settings = settings or DrafterSettings()
        self.resolver = LatestReleaseResolver(platform)
        self.fetcher = CommitRangeFetcher(platform)
        self.formatter = ChangelogFormatter.from_settings(self.settings)
        self.publisher = ReleasePublisher(platform)

    async def handle_payload(self, payload: Mapping[str, Any]) -> DraftOutcome:
        """Validate a raw "create" payload and draft its release.

        Raises:
            MalformedEventError: If the payload lacks required fields.
        """
        return await self.draft(TagEvent.from_payload(payload))

    async def draft(self, event: TagEvent) -> DraftOutcome:
        """Run the pipeline for one tag event.

        Args:
            event: The validated triggering event

        Returns:
            A DraftOutcome in state DONE, or SKIPPED for non-tag refs

        Raises:
            PlatformError: Any GitHub failure, unmodified, after logging
                the failing step.
        """
        coordinate = event.repository
        log = logger.bind(owner=coordinate.owner, repo=coordinate.name, tag=event.ref_name)

        if not event.is_tag:
            log.debug("release_draft_skipped", ref_type=event.ref_type.value)
            return DraftOutcome(state=DraftState.SKIPPED, event=event)

        log.info("release_draft_started")
        state = DraftState.START
        try:
            state = DraftState.RESOLVING_ANCHOR
            anchor = await self.resolver.resolve(coordinate)

            state = DraftState.FETCHING_RANGE
            commits = await self.fetcher.fetch(
                coordinate, anchor, head=self.settings.compare_head
            )

            state = DraftState.FORMATTING
            body = self.formatter.render(commits)
            log.debug("release_body_rendered", body=body)

            state = DraftState.PUBLISHING
            release = await self.publisher.publish(coordinate, event.ref_name, body)
        except Exception as e:
            log.error(
                "release_draft_failed",
                state=DraftState.FAILED.value,
                step=state.value,
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
            )
            raise

        log.info(
            "release_draft_complete",
            first_release=anchor is None,
            commits_count=len(commits),
        )
        return DraftOutcome(
            state=DraftState.DONE,
            event=event,
            anchor=anchor,
            commits=list(commits),
            release=release,
        )

    async def preview(self, event: TagEvent) -> str:
        """Resolve, fetch and render the body without creating a release."""
        anchor = await self.resolver.resolve(event.repository)
        commits = await self.fetcher.fetch(
            event.repository, anchor, head=self.settings.compare_head
        )
        return self.formatter.render(commits)


# ---------------------------------------------------------------------------
# CLI Entry Point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: draft a release from a saved "create" payload.

    Usage:
        release-drafter --event create_event.json
        cat create_event.json | release-drafter --dry-run

    Returns:
        Process exit code (0 on success, 1 on failure, 2 on usage errors)
    """
    parser = argparse.ArgumentParser(description="Draft a GitHub release for a new tag")
    parser.add_argument(
        "--event", "-e",
        type=str,
        help="Path to a JSON 'create' webhook payload (reads stdin if omitted)",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        help="Path to a YAML settings file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the release body instead of creating the release",
    )
    args = parser.parse_args(argv)

    if not args.event and sys.stdin.isatty():
        parser.print_usage()
        print("Provide --event FILE or pipe JSON via stdin.")
        return 2

    setup_logging()

    try:
        if args.event:
            with open(args.event) as f:
                payload = json.load(f)
        else:
            payload = json.load(sys.stdin)
    except (OSError, ValueError) as e:
        print(f"Cannot read event payload: {e}", file=sys.stderr)
        return 1

    try:
        settings = load_settings(args.config)
    except ValueError as e:
        print(f"Cannot load settings: {e}", file=sys.stderr)
        return 1

    platform = GitHubClient(
        token=settings.github_token,
        base_url=settings.api_base_url,
        timeout=settings.timeout,
    )
    drafter = ReleaseDrafter(platform, settings=settings)

    try:
        event = TagEvent.from_payload(payload)
        if args.dry_run:
            print(asyncio.run(drafter.preview(event)))
            return 0
        outcome = asyncio.run(drafter.draft(event))
    except Exception as e:
        print(f"Release drafting failed: {e}", file=sys.stderr)
        return 1

    print(outcome.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
