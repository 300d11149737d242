"""Pydantic models for the data flowing through the release drafter.

Webhook payloads are validated once, at the boundary, into immutable
event models. Everything downstream takes these typed values as
parameters and never re-checks the payload shape.

Key design decisions:
- Models are frozen; an invocation never mutates its inputs
- A missing prior release is an explicit None anchor, not an exception
- Commit ordering is the platform's (oldest first) until the formatter
  reverses it for presentation
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from release_drafter.coordinates import RepositoryCoordinate, extract_coordinate
from release_drafter.errors import MalformedEventError

SHORT_SHA_LENGTH = 7

# The commit SHA a prior release points at, or None for a first release.
ReleaseAnchor = str | None


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RefType(StrEnum):
    """Kind of ref a "create" event is about.

    GitHub sends "tag", "branch" or "repository"; only tags matter here,
    so everything else collapses to OTHER.
    """

    TAG = "tag"
    OTHER = "other"


class DraftState(StrEnum):
    """States of one release drafting invocation."""

    START = "start"
    RESOLVING_ANCHOR = "resolving_anchor"
    FETCHING_RANGE = "fetching_range"
    FORMATTING = "formatting"
    PUBLISHING = "publishing"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Inbound events
# ---------------------------------------------------------------------------


def _require_str(payload: Mapping[str, Any], key: str, missing: list[str]) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        missing.append(key)
        return ""
    return value


class TagEvent(BaseModel):
    """A "create" webhook event, reduced to what the drafter needs.

    Attributes:
        ref_type: TAG for tag creation, OTHER for branches and the rest
        ref_name: The created ref's short name (e.g. "v1.2.0"); empty for
            repository creation, where GitHub sends a null ref
        repository: Owner and name of the repository
    """

    model_config = ConfigDict(frozen=True)

    ref_type: RefType
    ref_name: str = ""
    repository: RepositoryCoordinate

    @field_validator("ref_type", mode="before")
    @classmethod
    def normalize_ref_type(cls, value: Any) -> RefType:
        return RefType.TAG if value == RefType.TAG.value else RefType.OTHER

    @model_validator(mode="after")
    def check_tag_has_name(self) -> TagEvent:
        """A tag event always names the tag it created."""
        if self.is_tag and not self.ref_name:
            raise ValueError("Tag events must carry a non-empty ref")
        return self

    @property
    def is_tag(self) -> bool:
        return self.ref_type == RefType.TAG

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TagEvent:
        """Validate a raw "create" payload.

        The ref is only required for tags; other ref types are skipped
        downstream and may carry a null ref.

        Raises:
            MalformedEventError: If ref_type or the repository coordinate
                is missing, or a tag event has no ref.
        """
        if not isinstance(payload, Mapping):
            raise MalformedEventError(["<payload>"])

        missing: list[str] = []
        ref_type = _require_str(payload, "ref_type", missing)
        if ref_type == RefType.TAG.value:
            ref_name = _require_str(payload, "ref", missing)
        else:
            ref = payload.get("ref")
            ref_name = ref if isinstance(ref, str) else ""
            # without a ref_type the ref can't be judged optional
            if not ref_type and not ref_name:
                missing.append("ref")
        try:
            repository = extract_coordinate(payload)
        except MalformedEventError as exc:
            missing.extend(exc.missing)
            raise MalformedEventError(missing) from exc
        if missing:
            raise MalformedEventError(missing)

        return cls(ref_type=ref_type, ref_name=ref_name, repository=repository)


class IssueEvent(BaseModel):
    """An "issues" webhook event."""

    model_config = ConfigDict(frozen=True)

    action: str
    issue_number: int = Field(..., gt=0)
    author: str
    repository: RepositoryCoordinate

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> IssueEvent:
        if not isinstance(payload, Mapping):
            raise MalformedEventError(["<payload>"])

        missing: list[str] = []
        action = _require_str(payload, "action", missing)
        issue = payload.get("issue")
        number = issue.get("number") if isinstance(issue, Mapping) else None
        user = issue.get("user") if isinstance(issue, Mapping) else None
        author = user.get("login") if isinstance(user, Mapping) else None
        if not isinstance(number, int) or isinstance(number, bool) or number <= 0:
            missing.append("issue.number")
        if not isinstance(author, str) or not author:
            missing.append("issue.user.login")
        try:
            repository = extract_coordinate(payload)
        except MalformedEventError as exc:
            raise MalformedEventError(missing + exc.missing) from exc
        if missing:
            raise MalformedEventError(missing)

        return cls(
            action=action,
            issue_number=number,
            author=author,
            repository=repository,
        )


# ---------------------------------------------------------------------------
# Platform data
# ---------------------------------------------------------------------------


class Commit(BaseModel):
    """A commit returned by the comparison API.

    Attributes:
        sha: Full hex object id
        message: Full commit message (may span several lines)
        url: Web URL of the commit
    """

    model_config = ConfigDict(frozen=True)

    sha: str = Field(..., min_length=1)
    message: str = ""
    url: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]

    @property
    def summary(self) -> str:
        """The message up to (excluding) its first line break."""
        return self.message.split("\n", 1)[0].rstrip("\r")

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> Commit:
        """Build a Commit from a compare-API commit object."""
        return cls(
            sha=data["sha"],
            message=(data.get("commit") or {}).get("message") or "",
            url=data.get("html_url") or "",
        )


# Oldest-first, as returned by the comparison. Never contains the anchor.
CommitRange = tuple[Commit, ...]


class LatestRelease(BaseModel):
    """The part of GitHub's latest-release payload the resolver uses."""

    tag_name: str = Field(..., min_length=1)


class Release(BaseModel):
    """A release created on the hosting platform.

    tag_name and name always equal the triggering event's ref name.
    """

    tag_name: str = Field(..., min_length=1)
    name: str
    body: str
    id: int | None = None
    html_url: str | None = None


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class DraftOutcome(BaseModel):
    """What one drafting invocation produced.

    Attributes:
        state: DONE or SKIPPED (failures raise instead)
        event: The triggering event
        anchor: Commit SHA of the prior release, None for a first release
        commits: The commit range, oldest first
        release: The created release (None when skipped)
    """

    state: DraftState
    event: TagEvent
    anchor: str | None = None
    commits: list[Commit] = Field(default_factory=list)
    release: Release | None = None
