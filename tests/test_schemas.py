"""Tests for event validation and the data models.

These tests verify that:
- Webhook payloads are validated once at the boundary
- Missing fields raise MalformedEventError naming what is missing
- Commit helpers (short SHA, summary line) behave for every message shape

Run with: pytest tests/test_schemas.py -v
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from release_drafter.coordinates import RepositoryCoordinate, extract_coordinate
from release_drafter.errors import MalformedEventError
from release_drafter.schemas import (
    Commit,
    IssueEvent,
    RefType,
    Release,
    TagEvent,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def create_payload() -> dict:
    """A trimmed GitHub "create" webhook payload for a tag."""
    return {
        "ref": "v1.2.0",
        "ref_type": "tag",
        "master_branch": "main",
        "repository": {
            "name": "api",
            "full_name": "myorg/api",
            "owner": {"login": "myorg"},
        },
    }


@pytest.fixture
def issues_payload() -> dict:
    """A trimmed GitHub "issues" webhook payload."""
    return {
        "action": "opened",
        "issue": {"number": 7, "user": {"login": "reporter"}},
        "repository": {"name": "api", "owner": {"login": "myorg"}},
    }


# ---------------------------------------------------------------------------
# Coordinate Extraction Tests
# ---------------------------------------------------------------------------


class TestExtractCoordinate:
    """Tests for extract_coordinate."""

    def test_extracts_owner_and_name(self, create_payload: dict) -> None:
        coordinate = extract_coordinate(create_payload)
        assert coordinate == RepositoryCoordinate(owner="myorg", name="api")
        assert coordinate.full_name == "myorg/api"

    def test_missing_repository(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            extract_coordinate({"ref": "v1"})
        assert exc_info.value.missing == ["repository.name", "repository.owner.login"]

    def test_missing_owner_login(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            extract_coordinate({"repository": {"name": "api", "owner": {}}})
        assert exc_info.value.missing == ["repository.owner.login"]

    def test_non_string_name_rejected(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            extract_coordinate({"repository": {"name": 3, "owner": {"login": "me"}}})
        assert exc_info.value.missing == ["repository.name"]

    def test_coordinate_is_immutable(self) -> None:
        coordinate = RepositoryCoordinate(owner="myorg", name="api")
        with pytest.raises(ValidationError):
            coordinate.owner = "other"


# ---------------------------------------------------------------------------
# TagEvent Tests
# ---------------------------------------------------------------------------


class TestTagEvent:
    """Tests for TagEvent.from_payload."""

    def test_tag_event(self, create_payload: dict) -> None:
        event = TagEvent.from_payload(create_payload)
        assert event.is_tag
        assert event.ref_type == RefType.TAG
        assert event.ref_name == "v1.2.0"
        assert event.repository.owner == "myorg"

    @pytest.mark.parametrize("ref_type", ["branch", "repository"])
    def test_other_ref_types_collapse(self, create_payload: dict, ref_type: str) -> None:
        create_payload["ref_type"] = ref_type
        event = TagEvent.from_payload(create_payload)
        assert event.ref_type == RefType.OTHER
        assert not event.is_tag

    def test_repository_creation_allows_null_ref(self, create_payload: dict) -> None:
        create_payload["ref_type"] = "repository"
        create_payload["ref"] = None
        event = TagEvent.from_payload(create_payload)
        assert event.ref_type == RefType.OTHER
        assert event.ref_name == ""

    def test_tag_with_null_ref_is_malformed(self, create_payload: dict) -> None:
        create_payload["ref"] = None
        with pytest.raises(MalformedEventError) as exc_info:
            TagEvent.from_payload(create_payload)
        assert exc_info.value.missing == ["ref"]

    def test_tag_model_requires_name(self) -> None:
        with pytest.raises(ValidationError):
            TagEvent(
                ref_type="tag",
                ref_name="",
                repository=RepositoryCoordinate(owner="myorg", name="api"),
            )

    def test_missing_ref(self, create_payload: dict) -> None:
        del create_payload["ref"]
        with pytest.raises(MalformedEventError) as exc_info:
            TagEvent.from_payload(create_payload)
        assert exc_info.value.missing == ["ref"]

    def test_missing_everything_reports_all_fields(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            TagEvent.from_payload({})
        assert exc_info.value.missing == [
            "ref_type",
            "ref",
            "repository.name",
            "repository.owner.login",
        ]

    def test_non_mapping_payload(self) -> None:
        with pytest.raises(MalformedEventError):
            TagEvent.from_payload(["not", "a", "dict"])

    def test_error_serializes(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            TagEvent.from_payload({"ref": "v1"})
        body = exc_info.value.to_dict()
        assert body["error"] == "MALFORMED_EVENT"
        assert "ref_type" in body["detail"]


# ---------------------------------------------------------------------------
# IssueEvent Tests
# ---------------------------------------------------------------------------


class TestIssueEvent:
    """Tests for IssueEvent.from_payload."""

    def test_issue_event(self, issues_payload: dict) -> None:
        event = IssueEvent.from_payload(issues_payload)
        assert event.action == "opened"
        assert event.issue_number == 7
        assert event.author == "reporter"
        assert event.repository.full_name == "myorg/api"

    def test_missing_issue(self, issues_payload: dict) -> None:
        del issues_payload["issue"]
        with pytest.raises(MalformedEventError) as exc_info:
            IssueEvent.from_payload(issues_payload)
        assert exc_info.value.missing == ["issue.number", "issue.user.login"]


# ---------------------------------------------------------------------------
# Commit Tests
# ---------------------------------------------------------------------------


class TestCommit:
    """Tests for Commit helpers."""

    def test_short_sha_is_seven_char_prefix(self) -> None:
        sha = "0123456789abcdef0123456789abcdef01234567"
        commit = Commit(sha=sha, message="x", url="u")
        assert commit.short_sha == "0123456"
        assert sha.startswith(commit.short_sha)

    def test_short_sha_of_short_value(self) -> None:
        assert Commit(sha="d1").short_sha == "d1"

    def test_summary_is_first_line(self) -> None:
        commit = Commit(sha="d1", message="fix: bug\nmore detail\neven more")
        assert commit.summary == "fix: bug"

    def test_summary_handles_crlf(self) -> None:
        assert Commit(sha="d1", message="fix: bug\r\n\r\nbody").summary == "fix: bug"

    def test_summary_splits_only_on_newline(self) -> None:
        commit = Commit(sha="d1", message="feat: a\x0cb c\nbody")
        assert commit.summary == "feat: a\x0cb c"

    def test_summary_of_empty_message(self) -> None:
        assert Commit(sha="d1", message="").summary == ""

    def test_from_api(self) -> None:
        commit = Commit.from_api(
            {
                "sha": "abc1234def",
                "html_url": "https://github.com/myorg/api/commit/abc1234def",
                "commit": {"message": "feat: add cache"},
            }
        )
        assert commit.sha == "abc1234def"
        assert commit.url.endswith("/abc1234def")
        assert commit.message == "feat: add cache"

    def test_from_api_null_message(self) -> None:
        commit = Commit.from_api({"sha": "abc", "commit": {"message": None}})
        assert commit.message == ""
        assert commit.url == ""


class TestRelease:
    def test_release_requires_tag_name(self) -> None:
        with pytest.raises(ValidationError):
            Release(tag_name="", name="", body="")
