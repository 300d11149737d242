"""GitHub REST API capability handle for the release drafter.

This module is the only place that talks to GitHub. It provides the five
calls the drafter and the issue responder need:
- GET  /repos/{owner}/{repo}/releases/latest
- GET  /repos/{owner}/{repo}/git/ref/tags/{tag}
- GET  /repos/{owner}/{repo}/compare/{base}...{head}
- POST /repos/{owner}/{repo}/releases
- POST /repos/{owner}/{repo}/issues/{number}/comments

Design notes:
- Uses httpx for async HTTP requests
- HTTP failures are translated into the errors.py taxonomy; nothing is
  retried
- A 404 from the latest-release endpoint is returned as None, because a
  repository without releases is a normal state
- Uses a Protocol so pipeline steps don't depend on the concrete client
  (tests use InMemoryGitHubPlatform)

GitHub API docs: https://docs.github.com/en/rest
"""

from __future__ import annotations

from typing import Any, Protocol
from urllib.parse import quote

import httpx

from release_drafter.errors import (
    ConflictError,
    PlatformError,
    ResourceNotFoundError,
    TransientPlatformError,
)
from release_drafter.schemas import Commit, LatestRelease, Release

# ---------------------------------------------------------------------------
# Protocol (Interface)
# ---------------------------------------------------------------------------


class GitHubPlatformProtocol(Protocol):
    """The hosting-platform capabilities the pipeline depends on."""

    async def get_latest_release(self, owner: str, repo: str) -> LatestRelease | None:
        """Return the latest published release, or None if there is none."""
        ...

    async def get_ref(self, owner: str, repo: str, ref: str) -> str:
        """Return the object SHA a ref (e.g. "tags/v1.0") points at."""
        ...

    async def compare_commits(
        self, owner: str, repo: str, base: str, head: str
    ) -> list[Commit]:
        """Return commits reachable from head but not from base, oldest first."""
        ...

    async def create_release(
        self, owner: str, repo: str, tag_name: str, name: str, body: str
    ) -> Release:
        """Create a published release for an existing tag."""
        ...

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> None:
        """Comment on an issue."""
        ...


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.reason_phrase


def _is_already_exists(resp: httpx.Response) -> bool:
    try:
        data = resp.json()
    except ValueError:
        return False
    errors = data.get("errors") if isinstance(data, dict) else None
    return any(
        isinstance(e, dict) and e.get("code") == "already_exists" for e in errors or []
    )


def raise_for_platform_status(resp: httpx.Response) -> None:
    """Raise the matching PlatformError for a non-success response.

    Mapping:
        404                               -> ResourceNotFoundError
        409, 422 with already_exists      -> ConflictError
        429, 5xx, 403 with no quota left  -> TransientPlatformError
        anything else >= 400              -> PlatformError
    """
    if resp.is_success:
        return

    status = resp.status_code
    message = f"{resp.request.method} {resp.request.url.path} -> {status}: {_error_message(resp)}"

    if status == 404:
        raise ResourceNotFoundError(message, status_code=status)
    if status == 409 or (status == 422 and _is_already_exists(resp)):
        raise ConflictError(message, status_code=status)
    rate_limited = status == 403 and resp.headers.get("x-ratelimit-remaining") == "0"
    if status == 429 or status >= 500 or rate_limited:
        raise TransientPlatformError(message, status_code=status)
    raise PlatformError(message, status_code=status)


# ---------------------------------------------------------------------------
# Concrete Implementation
# ---------------------------------------------------------------------------


class GitHubClient:
    """Real GitHub API client using httpx.

    Usage:
        client = GitHubClient(token="ghp_...")
        latest = await client.get_latest_release("myorg", "api")
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub token. Requests are anonymous when empty.
            base_url: API root, for GitHub Enterprise installs.
            timeout: Per-request timeout in seconds.
            transport: Custom httpx transport (tests pass httpx.MockTransport).
        """
        self._base_url = base_url or self.BASE_URL
        self._timeout = timeout
        self._transport = transport
        self._headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            resp = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise TransientPlatformError(f"{method} {url} failed: {exc}") from exc
        raise_for_platform_status(resp)
        return resp

    async def get_latest_release(self, owner: str, repo: str) -> LatestRelease | None:
        async with self._client() as client:
            try:
                resp = await self._request(
                    client, "GET", f"/repos/{owner}/{repo}/releases/latest"
                )
            except ResourceNotFoundError:
                return None
            return LatestRelease.model_validate(resp.json())

    async def get_ref(self, owner: str, repo: str, ref: str) -> str:
        async with self._client() as client:
            resp = await self._request(
                client, "GET", f"/repos/{owner}/{repo}/git/ref/{quote(ref, safe='/')}"
            )
            return resp.json()["object"]["sha"]

    async def compare_commits(
        self, owner: str, repo: str, base: str, head: str
    ) -> list[Commit]:
        """Fetch every page of a comparison and return its commits in order."""
        url: str | None = (
            f"/repos/{owner}/{repo}/compare/"
            f"{quote(base, safe='')}...{quote(head, safe='')}"
        )
        params: dict[str, Any] | None = {"per_page": 100}
        commits: list[Commit] = []

        async with self._client() as client:
            while url:
                resp = await self._request(client, "GET", url, params=params)
                commits.extend(Commit.from_api(c) for c in resp.json().get("commits", []))
                url = self._parse_next_link(resp.headers.get("link", ""))
                # the next link already carries the query string
                params = None

        return commits

    async def create_release(
        self, owner: str, repo: str, tag_name: str, name: str, body: str
    ) -> Release:
        async with self._client() as client:
            resp = await self._request(
                client,
                "POST",
                f"/repos/{owner}/{repo}/releases",
                json={"tag_name": tag_name, "name": name, "body": body},
            )
            data = resp.json()
            return Release(
                tag_name=data.get("tag_name") or tag_name,
                name=data.get("name") or name,
                body=data.get("body") or body,
                id=data.get("id"),
                html_url=data.get("html_url"),
            )

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> None:
        async with self._client() as client:
            await self._request(
                client,
                "POST",
                f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
                json={"body": body},
            )

    @staticmethod
    def _parse_next_link(link_header: str) -> str | None:
        """Extract the 'next' URL from a GitHub Link header."""
        if not link_header:
            return None
        for part in link_header.split(","):
            if 'rel="next"' in part:
                return part.split(";")[0].strip().strip("<>")
        return None


# ---------------------------------------------------------------------------
# In-memory Implementation (for testing and dry runs)
# ---------------------------------------------------------------------------


class InMemoryGitHubPlatform:
    """A fake GitHub holding one repository with linear history.

    Every call is recorded in ``calls`` as ``(method_name, args...)`` so
    tests can assert which capabilities were used.

    Usage:
        platform = InMemoryGitHubPlatform(
            history=[c1, c2, c3],
            tags={"v1.0": c1.sha},
            releases=["v1.0"],
        )
    """

    def __init__(
        self,
        history: list[Commit] | None = None,
        tags: dict[str, str] | None = None,
        releases: list[str] | None = None,
    ) -> None:
        """Initialize the fake.

        Args:
            history: Commits of the default branch, oldest first
            tags: Tag name -> commit SHA
            releases: Tag names that already have a release, oldest first
        """
        self.history = list(history or [])
        self.tags = dict(tags or {})
        self.releases: list[Release] = [
            Release(tag_name=t, name=t, body="") for t in releases or []
        ]
        self.comments: list[tuple[str, str, int, str]] = []
        self.calls: list[tuple[Any, ...]] = []

    async def get_latest_release(self, owner: str, repo: str) -> LatestRelease | None:
        self.calls.append(("get_latest_release", owner, repo))
        if not self.releases:
            return None
        return LatestRelease(tag_name=self.releases[-1].tag_name)

    async def get_ref(self, owner: str, repo: str, ref: str) -> str:
        self.calls.append(("get_ref", owner, repo, ref))
        kind, _, name = ref.partition("/")
        if kind != "tags" or name not in self.tags:
            raise ResourceNotFoundError(f"Ref not found: {ref}", status_code=404)
        return self.tags[name]

    async def compare_commits(
        self, owner: str, repo: str, base: str, head: str
    ) -> list[Commit]:
        self.calls.append(("compare_commits", owner, repo, base, head))
        shas = [c.sha for c in self.history]
        head_sha = self.tags.get(head, head)
        if head == "HEAD" and shas:
            head_sha = shas[-1]
        if base not in shas or head_sha not in shas:
            raise ResourceNotFoundError(
                f"No common ancestor between {base} and {head}", status_code=404
            )
        return self.history[shas.index(base) + 1 : shas.index(head_sha) + 1]

    async def create_release(
        self, owner: str, repo: str, tag_name: str, name: str, body: str
    ) -> Release:
        self.calls.append(("create_release", owner, repo, tag_name, name, body))
        if any(r.tag_name == tag_name for r in self.releases):
            raise ConflictError(
                f"Release for tag {tag_name} already exists", status_code=422
            )
        release = Release(
            tag_name=tag_name, name=name, body=body, id=len(self.releases) + 1
        )
        self.releases.append(release)
        return release

    async def create_comment(
        self, owner: str, repo: str, issue_number: int, body: str
    ) -> None:
        self.calls.append(("create_comment", owner, repo, issue_number, body))
        self.comments.append((owner, repo, issue_number, body))
