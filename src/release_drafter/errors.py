"""Error taxonomy for the release drafter.

Every error carries a stable code and a human message so the webhook
receiver and the CLI can report failures the same way.

Propagation policy:
- MalformedEventError is raised at the boundary, before any network call
- PlatformError and its subclasses come from the GitHub client and are
  surfaced upward unmodified
- A missing latest release is NOT an error: the client maps it to None
"""

from __future__ import annotations

from typing import Any


class ReleaseDrafterError(Exception):
    """Base error with a structured code."""

    code = "RELEASE_DRAFTER_ERROR"

    def __init__(self, message: str, detail: Any = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"error": self.code, "detail": self.message}
        if self.detail:
            d["context"] = self.detail
        return d


class MalformedEventError(ReleaseDrafterError):
    """The webhook payload lacks a field the pipeline needs."""

    code = "MALFORMED_EVENT"

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            f"Malformed event payload, missing or invalid: {', '.join(missing)}",
            detail=missing,
        )


class PlatformError(ReleaseDrafterError):
    """A GitHub API call failed."""

    code = "PLATFORM_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, detail=detail)


class ResourceNotFoundError(PlatformError):
    code = "NOT_FOUND"


class TransientPlatformError(PlatformError):
    """Network failure, rate limit or server-side error. Never retried."""

    code = "TRANSIENT"


class ConflictError(PlatformError):
    """The resource already exists (e.g. a release for the tag)."""

    code = "CONFLICT"
