"""Repository coordinate extraction from webhook payloads.

Both "create" and "issues" payloads embed the repository as
``{"name": ..., "owner": {"login": ...}}``. This is the only place that
reads those keys.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from release_drafter.errors import MalformedEventError


class RepositoryCoordinate(BaseModel):
    """Owner and name of a GitHub repository.

    Attributes:
        owner: User or organization login (e.g. "myorg")
        name: Repository name (e.g. "api")
    """

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


def extract_coordinate(payload: Mapping[str, Any]) -> RepositoryCoordinate:
    """Derive the (owner, name) pair from an event payload.

    Args:
        payload: Raw webhook payload

    Returns:
        The repository coordinate

    Raises:
        MalformedEventError: If repository.name or repository.owner.login
            is missing or not a non-empty string.
    """
    repository = payload.get("repository")
    if not isinstance(repository, Mapping):
        raise MalformedEventError(["repository.name", "repository.owner.login"])

    missing: list[str] = []
    name = repository.get("name")
    if not isinstance(name, str) or not name:
        missing.append("repository.name")

    owner = repository.get("owner")
    login = owner.get("login") if isinstance(owner, Mapping) else None
    if not isinstance(login, str) or not login:
        missing.append("repository.owner.login")

    if missing:
        raise MalformedEventError(missing)

    return RepositoryCoordinate(owner=login, name=name)
