"""Read the pull request a workflow run was triggered for."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel

from pinlint.exceptions import EventError


class PullRequestRef(BaseModel):
    """Identifies a pull request on GitHub."""

    owner: str
    repo: str
    number: int

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


def load_pull_request(event_path: str | None, repository: str | None = None) -> PullRequestRef:
    """Load the PR reference from the event payload at ``GITHUB_EVENT_PATH``.

    ``repository`` ("owner/repo") is used when the payload has no repository
    block.
    """
    if not event_path or not Path(event_path).exists():
        raise EventError(
            f"Event payload not found at {event_path!r}. "
            "pinlint must run on a pull_request event."
        )

    try:
        event = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise EventError(f"Event payload at {event_path} is not valid JSON: {e}") from e

    number = event.get("number") or (event.get("pull_request") or {}).get("number")
    if not number:
        raise EventError("Event payload has no pull request number")

    repo_data = event.get("repository") or {}
    owner = (repo_data.get("owner") or {}).get("login")
    name = repo_data.get("name")
    if (not owner or not name) and repository and "/" in repository:
        owner, name = repository.split("/", 1)
    if not owner or not name:
        raise EventError("Event payload has no repository owner and name")

    return PullRequestRef(owner=owner, repo=name, number=int(number))
