"""Shared test fixtures for pinlint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pinlint.config import ActionConfig
from pinlint.github.event import PullRequestRef


def build_diff(path: str, lines: list[str], status: str = "modified") -> str:
    """Build a single-file unified diff from already-marked lines.

    ``lines`` are raw hunk lines ("+added", "-removed", " context"); the hunk
    header counts are computed from them.
    """
    old_count = sum(1 for line in lines if not line.startswith("+"))
    new_count = sum(1 for line in lines if not line.startswith("-"))

    header = [f"diff --git a/{path} b/{path}"]
    if status == "added":
        header += ["new file mode 100644", "index 0000000..1234567", "--- /dev/null", f"+++ b/{path}"]
        hunk = f"@@ -0,0 +1,{new_count} @@"
    elif status == "deleted":
        header += ["deleted file mode 100644", "index 1234567..0000000", f"--- a/{path}", "+++ /dev/null"]
        hunk = f"@@ -1,{old_count} +0,0 @@"
    else:
        header += ["index 1234567..89abcde 100644", f"--- a/{path}", f"+++ b/{path}"]
        hunk = f"@@ -1,{old_count} +1,{new_count} @@"

    return "\n".join(header + [hunk] + lines) + "\n"


def added(content: str) -> list[str]:
    """Mark every line of ``content`` as added."""
    return [f"+{line}" for line in content.splitlines()]


DOCKERFILE_WRONG = """\
FROM node:latest
FROM python
FROM alpine
FROM ubuntu:22
FROM nginx:1.25
FROM redis:stable
FROM node:20.5.0-alpine3.18
FROM golang:bookworm
"""

K8S_DEPLOYMENT = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: bad-deployment
spec:
  template:
    spec:
      containers:
      - name: web
        image: nginx:latest
      - name: api
        image: node:alpine
      - name: cache
        image: redis
      initContainers:
      - name: init-db
        image: busybox
      - name: db
        image: postgres:alpine
"""

COMPOSE_FILE = """\
version: '3.8'

services:
  web:
    image: nginx:latest
  api:
    image: node:alpine
  db:
    image: postgres
  redis:
    image: redis:alpine
  elasticsearch:
    image: docker.elastic.co/elasticsearch/elasticsearch:7
  rabbitmq:
    image: rabbitmq:3
  mongodb:
    image: mongo:latest
"""

MIGRATION_MULTIPLE_ISSUES = """\
DO $$
BEGIN
    CREATE TABLE orders (
        id SERIAL PRIMARY KEY,
        user_id INTEGER,
        total DECIMAL(10,2)
    );

    ALTER TABLE orders
    ADD CONSTRAINT fk_user
    FOREIGN KEY (user_id)
    REFERENCES users(id);

    INSERT INTO orders (user_id, total)
    VALUES (1, 99.99);
END $$;
"""


@pytest.fixture
def make_diff():
    """Factory for single-file unified diffs."""
    return build_diff


@pytest.fixture
def dockerfile_diff() -> str:
    return build_diff("Dockerfile", added(DOCKERFILE_WRONG), status="added")


@pytest.fixture
def pr_ref() -> PullRequestRef:
    return PullRequestRef(owner="octo", repo="widgets", number=7)


@pytest.fixture
def event_file(tmp_path: Path) -> Path:
    """A pull_request event payload as written by the Actions runner."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps({
        "action": "synchronize",
        "number": 7,
        "pull_request": {"number": 7, "title": "Bump deps"},
        "repository": {"name": "widgets", "owner": {"login": "octo"}},
    }))
    return path


@pytest.fixture
def action_config(event_file: Path) -> ActionConfig:
    return ActionConfig(token="ghs_test", event_path=str(event_file))


class FakeGitHubClient:
    """Stands in for GitHubClient; records what would have been posted."""

    def __init__(self, diff: str = "", error: Exception | None = None) -> None:
        self.diff = diff
        self.error = error
        self.requested: list[PullRequestRef] = []
        self.comments: list[tuple[PullRequestRef, str, str]] = []

    def get_pull_diff(self, pr: PullRequestRef) -> str:
        self.requested.append(pr)
        if self.error is not None:
            raise self.error
        return self.diff

    def upsert_comment(self, pr: PullRequestRef, body: str, marker: str) -> None:
        self.comments.append((pr, body, marker))


@pytest.fixture
def fake_client_factory():
    return FakeGitHubClient
