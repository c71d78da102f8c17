"""Talk to the GitHub REST API through the ``gh`` CLI.

``gh`` is preinstalled on GitHub-hosted runners and picks the token up from
``GH_TOKEN``, so there is no HTTP client to configure. Every failure raises
GitHubError; nothing is retried.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess

from pinlint.exceptions import GitHubError
from pinlint.github.event import PullRequestRef

logger = logging.getLogger("pinlint.github")

DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


class GitHubClient:
    """Minimal GitHub client for fetching PR diffs and managing PR comments."""

    def __init__(self, token: str, timeout: int = 30, gh_binary: str = "gh") -> None:
        self.token = token
        self.timeout = timeout
        self.gh_binary = gh_binary

    def _api(self, action: str, *args: str) -> str:
        """Run ``gh api`` with the given arguments and return stdout."""
        env = {**os.environ, "GH_TOKEN": self.token}
        try:
            result = subprocess.run(
                [self.gh_binary, "api", *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
            )
        except subprocess.TimeoutExpired:
            raise GitHubError(action, f"timed out after {self.timeout}s") from None
        except FileNotFoundError:
            raise GitHubError(action, f"'{self.gh_binary}' executable not found") from None

        if result.returncode != 0:
            raise GitHubError(action, result.stderr.strip() or f"exit code {result.returncode}")
        return result.stdout

    def get_pull_diff(self, pr: PullRequestRef) -> str:
        """Fetch the full unified diff of a pull request."""
        logger.info("Getting diff for PR #%d", pr.number)
        return self._api(
            "fetch the pull request diff",
            "-H", f"Accept: {DIFF_MEDIA_TYPE}",
            f"repos/{pr.slug}/pulls/{pr.number}",
        )

    def find_comment(self, pr: PullRequestRef, marker: str) -> str | None:
        """Return the id of the first PR comment whose body starts with ``marker``."""
        output = self._api(
            "list pull request comments",
            "--paginate",
            f"repos/{pr.slug}/issues/{pr.number}/comments",
            "--jq", f".[] | select(.body | startswith({json.dumps(marker)})) | .id",
        )
        for line in output.splitlines():
            if line.strip() and line.strip() != "null":
                return line.strip()
        return None

    def create_comment(self, pr: PullRequestRef, body: str) -> None:
        self._api(
            "create a pull request comment",
            "--method", "POST",
            f"repos/{pr.slug}/issues/{pr.number}/comments",
            "-f", f"body={body}",
        )

    def update_comment(self, pr: PullRequestRef, comment_id: str, body: str) -> None:
        self._api(
            "update a pull request comment",
            "--method", "PATCH",
            f"repos/{pr.slug}/issues/comments/{comment_id}",
            "-f", f"body={body}",
        )

    def upsert_comment(self, pr: PullRequestRef, body: str, marker: str) -> None:
        """Post ``body`` as the PR's single pinlint comment.

        The body is tagged with ``marker`` so a later run updates the same
        comment instead of adding another one.
        """
        body_with_marker = f"{marker}\n{body}"
        existing_id = self.find_comment(pr, marker)
        if existing_id:
            logger.info("Updating existing comment %s on PR #%d", existing_id, pr.number)
            self.update_comment(pr, existing_id, body_with_marker)
        else:
            logger.info("Creating comment on PR #%d", pr.number)
            self.create_comment(pr, body_with_marker)
