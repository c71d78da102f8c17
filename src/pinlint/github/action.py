"""Pull request validation - the pipeline behind the GitHub Action.

This is the main entry point for the Action. It:
1. Reads the pull request from the workflow event payload
2. Fetches the PR diff from the GitHub API
3. Runs the validators over the added and context lines
4. Posts a single markdown comment when anything was found

Usage:
    # In a GitHub Action step
    pinlint run

A run with findings is reported as failed by the CLI so that the PR is
blocked until the findings are addressed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pinlint.analyzer import analyze_files
from pinlint.config import ActionConfig
from pinlint.github.client import GitHubClient
from pinlint.github.diff_parser import parse_diff
from pinlint.github.event import PullRequestRef, load_pull_request
from pinlint.github.renderer import render_report

logger = logging.getLogger("pinlint.action")

FAILURE_MESSAGE = (
    "❌ Version pinning and migration validation failed. See PR comments for details."
)


@dataclass
class ValidationResult:
    """Outcome of validating one pull request."""
    pr: PullRequestRef
    issues: list[str] = field(default_factory=list)
    comment: str = ""
    posted: bool = False

    @property
    def failed(self) -> bool:
        return bool(self.issues)


def run_validation(config: ActionConfig, client: GitHubClient | None = None) -> ValidationResult:
    """Run the full validation pipeline for the PR that triggered the workflow.

    Errors from the event payload, the API or the diff parser propagate;
    nothing is posted when they do.
    """
    pr = load_pull_request(config.event_path, config.repository)
    logger.info("Validating %s#%d", pr.slug, pr.number)

    if client is None:
        client = GitHubClient(config.token, timeout=config.gh_timeout)

    diff_text = client.get_pull_diff(pr)
    if not diff_text:
        logger.info("No diff found")
        return ValidationResult(pr=pr)

    files = parse_diff(diff_text)
    logger.info("Parsed %d file(s) from diff", len(files))

    issues = analyze_files(files)
    if not issues:
        logger.info("No issues found, skipping comment creation")
        return ValidationResult(pr=pr)

    comment = render_report(issues)
    client.upsert_comment(pr, comment, config.comment_marker)
    return ValidationResult(pr=pr, issues=issues, comment=comment, posted=True)
