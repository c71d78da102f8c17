"""Tests for the CLI interface."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from pinlint import __version__
from pinlint.cli import main
from pinlint.github.action import FAILURE_MESSAGE

from conftest import build_diff


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def diff_file(tmp_path: Path, dockerfile_diff: str) -> Path:
    path = tmp_path / "pr.diff"
    path.write_text(dockerfile_diff)
    return path


@pytest.fixture
def action_env(monkeypatch, event_file: Path):
    """Environment of a pull_request workflow run."""
    monkeypatch.setenv("INPUT_GITHUB_TOKEN", "ghs_test")
    monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_file))
    monkeypatch.delenv("RUNNER_DEBUG", raising=False)


def use_fake_client(monkeypatch, client) -> None:
    monkeypatch.setattr("pinlint.github.action.GitHubClient", lambda *a, **kw: client)


class TestCLIBasics:
    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_validators(self, runner: CliRunner):
        result = runner.invoke(main, ["validators"])
        assert result.exit_code == 0
        assert "docker" in result.output
        assert "actions" in result.output
        assert "*.sql" in result.output
        assert "*migrations/*" in result.output


class TestCLIScan:
    def test_scan_file_with_issues(self, runner: CliRunner, diff_file: Path):
        result = runner.invoke(main, ["scan", str(diff_file)])
        assert result.exit_code == 1
        assert "Found 7 issue(s)" in result.output

    def test_scan_stdin(self, runner: CliRunner, dockerfile_diff: str):
        result = runner.invoke(main, ["scan", "-"], input=dockerfile_diff)
        assert result.exit_code == 1

    def test_scan_clean(self, runner: CliRunner, tmp_path: Path):
        path = tmp_path / "clean.diff"
        path.write_text(build_diff("Dockerfile", ["+FROM python:3.11.5"]))
        result = runner.invoke(main, ["scan", str(path)])
        assert result.exit_code == 0
        assert "No issues found" in result.output

    def test_scan_json(self, runner: CliRunner, diff_file: Path, monkeypatch):
        monkeypatch.delenv("RUNNER_DEBUG", raising=False)
        result = runner.invoke(main, ["scan", str(diff_file), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["files"][0]["path"] == "Dockerfile"
        assert data["files"][0]["status"] == "added"
        assert len(data["issues"]) == 7

    def test_scan_markdown(self, runner: CliRunner, diff_file: Path):
        result = runner.invoke(main, ["scan", str(diff_file), "--format", "markdown"])
        assert result.exit_code == 1
        assert "Version Pinning and Migration Validation" in result.output

    def test_scan_malformed_diff(self, runner: CliRunner, tmp_path: Path):
        path = tmp_path / "bad.diff"
        path.write_text("diff --git a/x b/x\n--- a/x\n+++ b/x\n@@ broken @@\n")
        result = runner.invoke(main, ["scan", str(path)])
        assert result.exit_code == 1

    def test_scan_nonexistent_path(self, runner: CliRunner):
        result = runner.invoke(main, ["scan", "--path", "/nonexistent/path"])
        assert result.exit_code != 0


class TestCLIRun:
    def test_run_with_issues(
        self, runner: CliRunner, monkeypatch, action_env, fake_client_factory, dockerfile_diff
    ):
        client = fake_client_factory(diff=dockerfile_diff)
        use_fake_client(monkeypatch, client)

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 1
        assert f"::error::{FAILURE_MESSAGE}" in result.output
        assert len(client.comments) == 1

    def test_run_empty_diff(self, runner: CliRunner, monkeypatch, action_env, fake_client_factory):
        client = fake_client_factory(diff="")
        use_fake_client(monkeypatch, client)

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 0
        assert client.comments == []

    def test_run_retrieval_failure(
        self, runner: CliRunner, monkeypatch, action_env, fake_client_factory
    ):
        from pinlint.exceptions import GitHubError

        client = fake_client_factory(error=GitHubError("fetch the pull request diff", "HTTP 401"))
        use_fake_client(monkeypatch, client)

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 1
        assert "::error::Action failed:" in result.output
        assert client.comments == []

    def test_run_unexpected_error(
        self, runner: CliRunner, monkeypatch, action_env, fake_client_factory
    ):
        client = fake_client_factory(error=RuntimeError("kaboom"))
        use_fake_client(monkeypatch, client)

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 1
        assert "::error::Action failed: kaboom" in result.output

    def test_run_without_token(self, runner: CliRunner, monkeypatch):
        monkeypatch.delenv("INPUT_GITHUB_TOKEN", raising=False)
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 1
        assert "::error::Action failed: No GitHub token found" in result.output

    def test_run_debug_logging_from_runner(
        self, runner: CliRunner, monkeypatch, action_env, fake_client_factory
    ):
        monkeypatch.setenv("RUNNER_DEBUG", "1")
        use_fake_client(monkeypatch, fake_client_factory(diff=""))

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 0
        assert logging.getLogger("pinlint").level == logging.DEBUG

    def test_run_info_logging_by_default(
        self, runner: CliRunner, monkeypatch, action_env, fake_client_factory
    ):
        use_fake_client(monkeypatch, fake_client_factory(diff=""))

        result = runner.invoke(main, ["run"])

        assert result.exit_code == 0
        assert logging.getLogger("pinlint").level == logging.INFO
