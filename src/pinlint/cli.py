"""Command-line interface for pinlint."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from pinlint import __version__
from pinlint.exceptions import PinLintError
from pinlint.ui.console import Console

console = Console()
logger = logging.getLogger("pinlint")


def _setup_logging(debug: bool, default: int = logging.WARNING) -> None:
    """Send pinlint's logs to stderr through Rich, at DEBUG when ``debug`` is set."""
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(
            RichHandler(console=RichConsole(stderr=True), show_path=False, markup=False)
        )
    logger.setLevel(logging.DEBUG if debug else default)


def _fail(message: str) -> NoReturn:
    """Mark the run as failed, as a workflow annotation and on the console."""
    click.echo(f"::error::{message}")
    console.error(message)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="pinlint")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """pinlint - block floating versions and unsafe migrations in pull requests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.option(
    "--token",
    envvar=["INPUT_GITHUB_TOKEN", "GITHUB_TOKEN"],
    default=None,
    help="GitHub token (defaults to the GITHUB_TOKEN action input).",
)
@click.pass_context
def run(ctx: click.Context, token: str | None):
    """Validate the pull request that triggered the workflow.

    Reads the PR from GITHUB_EVENT_PATH, checks its diff, and posts one
    comment listing every issue. Exits non-zero when issues were found so
    that the check blocks the PR.

    Usage in CI:

        pinlint run
    """
    _setup_logging(ctx.obj["verbose"], default=logging.INFO)

    from pinlint.config import load_action_config
    from pinlint.github.action import FAILURE_MESSAGE, run_validation

    try:
        config = load_action_config(token=token)
        _setup_logging(ctx.obj["verbose"] or config.debug, default=logging.INFO)
        result = run_validation(config)
    except PinLintError as e:
        _fail(f"Action failed: {e}")
    except Exception as e:
        logger.exception("Unexpected error during validation")
        _fail(f"Action failed: {e}")

    if result.failed:
        console.warning(
            f"Found {len(result.issues)} issue(s) in {result.pr.slug}#{result.pr.number}"
        )
        _fail(FAILURE_MESSAGE)

    console.success("No version pinning or migration issues found")


@main.command()
@click.argument("diff_file", required=False, type=click.File("r"))
@click.option("--path", "-p", default=".", help="Repository to diff when no file is given.")
@click.option("--base", "-b", default="main", help="Base branch to diff against.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "markdown", "json"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def scan(
    ctx: click.Context, diff_file, path: str, base: str, output_format: str
):
    """Check a diff locally without talking to GitHub.

    Reads DIFF_FILE ("-" for stdin), or diffs the current branch against
    --base when no file is given. Exits with status 1 when issues are found.

    Examples:

        git diff main...HEAD | pinlint scan -

        pinlint scan --base develop --format markdown
    """
    from pinlint.analyzer import analyze_files
    from pinlint.config import runner_debug
    from pinlint.github.diff_parser import get_git_diff, parse_diff
    from pinlint.github.renderer import render_report

    _setup_logging(ctx.obj["verbose"] or runner_debug())

    if diff_file is not None:
        diff_text = diff_file.read()
    else:
        root = Path(path).resolve()
        if not root.exists():
            console.error(f"Path does not exist: {path}")
            sys.exit(1)
        diff_text = get_git_diff(root, base)

    try:
        files = parse_diff(diff_text)
    except PinLintError as e:
        console.error(str(e))
        sys.exit(1)

    issues = analyze_files(files)

    if output_format == "json":
        click.echo(json.dumps(
            {
                "files": [
                    {
                        "path": f.path,
                        "status": f.status,
                        "added": f.added_lines,
                        "deleted": f.deleted_lines,
                    }
                    for f in files
                ],
                "issues": issues,
            },
            indent=2,
            ensure_ascii=False,
        ))
    elif output_format == "markdown":
        if issues:
            click.echo(render_report(issues))
    elif issues:
        console.info(f"Found {len(issues)} issue(s) in {len(files)} file(s):")
        console.show_issues(issues)
    else:
        console.success(f"No issues found in {len(files)} file(s)")

    if issues:
        sys.exit(1)


@main.command()
def validators():
    """List the file kinds pinlint checks and how files are matched."""
    from pinlint.rules.registry import VALIDATOR_TABLES

    console.show_validators(VALIDATOR_TABLES)
