"""Configuration management for pinlint.

Everything comes from the environment a GitHub Action runs in: the token is
passed as the ``GITHUB_TOKEN`` action input (exposed as ``INPUT_GITHUB_TOKEN``)
and the rest is standard runner metadata.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from pinlint.exceptions import ConfigError

COMMENT_MARKER = "<!-- pinlint -->"
TOKEN_ENV_VARS = ("INPUT_GITHUB_TOKEN", "GITHUB_TOKEN")


class ActionConfig(BaseModel):
    """Settings for one run against a pull request."""

    token: str = Field(min_length=1)
    event_path: str | None = None
    repository: str | None = None  # "owner/repo", from GITHUB_REPOSITORY
    comment_marker: str = COMMENT_MARKER
    gh_timeout: int = 30
    debug: bool = False


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def runner_debug(env: Mapping[str, str] | None = None) -> bool:
    """Whether GitHub asked for debug logging (``RUNNER_DEBUG=1`` on a debug re-run)."""
    env = os.environ if env is None else env
    return _truthy(env.get("RUNNER_DEBUG"))


def load_action_config(
    env: Mapping[str, str] | None = None,
    token: str | None = None,
) -> ActionConfig:
    """Build an ActionConfig from environment variables.

    An explicit ``token`` wins over the environment. Raises ConfigError when no
    token can be found.
    """
    env = os.environ if env is None else env

    if not token:
        token = next((env[name] for name in TOKEN_ENV_VARS if env.get(name)), None)
    if not token:
        raise ConfigError(
            "No GitHub token found. Pass the GITHUB_TOKEN input to the action "
            "or set the GITHUB_TOKEN environment variable."
        )

    timeout = env.get("PINLINT_GH_TIMEOUT", "30")
    try:
        gh_timeout = int(timeout)
    except ValueError:
        raise ConfigError(f"PINLINT_GH_TIMEOUT must be an integer, got {timeout!r}") from None

    return ActionConfig(
        token=token,
        event_path=env.get("GITHUB_EVENT_PATH") or None,
        repository=env.get("GITHUB_REPOSITORY") or None,
        gh_timeout=gh_timeout,
        debug=runner_debug(env),
    )
