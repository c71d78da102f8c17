"""Custom exceptions for pinlint."""


class PinLintError(Exception):
    """Base exception for all pinlint errors."""


class ConfigError(PinLintError):
    """Configuration-related errors."""


class EventError(PinLintError):
    """The workflow event payload is missing or malformed."""


class GitHubError(PinLintError):
    """A call to the GitHub API failed."""

    def __init__(self, action: str, detail: str = ""):
        message = f"GitHub API call failed while trying to {action}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.action = action
        self.detail = detail


class DiffParseError(PinLintError):
    """Unified diff parsing errors."""
