"""pinlint - flag floating dependency versions and unsafe migrations in pull requests."""

__version__ = "0.1.0"
