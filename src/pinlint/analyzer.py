"""Run the validator tables and the migration checker over a parsed diff."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pinlint.github.diff_parser import ChangedFile
from pinlint.rules.migrations import check_migration, is_migration_path
from pinlint.rules.registry import validators_for

logger = logging.getLogger("pinlint.analyzer")

VISIBLE_KINDS = ("add", "normal")


def assemble_blob(changed_file: ChangedFile) -> str:
    """Rebuild the post-change text of a file's hunks.

    Removed lines are dropped, so rules only ever see what the file looks like
    after the change.
    """
    return "\n".join(
        "\n".join(line.text for line in chunk.changes if line.kind in VISIBLE_KINDS)
        for chunk in changed_file.chunks
    )


def analyze_file(changed_file: ChangedFile) -> list[str]:
    """Collect warnings for one file: validators in table order, then migrations."""
    if changed_file.is_deleted:
        return []

    path = changed_file.path
    blob = assemble_blob(changed_file)
    issues: list[str] = []

    for spec in validators_for(path):
        found = spec.check(blob)
        logger.debug("%s: %s validator found %d issue(s)", path, spec.name, len(found))
        issues.extend(found)

    if is_migration_path(path):
        found = check_migration(blob)
        logger.debug("%s: migration checker found %d issue(s)", path, len(found))
        issues.extend(found)

    return issues


def analyze_files(files: Iterable[ChangedFile]) -> list[str]:
    """Analyze every changed file, keeping file order then validator order."""
    files = list(files)
    logger.info("Analyzing %d file(s)", len(files))

    issues: list[str] = []
    for changed_file in files:
        if changed_file.is_deleted:
            continue
        logger.debug("Analyzing file: %s", changed_file.path)
        issues.extend(analyze_file(changed_file))

    logger.info("Found %d total issue(s)", len(issues))
    return issues
