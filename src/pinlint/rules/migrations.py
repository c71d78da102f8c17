"""Idempotency checks for SQL migrations.

A migration must be wrapped in a ``DO $$ BEGIN ... END $$`` block. When it is,
the statements between the first ``BEGIN`` and the first following ``END`` are
checked against a small table of risky statement shapes.

The guard test is block-wide: an ``IF [NOT] EXISTS`` anywhere in the block,
including inside a SQL comment, silences every statement rule, even when it
guards a different statement than the one that matched. This is a known
imprecision and is kept as-is so that results stay stable across versions.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pinlint.rules.matchers import WARNING_MARKER, strip_added_markers

logger = logging.getLogger("pinlint.rules")

MIGRATION_WRAPPER_MESSAGE = (
    f"{WARNING_MARKER} Migration should be wrapped in `DO $$ BEGIN ... END $$` block"
)

_WRAPPER = re.compile(r"DO\s*\$\$\s*BEGIN[\s\S]*END\s*\$\$", re.IGNORECASE)
_BLOCK_BODY = re.compile(r"BEGIN([\s\S]*?)END", re.IGNORECASE)
_EXISTENCE_GUARD = re.compile(r"IF\s+(?:NOT\s+)?EXISTS", re.IGNORECASE)

MIGRATION_SUFFIXES = (".sql", ".migration")
MIGRATION_DIR = "migrations/"


@dataclass(frozen=True)
class MigrationRule:
    """A risky statement shape and the warning it produces."""

    statement_pattern: re.Pattern[str]
    message: str
    guard_required: bool = True

    def violated_by(self, block: str, guarded: bool) -> bool:
        if not self.statement_pattern.search(block):
            return False
        return self.guard_required and not guarded


MIGRATION_RULES: tuple[MigrationRule, ...] = (
    MigrationRule(
        statement_pattern=re.compile(
            r"CREATE\s+TABLE\s+(?!.*?IF\s+NOT\s+EXISTS)(\w+)", re.IGNORECASE
        ),
        message=f"{WARNING_MARKER} Use `CREATE TABLE IF NOT EXISTS` for idempotent table creation",
    ),
    MigrationRule(
        statement_pattern=re.compile(
            r"ALTER\s+TABLE\s+(?!.*?IF\s+(?:NOT\s+)?EXISTS)(\w+)", re.IGNORECASE
        ),
        message=f"{WARNING_MARKER} Use `ALTER TABLE IF EXISTS` for idempotent table alterations",
    ),
    MigrationRule(
        statement_pattern=re.compile(
            r"INSERT\s+INTO\s+(?!.*?(?:WHERE|IF)\s+NOT\s+EXISTS)(\w+)", re.IGNORECASE
        ),
        message=(
            f"{WARNING_MARKER} Consider adding `WHERE NOT EXISTS` check for "
            "idempotent data insertion"
        ),
    ),
    MigrationRule(
        statement_pattern=re.compile(
            r"DROP\s+TABLE\s+(?!.*?IF\s+EXISTS)(\w+)", re.IGNORECASE
        ),
        message=f"{WARNING_MARKER} Use `DROP TABLE IF EXISTS` for idempotent table removal",
    ),
)


def is_migration_path(path: str) -> bool:
    """Whether a changed file should go through the migration checker."""
    return path.endswith(MIGRATION_SUFFIXES) or MIGRATION_DIR in path


def check_migration(
    content: str, rules: tuple[MigrationRule, ...] = MIGRATION_RULES
) -> list[str]:
    """Check a migration for a transactional wrapper and idempotency guards."""
    clean = strip_added_markers(content)

    if not _WRAPPER.search(clean):
        return [MIGRATION_WRAPPER_MESSAGE]

    body = _BLOCK_BODY.search(clean)
    block = body.group(1) if body else ""
    guarded = bool(_EXISTENCE_GUARD.search(block))
    if guarded:
        logger.debug("Existence guard found in migration block, statement rules suppressed")

    return [rule.message for rule in rules if rule.violated_by(block, guarded)]
