"""Version-pinning and migration rules."""

from pinlint.rules.migrations import MIGRATION_RULES, MigrationRule, check_migration
from pinlint.rules.registry import (
    CONTAINER_VALIDATORS,
    PACKAGE_VALIDATORS,
    VALIDATOR_TABLES,
    WORKFLOW_VALIDATORS,
    ValidatorSpec,
    validators_for,
)

__all__ = [
    "CONTAINER_VALIDATORS",
    "MIGRATION_RULES",
    "MigrationRule",
    "PACKAGE_VALIDATORS",
    "VALIDATOR_TABLES",
    "ValidatorSpec",
    "WORKFLOW_VALIDATORS",
    "check_migration",
    "validators_for",
]
