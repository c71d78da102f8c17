"""Markdown renderer for the pull request report.

The comment lists every warning, then fixed guidance on version pinning and
migrations with examples a reviewer can copy.
"""

from __future__ import annotations

REPORT_TITLE = "## 🔍 Version Pinning and Migration Validation"

GOOD_MIGRATION_EXAMPLE = """\
DO $$
BEGIN
    IF NOT EXISTS (SELECT 1 FROM information_schema.columns
                   WHERE table_name = 'users' AND column_name = 'email')
    THEN
        ALTER TABLE users ADD COLUMN email VARCHAR(255);
    END IF;
END $$;"""


def render_report(issues: list[str]) -> str:
    """Render the warnings as a GitHub markdown comment."""
    sections: list[str] = []

    sections.append(REPORT_TITLE)
    sections.append("")
    sections.append("\n\n".join(issues))
    sections.append("")
    sections.append("### 📝 Recommendations:")
    sections.extend(_pinning_guidance())
    sections.append("")
    sections.extend(_migration_guidance())
    sections.append("")
    return "\n".join(sections)


def _pinning_guidance() -> list[str]:
    return [
        "#### Version Pinning:",
        "- Use specific version tags (e.g., `node:20.5.0`)",
        "- Avoid generic tags like `latest`, `alpine`, or partial versions",
        "- Good examples:",
        "  - `FROM node:20.5.0-alpine3.18`",
        "  - `FROM python:3.11.5`",
        "  - `FROM ubuntu:22.04`",
    ]


def _migration_guidance() -> list[str]:
    return [
        "#### Database Migrations:",
        "- Always use `IF EXISTS` or `IF NOT EXISTS` clauses",
        "- Wrap changes in transaction blocks (BEGIN/END)",
        "- Include guards against duplicate operations",
        "- Example of good migration:",
        "```sql",
        GOOD_MIGRATION_EXAMPLE,
        "```",
    ]
