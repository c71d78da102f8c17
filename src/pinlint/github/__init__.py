"""GitHub integration - pull request diffs in, one validation comment out.

Runs as a GitHub Action that comments on PRs with:
  - Floating dependency versions and container tags
  - Unpinned workflow action references
  - Migrations missing a DO $$ wrapper or idempotency guards
"""
