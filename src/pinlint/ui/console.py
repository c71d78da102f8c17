"""Rich-powered console output for pinlint."""

from __future__ import annotations

from collections.abc import Mapping

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table

from pinlint.rules.migrations import MIGRATION_DIR, MIGRATION_SUFFIXES
from pinlint.rules.registry import ValidatorSpec


class Console:
    """Terminal output for pinlint using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def show_issues(self, issues: list[str]) -> None:
        """List warnings in the order they were found."""
        for i, issue in enumerate(issues, 1):
            self.console.print(f"  [dim]{i:>3}.[/dim] {escape(issue)}")

    def show_validators(self, tables: Mapping[str, Mapping[str, ValidatorSpec]]) -> None:
        """Display the validator tables and which files they match."""
        table = Table(title="Validators", border_style="cyan")
        table.add_column("Group", style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Extensions")
        table.add_column("Patterns")

        for group, specs in tables.items():
            for spec in specs.values():
                table.add_row(
                    group,
                    spec.name,
                    escape(", ".join(spec.extensions)) or "-",
                    escape(", ".join(spec.patterns)) or "-",
                )
            table.add_section()

        table.add_row(
            "migrations",
            "sql",
            ", ".join(f"*{suffix}" for suffix in MIGRATION_SUFFIXES),
            f"*{MIGRATION_DIR}*",
        )
        self.console.print(table)
