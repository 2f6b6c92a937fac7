"""Rich console output for setup and verification runs."""

from __future__ import annotations

from collections.abc import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mac_devenv import __version__
from mac_devenv.types import CheckState, InstallationRecord, InstallStatus, Report

NEXT_STEPS = [
    "source ~/.zshrc  (or restart terminal)",
    "gemini  (set up Gemini CLI authentication)",
    "docker-start  (launch Docker if needed)",
    "claude  (launch Claude Code CLI)",
]

_STATUS_STYLES = {
    InstallStatus.ALREADY_PRESENT: "[yellow]already present[/yellow]",
    InstallStatus.INSTALLED: "[green]installed[/green]",
    InstallStatus.FAILED: "[red]failed[/red]",
}

_STATE_STYLES = {
    CheckState.OK: "[green]✓ ok[/green]",
    CheckState.MISSING: "[red]✗ missing[/red]",
    CheckState.WARNING: "[yellow]! warning[/yellow]",
}


class Reporter:
    """Human-readable output for the orchestrator."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize reporter.

        Args:
            console: Rich console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def show_banner(self, title: str) -> None:
        """Display a run banner."""
        self.console.print(
            Panel(
                f"[bold blue]mac-devenv[/bold blue] v{__version__}\n{title}",
                border_style="blue",
            )
        )

    def show_success(self, message: str) -> None:
        """Display success message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Display error message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Display warning message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[yellow]![/yellow] {message}")

    def show_info(self, message: str) -> None:
        """Display info message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[blue]i[/blue] {message}")

    def show_record(self, record: InstallationRecord) -> None:
        """Display the outcome of one install step."""
        if record.status is InstallStatus.ALREADY_PRESENT:
            self.show_warning(f"{record.display_name} already installed, skipping")
        elif record.status is InstallStatus.INSTALLED:
            location = f" at: {record.path}" if record.path else ""
            self.show_success(f"{record.display_name} installed{location}")
        else:
            self.show_error(f"Failed to install {record.display_name}: {record.error}")

    def show_summary(self, records: Iterable[InstallationRecord]) -> None:
        """Display every processed tool with its resolved path."""
        records = list(records)
        table = Table(title="Installation Summary", box=box.SIMPLE_HEAD)
        table.add_column("Tool", style="cyan")
        table.add_column("Status")
        table.add_column("Path")

        for record in records:
            location = str(record.path) if record.path else (record.error or "-")
            table.add_row(record.display_name, _STATUS_STYLES[record.status], location)

        self.console.print(table)
        failed = sum(1 for record in records if record.status is InstallStatus.FAILED)
        present = len(records) - failed
        self.console.print(f"Total tools available: {present}, failed: {failed}")

    def show_report(self, report: Report) -> None:
        """Display verification entries, counts and remediation hints."""
        table = Table(title="Installation Verification", box=box.SIMPLE_HEAD)
        table.add_column("Check", style="cyan")
        table.add_column("State")
        table.add_column("Detail")
        for entry in report.entries:
            table.add_row(entry.name, _STATE_STYLES[entry.state], entry.detail)
        self.console.print(table)

        if report.errors:
            self.show_warning(f"{report.errors} critical tools failed to install properly")
        else:
            self.show_success("All critical tools installed successfully")
        if report.warnings:
            self.show_warning(f"{report.warnings} checks need attention")

        if report.hints:
            self.console.print("\n[bold]Troubleshooting[/bold]")
            for hint in report.hints:
                self.console.print(f"  • {hint}")

    def show_next_steps(self, launcher: str) -> None:
        """Display what the user should do after setup."""
        self.console.print("\n[bold]Next steps[/bold]")
        for index, step in enumerate([*NEXT_STEPS, f"{launcher}  (start MCP server)"], start=1):
            self.console.print(f"  {index}. {step}")
