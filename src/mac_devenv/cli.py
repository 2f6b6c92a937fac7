"""CLI commands using Typer."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from mac_devenv import __version__
from mac_devenv.console import Reporter
from mac_devenv.context import AppContext, create_context
from mac_devenv.install import PreconditionError
from mac_devenv.orchestrator import run_setup, run_verify

app = typer.Typer(
    name="mac-devenv",
    help="Idempotent macOS development environment bootstrap",
    no_args_is_help=True,
)

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich.

    Args:
        verbose: Show debug output. Otherwise only warnings and errors.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # GitPython logs every command at debug level
    logging.getLogger("git").setLevel(logging.WARNING)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"mac-devenv v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Idempotent macOS development environment bootstrap."""
    configure_logging(verbose)


def _load_context(context: AppContext | None) -> AppContext:
    """Return the injected context or build one from the environment."""
    if context is not None:
        return context
    try:
        return create_context()
    except (FileNotFoundError, ValueError) as e:
        Reporter(console).show_error(f"Error: {e}")
        raise typer.Exit(1) from e


@app.command()
def setup(
    _context=None,
) -> None:
    """Install tools, write configuration, and verify the result."""
    ctx = _load_context(_context)

    try:
        outcome = run_setup(ctx)
    except PreconditionError as e:
        ctx.reporter.show_error(f"Error: {e}")
        raise typer.Exit(1) from e

    if outcome.failures:
        ctx.reporter.show_warning(
            f"{len(outcome.failures)} steps failed; re-run setup after fixing them"
        )
    else:
        ctx.reporter.show_success("Setup complete! Restart your terminal to use all features.")


@app.command()
def verify(
    _context=None,
) -> None:
    """Check installed tools and configuration (always exits 0 on macOS)."""
    ctx = _load_context(_context)

    try:
        report = run_verify(ctx)
    except PreconditionError as e:
        ctx.reporter.show_error(str(e))
        raise typer.Exit(1) from e

    if report.ok:
        ctx.reporter.show_success("Installation verification complete - all core tools found!")
    else:
        ctx.reporter.show_warning(f"{report.errors} core tools missing - see troubleshooting above")


if __name__ == "__main__":
    app()
