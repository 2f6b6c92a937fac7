"""Sequencing of a setup run: preconditions, installs, config, verification."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from rich.progress import Progress, SpinnerColumn, TextColumn

from mac_devenv.context import AppContext
from mac_devenv.install import PreconditionError
from mac_devenv.templates import build_fragments
from mac_devenv.types import InstallationRecord, InstallStatus, Report, WriteResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SetupOutcome:
    """Everything a setup run produced."""

    records: list[InstallationRecord] = field(default_factory=list)
    writes: list[WriteResult] = field(default_factory=list)
    report: Report = field(default_factory=Report)

    @property
    def failures(self) -> list[InstallationRecord]:
        return [record for record in self.records if record.status is InstallStatus.FAILED]


def _with_spinner(ctx: AppContext, description: str, step: Callable[[], T]) -> T:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=ctx.reporter.console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        return step()


def install_tools(ctx: AppContext) -> list[InstallationRecord]:
    """Ensure every catalog tool, continuing past failures."""
    records = []
    for spec in ctx.catalog.tools:
        record = _with_spinner(
            ctx, f"Checking {spec.display_name}...", lambda spec=spec: ctx.installer.ensure_installed(spec)
        )
        ctx.reporter.show_record(record)
        records.append(record)
    return records


def provision_workspace(ctx: AppContext) -> list[InstallationRecord]:
    """Clone the workspace, install editor config and Python packages."""
    provisioner = ctx.provisioner
    records = [
        _with_spinner(ctx, "Syncing workspace...", provisioner.sync_workspace),
        _with_spinner(ctx, "Setting up LazyVim...", provisioner.install_editor_config),
    ]
    records.extend(
        _with_spinner(ctx, "Installing Python packages...", provisioner.install_python_packages)
    )
    for record in records:
        ctx.reporter.show_record(record)
    return records


def verify_environment(ctx: AppContext) -> Report:
    """Re-probe every declared tool, module and directory."""
    return ctx.verifier.verify(ctx.catalog)


def run_setup(ctx: AppContext) -> SetupOutcome:
    """Run the full setup.

    Args:
        ctx: Application context.

    Returns:
        SetupOutcome with records, config writes and the verification report.

    Raises:
        PreconditionError: Before any change is made, if the host is not
            macOS or a prerequisite is missing.
    """
    reporter = ctx.reporter
    reporter.show_banner("Complete dev environment setup")

    ctx.installer.check_preconditions(ctx.catalog.preconditions)
    version = ctx.prober.macos_version()
    if version:
        reporter.show_info(f"macOS detected: {version}")

    for directory in ctx.prober.augment_path(ctx.settings.session_paths):
        reporter.show_success(f"Added {directory} to current session PATH")

    outcome = SetupOutcome()
    outcome.records.append(ctx.installer.check_command_line_tools())
    outcome.records.extend(install_tools(ctx))
    outcome.records.extend(provision_workspace(ctx))

    reporter.show_info("Writing configuration...")
    outcome.writes = ctx.writer.apply_config(build_fragments(ctx.settings, ctx.catalog))
    for write in outcome.writes:
        if write.backup is not None:
            reporter.show_info(f"Backed up {write.target} to {write.backup}")
        if write.changed:
            reporter.show_success(f"Updated {write.target}")

    outcome.report = verify_environment(ctx)

    reporter.show_summary(outcome.records)
    reporter.show_report(outcome.report)
    reporter.show_next_steps(str(ctx.settings.launcher_path))
    logger.debug("Setup finished with %d failures", len(outcome.failures))
    return outcome


def run_verify(ctx: AppContext) -> Report:
    """Run the standalone verification pass.

    Raises:
        PreconditionError: If the host is not macOS.
    """
    if not ctx.prober.is_macos():
        raise PreconditionError("Not running on macOS")

    reporter = ctx.reporter
    reporter.show_banner("Installation verification")
    version = ctx.prober.macos_version()
    if version:
        reporter.show_success(f"Running on macOS {version}")
    ctx.prober.augment_path(ctx.settings.session_paths)

    report = verify_environment(ctx)
    reporter.show_report(report)
    return report
