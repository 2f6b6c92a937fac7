"""Idempotent installation of catalog tools."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from mac_devenv.actions import ActionExecutor, BuildError, InstallError, get_executor
from mac_devenv.catalog import ToolSpec
from mac_devenv.protocols import CommandRunner, Prober
from mac_devenv.types import InstallationRecord, InstallStatus

logger = logging.getLogger(__name__)

# Hints printed alongside precondition failures
PRECONDITION_HINTS = {
    "git": "Please install Xcode Command Line Tools: xcode-select --install",
}


class PreconditionError(Exception):
    """The host cannot run the setup at all."""

    pass


class Installer:
    """Ensures tools are installed, never re-running an install for a present tool.

    Follows Separate Use from Creation: constructor requires all dependencies.
    Use factory method `create()` for production instantiation.
    """

    def __init__(
        self,
        prober: Prober,
        runner: CommandRunner,
        executors: dict[str, ActionExecutor],
    ) -> None:
        """Initialize installer with required dependencies.

        Args:
            prober: Environment prober.
            runner: Runner for refresh commands and system checks.
            executors: Install action executors keyed by kind.
        """
        self.prober = prober
        self.runner = runner
        self.executors = executors

    @classmethod
    def create(
        cls,
        prober: Prober,
        runner: CommandRunner,
        executors: dict[str, ActionExecutor],
    ) -> Installer:
        """Factory method for production instantiation."""
        return cls(prober=prober, runner=runner, executors=executors)

    def check_preconditions(self, commands: Iterable[str]) -> None:
        """Abort unless the host is macOS and every prerequisite resolves.

        Args:
            commands: Executables that must already be installed.

        Raises:
            PreconditionError: On an unsupported OS or a missing prerequisite.
        """
        if not self.prober.is_macos():
            raise PreconditionError("This setup is for macOS only")

        for command in commands:
            if self.prober.which(command) is None:
                message = f"{command} is required but not installed"
                hint = PRECONDITION_HINTS.get(command)
                if hint:
                    message = f"{message}. {hint}"
                raise PreconditionError(message)

    def check_command_line_tools(self) -> InstallationRecord:
        """Ensure the Xcode Command Line Tools are installed.

        A missing installation is started in the background by macOS and
        the run aborts, since nothing can be compiled until it finishes.

        Returns:
            AlreadyPresent record with the developer directory.

        Raises:
            PreconditionError: If the tools are missing.
        """
        result = self.runner.run(["xcode-select", "-p"])
        if result.ok and result.first_line:
            return InstallationRecord(
                name="xcode-clt",
                display_name="Xcode Command Line Tools",
                status=InstallStatus.ALREADY_PRESENT,
                path=Path(result.first_line),
            )

        logger.warning("Xcode Command Line Tools not found, starting installer")
        self.runner.run(["xcode-select", "--install"])
        raise PreconditionError(
            "Xcode Command Line Tools are being installed. Complete the installation and re-run setup"
        )

    def ensure_installed(self, spec: ToolSpec) -> InstallationRecord:
        """Ensure a tool is present.

        Probes first; a present tool is recorded without running any install
        action. Otherwise the declared actions are tried in order until one
        succeeds, and a re-probe decides the outcome.

        Args:
            spec: Tool to ensure.

        Returns:
            InstallationRecord for the tool. Failures never raise.
        """
        probe = self.prober.probe(spec)
        if probe.found:
            logger.info("%s already installed at %s, skipping", spec.display_name, probe.path)
            self._refresh(spec)
            return InstallationRecord(
                name=spec.name,
                display_name=spec.display_name,
                status=InstallStatus.ALREADY_PRESENT,
                path=probe.path,
            )

        errors = self._run_actions(spec)

        probe = self.prober.probe(spec)
        if probe.found:
            self._refresh(spec)
            return InstallationRecord(
                name=spec.name,
                display_name=spec.display_name,
                status=InstallStatus.INSTALLED,
                path=probe.path,
            )

        if not errors:
            errors.append("not found after install" if spec.install else "no install action declared")
        return InstallationRecord(
            name=spec.name,
            display_name=spec.display_name,
            status=InstallStatus.FAILED,
            error="; ".join(errors),
        )

    def install_all(self, specs: Iterable[ToolSpec]) -> list[InstallationRecord]:
        """Ensure every tool, continuing past failures.

        Args:
            specs: Tools in processing order.

        Returns:
            One record per tool, in the same order.
        """
        return [self.ensure_installed(spec) for spec in specs]

    def _run_actions(self, spec: ToolSpec) -> list[str]:
        """Try each install action until one succeeds.

        Returns:
            Error messages of the attempts that failed; empty when one succeeded.
        """
        errors: list[str] = []
        for action in spec.install:
            try:
                executor = get_executor(self.executors, action.kind)
                logger.info("Installing %s via %s", spec.display_name, executor.describe(action))
                executor.execute(action)
                return []
            except BuildError as e:
                logger.error("Failed to build %s from source: %s", spec.display_name, e)
                errors.append(str(e))
            except InstallError as e:
                logger.error("Failed to install %s: %s", spec.display_name, e)
                errors.append(str(e))
            except Exception as e:
                logger.exception("Install action %s failed for %s", action.kind, spec.name)
                errors.append(str(e))
        return errors

    def _refresh(self, spec: ToolSpec) -> None:
        """Run a tool's refresh command, treating failure as a warning."""
        if not spec.refresh_command:
            return
        result = self.runner.run(spec.refresh_command)
        if not result.ok:
            logger.warning(
                "%s failed (continuing anyway)", " ".join(spec.refresh_command)
            )
