"""Base install action with shared behavior.

Package-manager actions share one algorithm: build a command line, run it,
and turn a non-zero exit into an InstallError. They vary only in the
command they build.

Pattern: Template Method - base class defines the algorithm skeleton,
subclasses provide the command.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from mac_devenv.protocols import CommandRunner
from mac_devenv.types import CommandResult

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """An install action did not complete."""

    pass


class BuildError(InstallError):
    """A build-from-source install did not complete."""

    pass


class BaseInstallAction(ABC):
    """Base class for install action executors.

    Subclasses override `build_command()`; actions that need more than one
    command override `execute()` instead.
    """

    kind: str

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize action executor.

        Args:
            runner: Runner for external commands.
        """
        self.runner = runner

    @abstractmethod
    def build_command(self, action: Any) -> list[str]:
        """Get the command line that performs the install."""
        ...

    def describe(self, action: Any) -> str:
        """Human-readable summary used in logs and errors."""
        return " ".join(self.build_command(action))

    def execute(self, action: Any) -> None:
        """Run the install.

        Args:
            action: Catalog action of this executor's kind.

        Raises:
            InstallError: If the command exits non-zero.
        """
        command = self.build_command(action)
        logger.info("Running %s", " ".join(command))
        result = self.runner.run(command)
        self.check(result, self.describe(action))

    @staticmethod
    def check(result: CommandResult, description: str, error: type[InstallError] = InstallError) -> None:
        """Raise if a command failed.

        Args:
            result: Completed command.
            description: What was being attempted.
            error: Exception type to raise.

        Raises:
            InstallError: If result is not successful.
        """
        if result.ok:
            return
        detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else ""
        message = f"{description} exited with {result.returncode}"
        if detail:
            message = f"{message}: {detail}"
        raise error(message)
