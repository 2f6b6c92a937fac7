"""Install action executors, one per catalog action kind."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from mac_devenv.probe import EnvironmentProber
from mac_devenv.protocols import CommandRunner, FileSystem, SourceRepository

from .base import BaseInstallAction, BuildError, InstallError
from .brew import BrewInstallAction, CaskInstallAction
from .npm import NpmInstallAction
from .script import ScriptInstallAction
from .source import SourceBuildAction


@runtime_checkable
class ActionExecutor(Protocol):
    """Protocol for install action executors.

    New action kinds are added by writing an executor and registering it
    here; the installer loop does not change.
    """

    kind: str

    def describe(self, action: Any) -> str:
        """Human-readable summary of the action."""
        raise NotImplementedError

    def execute(self, action: Any) -> None:
        """Perform the install.

        Raises:
            InstallError: If the install did not complete.
        """
        raise NotImplementedError


__all__ = [
    "ActionExecutor",
    "BaseInstallAction",
    "BrewInstallAction",
    "BuildError",
    "CaskInstallAction",
    "InstallError",
    "NpmInstallAction",
    "ScriptInstallAction",
    "SourceBuildAction",
    "create_executors",
    "get_executor",
]


def create_executors(
    runner: CommandRunner,
    prober: EnvironmentProber,
    gitops: SourceRepository,
    filesystem: FileSystem,
    build_root: Path,
) -> dict[str, ActionExecutor]:
    """Create one executor per supported action kind.

    Args:
        runner: Runner for external commands.
        prober: Prober owning the session PATH.
        gitops: Git operations for source builds.
        filesystem: Filesystem abstraction for source builds.
        build_root: Directory holding build working directories.

    Returns:
        Mapping of action kind to executor.
    """
    executors: list[ActionExecutor] = [
        BrewInstallAction(runner),
        CaskInstallAction(runner),
        NpmInstallAction(runner),
        ScriptInstallAction(runner, prober),
        SourceBuildAction(runner, prober, gitops, filesystem, build_root),
    ]
    return {executor.kind: executor for executor in executors}


def get_executor(executors: dict[str, ActionExecutor], kind: str) -> ActionExecutor:
    """Get the executor for an action kind.

    Args:
        executors: Registered executors.
        kind: Action kind (brew, cask, npm, script, source).

    Returns:
        Executor instance.

    Raises:
        ValueError: If the kind is not supported.
    """
    if kind not in executors:
        raise ValueError(f"Unknown install action: {kind}. Supported: {list(executors.keys())}")
    return executors[kind]
