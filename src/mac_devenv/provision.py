"""Workspace, editor config and Python package provisioning."""

from __future__ import annotations

import logging

from mac_devenv.catalog import Catalog, PackageGroup
from mac_devenv.gitops import GitOpsError
from mac_devenv.protocols import CommandRunner, FileSystem, Prober, SourceRepository
from mac_devenv.settings import Settings
from mac_devenv.templates import workspace_clone
from mac_devenv.types import InstallationRecord, InstallStatus

logger = logging.getLogger(__name__)


class WorkspaceProvisioner:
    """Sets up everything beyond command-line tools.

    Each step returns an InstallationRecord so it shows up in the run summary
    next to the tools. No step raises.
    """

    def __init__(
        self,
        settings: Settings,
        catalog: Catalog,
        gitops: SourceRepository,
        runner: CommandRunner,
        prober: Prober,
        filesystem: FileSystem,
    ) -> None:
        self.settings = settings
        self.catalog = catalog
        self.gitops = gitops
        self.runner = runner
        self.prober = prober
        self.fs = filesystem

    def sync_workspace(self) -> InstallationRecord:
        """Clone the workspace repository, or pull it if already cloned."""
        clone = workspace_clone(self.settings, self.catalog)
        name = "workspace"
        display = "MCP workspace"
        existed = self.fs.exists(clone)
        try:
            self.fs.mkdir(self.settings.workspace_dir, parents=True, exist_ok=True)
            self.gitops.clone_or_pull(self.catalog.repositories.workspace, clone)
        except GitOpsError as e:
            if existed:
                logger.warning("Failed to update %s: %s", clone, e)
                return InstallationRecord(name, display, InstallStatus.ALREADY_PRESENT, path=clone)
            logger.error("Failed to clone %s: %s", self.catalog.repositories.workspace, e)
            return InstallationRecord(name, display, InstallStatus.FAILED, error=str(e))

        status = InstallStatus.ALREADY_PRESENT if existed else InstallStatus.INSTALLED
        return InstallationRecord(name, display, status, path=clone)

    def install_editor_config(self) -> InstallationRecord:
        """Install the LazyVim starter unless an editor config already exists."""
        target = self.settings.editor_config_dir
        name = "lazyvim"
        display = "LazyVim config"
        if self.fs.exists(target):
            logger.info("%s already exists, leaving it untouched", target)
            return InstallationRecord(name, display, InstallStatus.ALREADY_PRESENT, path=target)

        try:
            self.fs.mkdir(target.parent, parents=True, exist_ok=True)
            self.gitops.clone(self.catalog.repositories.editor_starter, target)
            self.gitops.strip_history(target)
        except GitOpsError as e:
            logger.error("Failed to install LazyVim starter: %s", e)
            return InstallationRecord(name, display, InstallStatus.FAILED, error=str(e))
        return InstallationRecord(name, display, InstallStatus.INSTALLED, path=target)

    def install_python_packages(self) -> list[InstallationRecord]:
        """Install each declared package group with the user's pip.

        Returns:
            One record per package group.
        """
        groups = self.catalog.python_packages
        python = self.settings.python_executable
        if not groups:
            return []
        if self.prober.which(python) is None:
            message = f"{python} not found"
            logger.error("Cannot install Python packages: %s", message)
            return [self._group_record(group, InstallStatus.FAILED, message) for group in groups]

        upgrade = self.runner.run([python, "-m", "pip", "install", "--upgrade", "pip", "--user"])
        if not upgrade.ok:
            logger.warning("pip upgrade failed (continuing anyway)")

        records = []
        for group in groups:
            logger.info("Installing %s: %s", group.label, " ".join(group.packages))
            result = self.runner.run([python, "-m", "pip", "install", "--user", *group.packages])
            if result.ok:
                records.append(self._group_record(group, InstallStatus.INSTALLED))
            else:
                logger.error("Failed to install some %s", group.label.lower())
                records.append(
                    self._group_record(group, InstallStatus.FAILED, f"pip exited with {result.returncode}")
                )
        return records

    def _group_record(
        self, group: PackageGroup, status: InstallStatus, error: str | None = None
    ) -> InstallationRecord:
        return InstallationRecord(
            name=f"pip:{group.label}",
            display_name=group.label,
            status=status,
            error=error,
        )
