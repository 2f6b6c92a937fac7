"""Build-from-source installs."""

from __future__ import annotations

import logging
from pathlib import Path

from mac_devenv.actions.base import BaseInstallAction, BuildError
from mac_devenv.catalog import SourceAction
from mac_devenv.gitops import GitOpsError
from mac_devenv.probe import EnvironmentProber
from mac_devenv.protocols import CommandRunner, FileSystem, SourceRepository

logger = logging.getLogger(__name__)

BUILD_DIR_PREFIX = "mac-devenv-build-"


class SourceBuildAction(BaseInstallAction):
    """Clone, compile, and copy a binary into place with elevated privileges.

    The build directory has a fixed name per repository. A directory left by
    an interrupted run is removed before cloning, and the directory is removed
    again when the build finishes, whether it succeeded or not.
    """

    kind = "source"

    def __init__(
        self,
        runner: CommandRunner,
        prober: EnvironmentProber,
        gitops: SourceRepository,
        filesystem: FileSystem,
        build_root: Path,
    ) -> None:
        super().__init__(runner)
        self.prober = prober
        self.gitops = gitops
        self.fs = filesystem
        self.build_root = build_root

    def build_command(self, action: SourceAction) -> list[str]:
        return list(action.build_command)

    def describe(self, action: SourceAction) -> str:
        return f"build of {action.repository}"

    def build_dir(self, action: SourceAction) -> Path:
        """Fixed working directory for a repository's build."""
        name = action.repository.rstrip("/").rsplit("/", 1)[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        return self.build_root / f"{BUILD_DIR_PREFIX}{name}"

    def execute(self, action: SourceAction) -> None:
        """Build and install the artifact.

        Raises:
            BuildError: If any step fails. The build directory is gone
                by the time this propagates.
        """
        work_dir = self.build_dir(action)
        self._remove(work_dir)
        try:
            self._ensure_build_tool(action)
            checkout = self._checkout(action, work_dir / "src")
            self._compile(action, checkout)
            self._copy_artifact(action, checkout)
        finally:
            self._remove(work_dir)

    def _ensure_build_tool(self, action: SourceAction) -> None:
        if self.prober.which(action.build_tool) is not None:
            return
        if not action.build_tool_package:
            raise BuildError(f"build tool '{action.build_tool}' is not installed")
        logger.info("Installing build tool %s", action.build_tool_package)
        result = self.runner.run(["brew", "install", action.build_tool_package])
        self.check(result, f"install of build tool {action.build_tool_package}", BuildError)

    def _checkout(self, action: SourceAction, path: Path) -> Path:
        self.fs.mkdir(path.parent, parents=True, exist_ok=True)
        try:
            return self.gitops.clone(action.repository, path, action.ref)
        except GitOpsError as e:
            raise BuildError(f"failed to clone {action.repository}: {e}") from e

    def _compile(self, action: SourceAction, checkout: Path) -> None:
        logger.info("Building %s (this may take a few minutes)", action.repository)
        result = self.runner.run(self.build_command(action), cwd=checkout)
        self.check(result, " ".join(action.build_command), BuildError)

    def _copy_artifact(self, action: SourceAction, checkout: Path) -> None:
        artifact = checkout / action.artifact
        if not self.fs.exists(artifact):
            raise BuildError(f"binary not found after build: {action.artifact}")
        result = self.runner.run(["sudo", "cp", str(artifact), action.destination])
        self.check(result, f"copy to {action.destination}", BuildError)

    def _remove(self, path: Path) -> None:
        if self.fs.exists(path):
            logger.debug("Removing build directory %s", path)
            self.fs.rmtree(path)
