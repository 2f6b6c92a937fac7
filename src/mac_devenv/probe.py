"""Read-only inspection of the host machine."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import MutableMapping
from pathlib import Path

from mac_devenv.catalog import ToolSpec, expand_home
from mac_devenv.protocols import CommandRunner
from mac_devenv.types import ProbeResult

logger = logging.getLogger(__name__)


class EnvironmentProber:
    """Determines OS, search path entries and tool presence.

    The prober owns the session environment mapping that every child
    process inherits; ``prepend_path`` is the only method that changes it.
    """

    def __init__(
        self,
        env: MutableMapping[str, str],
        home: Path,
        runner: CommandRunner | None = None,
        platform: str | None = None,
    ) -> None:
        """Initialize prober.

        Args:
            env: Session environment shared with the command runner.
            home: Home directory used to expand ``~``.
            runner: Runner for version queries (``sw_vers``).
            platform: Platform string override. Defaults to sys.platform.
        """
        self.env = env
        self.home = home
        self.runner = runner
        self.platform = platform or sys.platform

    @property
    def search_path(self) -> list[str]:
        return [entry for entry in self.env.get("PATH", "").split(os.pathsep) if entry]

    def is_macos(self) -> bool:
        return self.platform == "darwin"

    def macos_version(self) -> str | None:
        """Product version reported by sw_vers, if available."""
        if self.runner is None:
            return None
        result = self.runner.run(["sw_vers", "-productVersion"])
        if not result.ok:
            return None
        return result.first_line or None

    def which(self, command: str) -> Path | None:
        resolved = shutil.which(command, path=self.env.get("PATH", ""))
        return Path(resolved) if resolved else None

    def probe(self, spec: ToolSpec) -> ProbeResult:
        """Check whether a tool is present.

        Tools declaring a path (application bundles, fonts) are probed by
        existence of that path; all others by resolving their command.
        """
        try:
            probe_path = spec.probe_path(self.home)
            if probe_path is not None:
                if probe_path.exists():
                    return ProbeResult(found=True, path=probe_path)
                return ProbeResult.not_found()

            if spec.command:
                resolved = self.which(spec.command)
                if resolved is not None:
                    return ProbeResult(found=True, path=resolved)
        except OSError as e:
            logger.debug("Probe for %s failed: %s", spec.name, e)
        return ProbeResult.not_found()

    def prepend_path(self, directory: str) -> bool:
        path = str(expand_home(directory, self.home))
        if path in self.search_path:
            return False
        current = self.env.get("PATH", "")
        self.env["PATH"] = f"{path}{os.pathsep}{current}" if current else path
        logger.debug("Added %s to session PATH", path)
        return True

    def augment_path(self, directories: list[str]) -> list[str]:
        """Add existing directories missing from the session search path.

        Args:
            directories: Candidate directories, ``~`` allowed.

        Returns:
            Directories that were added, in the order given.
        """
        added: list[str] = []
        for directory in directories:
            if not expand_home(directory, self.home).is_dir():
                continue
            if self.prepend_path(directory):
                added.append(directory)
        return added
