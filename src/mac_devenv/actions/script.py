"""Vendor install scripts fetched with curl and run with bash."""

from __future__ import annotations

import logging

from mac_devenv.actions.base import BaseInstallAction, InstallError
from mac_devenv.catalog import ScriptAction
from mac_devenv.protocols import CommandRunner
from mac_devenv.probe import EnvironmentProber

logger = logging.getLogger(__name__)


class ScriptInstallAction(BaseInstallAction):
    """Download an install script and execute it.

    After the script succeeds, any declared path entries that now exist are
    prepended to the session PATH so the freshly installed command resolves
    for the rest of the run.
    """

    kind = "script"

    def __init__(self, runner: CommandRunner, prober: EnvironmentProber) -> None:
        super().__init__(runner)
        self.prober = prober

    def build_command(self, action: ScriptAction) -> list[str]:
        return ["curl", "-fsSL", action.url]

    def describe(self, action: ScriptAction) -> str:
        return f"install script {action.url}"

    def execute(self, action: ScriptAction) -> None:
        logger.info("Downloading %s", action.url)
        download = self.runner.run(self.build_command(action))
        self.check(download, f"download of {action.url}")
        if not download.stdout.strip():
            raise InstallError(f"download of {action.url} returned an empty script")

        result = self.runner.run(["/bin/bash", "-c", download.stdout], extra_env=action.env)
        self.check(result, self.describe(action))

        added = self.prober.augment_path(action.path_entries)
        for entry in added:
            logger.info("Added %s to session PATH", entry)
