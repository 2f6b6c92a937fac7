"""Global npm package installs."""

from __future__ import annotations

from mac_devenv.actions.base import BaseInstallAction
from mac_devenv.catalog import NpmAction


class NpmInstallAction(BaseInstallAction):
    """``npm install -g <package>``."""

    kind = "npm"

    def build_command(self, action: NpmAction) -> list[str]:
        return ["npm", "install", "-g", action.package]
