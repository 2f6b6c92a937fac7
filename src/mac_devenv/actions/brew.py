"""Homebrew formula and cask installs."""

from __future__ import annotations

from mac_devenv.actions.base import BaseInstallAction
from mac_devenv.catalog import BrewAction, CaskAction


class BrewInstallAction(BaseInstallAction):
    """``brew install <formula>``."""

    kind = "brew"

    def build_command(self, action: BrewAction) -> list[str]:
        return ["brew", "install", action.package]


class CaskInstallAction(BaseInstallAction):
    """``brew install --cask <cask>``."""

    kind = "cask"

    def build_command(self, action: CaskAction) -> list[str]:
        return ["brew", "install", "--cask", action.package]
