"""Shared test fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from mac_devenv.catalog import Catalog
from mac_devenv.console import Reporter
from mac_devenv.filesystem import RealFileSystem
from mac_devenv.probe import EnvironmentProber
from mac_devenv.settings import Settings
from mac_devenv.types import CommandResult


def make_executable(directory: Path, name: str) -> Path:
    """Create an executable stub so the prober resolves ``name``."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(0o755)
    return path


# ============================================================================
# Fake Command Runner
# ============================================================================


@dataclass
class RunCall:
    """One recorded invocation."""

    args: tuple[str, ...]
    cwd: Path | None = None
    extra_env: dict[str, str] = field(default_factory=dict)


@dataclass
class _Response:
    returncode: int
    stdout: str
    stderr: str
    effect: Callable[[], None] | None


class FakeRunner:
    """CommandRunner double that records calls and replays canned results.

    Responses are matched by the longest registered argument prefix. An
    unmatched command succeeds with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[RunCall] = []
        self._responses: dict[tuple[str, ...], _Response] = {}

    def on(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Callable[[], None] | None = None,
    ) -> FakeRunner:
        self._responses[tuple(prefix)] = _Response(returncode, stdout, stderr, effect)
        return self

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        extra_env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        args = tuple(args)
        self.calls.append(RunCall(args, cwd, dict(extra_env or {})))

        response = None
        for length in range(len(args), 0, -1):
            response = self._responses.get(args[:length])
            if response is not None:
                break
        if response is None:
            return CommandResult(args=args, returncode=0)
        if response.effect is not None:
            response.effect()
        return CommandResult(args, response.returncode, response.stdout, response.stderr)

    def commands(self) -> list[tuple[str, ...]]:
        return [call.args for call in self.calls]

    def ran(self, *prefix: str) -> bool:
        return any(call.args[: len(prefix)] == prefix for call in self.calls)


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def temp_home(tmp_path: Path) -> Path:
    """Home directory isolated under tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Directory standing in for the session PATH."""
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def session_env(bin_dir: Path) -> dict[str, str]:
    """Session environment whose PATH holds only bin_dir."""
    return {"PATH": str(bin_dir)}


@pytest.fixture
def settings(temp_home: Path, tmp_path: Path) -> Settings:
    """Settings rooted at the temporary home."""
    return Settings.create(temp_home, build_root=tmp_path / "build")


@pytest.fixture
def runner() -> FakeRunner:
    """Recording command runner."""
    return FakeRunner()


@pytest.fixture
def prober(session_env: dict[str, str], temp_home: Path, runner: FakeRunner) -> EnvironmentProber:
    """Prober reporting macOS, resolving commands from bin_dir."""
    return EnvironmentProber(session_env, temp_home, runner=runner, platform="darwin")


@pytest.fixture
def filesystem() -> RealFileSystem:
    """Real filesystem; tests confine it to tmp_path."""
    return RealFileSystem()


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileSystem for testing.

    The mock tracks all filesystem operations without touching real files.
    """
    fs = MagicMock()
    fs.exists.return_value = False
    fs.is_dir.return_value = False
    fs.read_text.return_value = ""
    return fs


@pytest.fixture
def reporter() -> Reporter:
    """Reporter writing into a buffer instead of the terminal."""
    return Reporter(console=Console(file=io.StringIO(), width=120))


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    """Minimal catalog with one tool of each flavour."""
    return {
        "version": "1.0",
        "preconditions": ["curl", "git"],
        "tools": [
            {
                "name": "homebrew",
                "displayName": "Homebrew",
                "command": "brew",
                "required": True,
                "packageManager": True,
                "refreshCommand": ["brew", "update"],
                "hint": "Homebrew not in PATH",
                "install": [{"kind": "script", "url": "https://example.com/install.sh"}],
            },
            {
                "name": "node",
                "displayName": "Node.js",
                "command": "node",
                "required": True,
                "versionArgs": ["--version"],
                "install": [{"kind": "brew", "package": "node"}],
            },
            {
                "name": "gemini",
                "displayName": "Gemini CLI",
                "command": "gemini",
                "warning": "may need authentication",
                "install": [{"kind": "npm", "package": "@google/gemini-cli"}],
            },
        ],
        "runtimeChecks": [
            {"name": "Anthropic SDK", "module": "anthropic"},
            {"name": "MCP", "module": "mcp", "required": True},
        ],
        "pathChecks": [{"name": "Neovim config", "path": "~/.config/nvim"}],
        "pythonPackages": [
            {"label": "Core packages", "packages": ["anthropic", "mcp"]},
            {"label": "Dev tools", "packages": ["pytest"]},
        ],
        "repositories": {
            "workspace": "https://github.com/example/mcp-system.git",
            "editorStarter": "https://github.com/LazyVim/starter",
        },
    }


@pytest.fixture
def catalog(catalog_data: dict[str, Any]) -> Catalog:
    """Parsed minimal catalog."""
    return Catalog.model_validate(catalog_data)


# ============================================================================
# App Context Fixtures
# ============================================================================


@pytest.fixture
def app_context(
    settings: Settings,
    catalog: Catalog,
    runner: FakeRunner,
    prober: EnvironmentProber,
    filesystem: RealFileSystem,
    reporter: Reporter,
    tmp_path: Path,
) -> Any:
    """AppContext wired with fakes for everything that touches the host.

    Session paths point at a directory under tmp_path so the host's own
    /usr/bin never leaks into probes.
    """
    from mac_devenv.actions import create_executors
    from mac_devenv.config_writer import ConfigWriter
    from mac_devenv.context import AppContext
    from mac_devenv.install import Installer
    from mac_devenv.provision import WorkspaceProvisioner
    from mac_devenv.verify import Verifier

    settings = settings.model_copy(update={"session_paths": [str(tmp_path / "homebrew" / "bin")]})
    gitops = MagicMock()
    executors = create_executors(runner, prober, gitops, filesystem, settings.build_root)
    return AppContext(
        settings=settings,
        catalog=catalog,
        runner=runner,
        prober=prober,
        filesystem=filesystem,
        installer=Installer.create(prober=prober, runner=runner, executors=executors),
        provisioner=WorkspaceProvisioner(settings, catalog, gitops, runner, prober, filesystem),
        writer=ConfigWriter.create(backup_suffix=settings.backup_suffix, filesystem=filesystem),
        verifier=Verifier(settings, prober, runner, filesystem),
        reporter=reporter,
    )
