"""Tests for post-install verification."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from conftest import FakeRunner, make_executable

from mac_devenv.catalog import Catalog, PathCheck, RuntimeCheck, ToolSpec
from mac_devenv.filesystem import RealFileSystem
from mac_devenv.probe import EnvironmentProber
from mac_devenv.settings import Settings
from mac_devenv.types import CheckState
from mac_devenv.verify import PATH_HINT, Verifier


@pytest.fixture
def verifier(settings: Settings, prober: EnvironmentProber, runner: FakeRunner) -> Verifier:
    return Verifier(settings, prober, runner, RealFileSystem())


class TestCheckTool:
    """Tests for tool checks."""

    def test_found_reports_version(self, verifier: Verifier, runner: FakeRunner, bin_dir: Path) -> None:
        make_executable(bin_dir, "node")
        runner.on("node", "--version", stdout="v20.11.1\n")
        spec = ToolSpec(name="node", display_name="Node.js", command="node", version_args=["--version"])

        entry = verifier.check_tool(spec)

        assert entry.state is CheckState.OK
        assert entry.detail == "v20.11.1"

    def test_found_without_version_reports_path(self, verifier: Verifier, bin_dir: Path) -> None:
        path = make_executable(bin_dir, "rg")
        entry = verifier.check_tool(ToolSpec(name="ripgrep", display_name="Ripgrep", command="rg"))

        assert entry.state is CheckState.OK
        assert entry.detail == str(path)

    def test_required_missing_is_error(self, verifier: Verifier) -> None:
        spec = ToolSpec(name="git", display_name="Git", command="git", required=True)
        assert verifier.check_tool(spec).state is CheckState.MISSING

    def test_optional_missing_is_warning(self, verifier: Verifier) -> None:
        """Test optional tools report their declared warning text."""
        spec = ToolSpec(name="gemini", display_name="Gemini CLI", command="gemini", warning="may need authentication")

        entry = verifier.check_tool(spec)

        assert entry.state is CheckState.WARNING
        assert entry.detail == "may need authentication"


class TestCheckRuntime:
    """Tests for interpreter module checks."""

    CHECKS = [
        RuntimeCheck(name="Anthropic API", module="anthropic"),
        RuntimeCheck(name="MCP Protocol", module="mcp", required=True),
    ]

    def test_single_interpreter_call(self, verifier: Verifier, runner: FakeRunner) -> None:
        """Test all modules are checked in one invocation."""
        runner.on("python3.12", stdout="anthropic:ok\nmcp:ok\n")

        entries = verifier.check_runtime(self.CHECKS)

        assert len(runner.calls) == 1
        assert runner.calls[0].args[-2:] == ("anthropic", "mcp")
        assert [entry.state for entry in entries] == [CheckState.OK, CheckState.OK]

    def test_missing_modules(self, verifier: Verifier, runner: FakeRunner) -> None:
        runner.on("python3.12", stdout="anthropic:missing\nmcp:missing\n")

        entries = verifier.check_runtime(self.CHECKS)

        assert [entry.state for entry in entries] == [CheckState.WARNING, CheckState.MISSING]
        assert entries[0].detail == "import failed"

    def test_interpreter_unavailable(self, verifier: Verifier, runner: FakeRunner) -> None:
        runner.on("python3.12", returncode=127)

        entries = verifier.check_runtime(self.CHECKS)

        assert entries[0].detail == "python3.12 unavailable"
        assert entries[1].state is CheckState.MISSING

    def test_no_checks(self, verifier: Verifier, runner: FakeRunner) -> None:
        assert verifier.check_runtime([]) == []
        assert runner.calls == []


class TestCheckPath:
    def test_directory_present(self, verifier: Verifier, temp_home: Path) -> None:
        (temp_home / ".config" / "nvim").mkdir(parents=True)
        entry = verifier.check_path(PathCheck(name="LazyVim config", path="~/.config/nvim"))
        assert entry.state is CheckState.OK

    def test_directory_missing(self, verifier: Verifier) -> None:
        entry = verifier.check_path(PathCheck(name="LazyVim config", path="~/.config/nvim"))
        assert entry.state is CheckState.WARNING

    def test_workspace_follows_settings(
        self, settings: Settings, prober: EnvironmentProber, runner: FakeRunner, tmp_path: Path
    ) -> None:
        """Test the workspace check looks where the workspace was configured."""
        workspace = tmp_path / "elsewhere" / "ws"
        workspace.mkdir(parents=True)
        custom = settings.model_copy(update={"workspace_dir": workspace})
        verifier = Verifier(custom, prober, runner, RealFileSystem())

        entry = verifier.check_path(PathCheck(name="MCP workspace", path="{workspace}"))

        assert entry.state is CheckState.OK
        assert entry.detail == str(workspace)

    def test_workspace_default_location_ignored_when_overridden(
        self, settings: Settings, prober: EnvironmentProber, runner: FakeRunner, temp_home: Path, tmp_path: Path
    ) -> None:
        (temp_home / "mcp-workspace").mkdir()
        custom = settings.model_copy(update={"workspace_dir": tmp_path / "absent"})
        verifier = Verifier(custom, prober, runner, RealFileSystem())

        entry = verifier.check_path(PathCheck(name="MCP workspace", path="{workspace}", required=True))

        assert entry.state is CheckState.MISSING


class TestVerify:
    """Tests for the full report."""

    def test_one_missing_required_one_warning(
        self, verifier: Verifier, catalog: Catalog, runner: FakeRunner, bin_dir: Path, temp_home: Path
    ) -> None:
        """Test error and warning counts with Node missing and Gemini missing."""
        make_executable(bin_dir, "brew")
        runner.on("python3.12", stdout="anthropic:ok\nmcp:ok\n")
        (temp_home / ".config" / "nvim").mkdir(parents=True)

        report = verifier.verify(catalog)

        assert report.errors == 1
        assert report.warnings == 1
        assert report.get("Node.js").state is CheckState.MISSING
        assert report.get("Gemini CLI").state is CheckState.WARNING

    def test_path_hint_when_package_manager_missing(self, verifier: Verifier, catalog: Catalog) -> None:
        """Test the PATH hint appears when the package manager is unreachable."""
        report = verifier.verify(catalog)

        assert PATH_HINT in report.hints
        assert "Homebrew not in PATH" in report.hints

    def test_no_path_hint_when_package_manager_found(
        self, verifier: Verifier, catalog: Catalog, bin_dir: Path
    ) -> None:
        make_executable(bin_dir, "brew")

        report = verifier.verify(catalog)

        assert PATH_HINT not in report.hints

    def test_no_path_hint_without_package_manager(
        self, verifier: Verifier, catalog_data: dict[str, Any]
    ) -> None:
        """Test only the flagged package manager triggers the PATH hint."""
        catalog_data["tools"][0]["packageManager"] = False
        catalog = Catalog.model_validate(catalog_data)

        report = verifier.verify(catalog)

        assert report.get("Homebrew").state is CheckState.MISSING
        assert PATH_HINT not in report.hints

    def test_all_ok(self, verifier: Verifier, catalog: Catalog, runner: FakeRunner, bin_dir: Path, temp_home: Path) -> None:
        for name in ("brew", "node", "gemini"):
            make_executable(bin_dir, name)
        runner.on("python3.12", stdout="anthropic:ok\nmcp:ok\n")
        (temp_home / ".config" / "nvim").mkdir(parents=True)

        report = verifier.verify(catalog)

        assert report.ok
        assert report.warnings == 0
        assert report.hints == []

    def test_verify_has_no_side_effects(
        self, verifier: Verifier, catalog: Catalog, runner: FakeRunner, temp_home: Path
    ) -> None:
        """Test verification only queries, never installs or writes."""
        verifier.verify(catalog)

        assert not runner.ran("brew", "install")
        assert not runner.ran("npm")
        assert list(temp_home.iterdir()) == []
