"""Declarative catalog of tools, checks and workspace content."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Catalog shipped with the package
DEFAULT_CATALOG = Path(__file__).parent / "catalog.yaml"

# Path check prefix standing for the configured workspace directory
WORKSPACE_TOKEN = "{workspace}"

# Tool whose command follows the configured interpreter
INTERPRETER_TOOL = "python"


def expand_home(value: str, home: Path) -> Path:
    """Expand a leading ~ against an explicit home directory."""
    if value == "~":
        return home
    if value.startswith("~/"):
        return home / value[2:]
    return Path(value)


class BrewAction(BaseModel):
    """Install a formula with Homebrew."""

    kind: Literal["brew"] = "brew"
    package: str


class CaskAction(BaseModel):
    """Install an application bundle with Homebrew cask."""

    kind: Literal["cask"] = "cask"
    package: str


class NpmAction(BaseModel):
    """Install a global npm package."""

    kind: Literal["npm"] = "npm"
    package: str


class ScriptAction(BaseModel):
    """Download a vendor install script and run it with bash."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["script"] = "script"
    url: str
    env: dict[str, str] = Field(default_factory=dict)
    path_entries: list[str] = Field(default_factory=list, alias="pathEntries")


class SourceAction(BaseModel):
    """Clone a repository, build it, and copy the binary into place."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["source"] = "source"
    repository: str
    ref: str = "main"
    build_tool: str = Field(alias="buildTool")
    build_tool_package: str | None = Field(default=None, alias="buildToolPackage")
    build_command: list[str] = Field(alias="buildCommand")
    artifact: str
    destination: str

    @field_validator("build_command")
    @classmethod
    def _non_empty_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("buildCommand cannot be empty")
        return value


InstallAction = Annotated[
    Union[BrewAction, CaskAction, NpmAction, ScriptAction, SourceAction],
    Field(discriminator="kind"),
]


class ToolSpec(BaseModel):
    """Declarative description of one installable tool."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    display_name: str = Field(alias="displayName")
    command: str | None = None
    path: str | None = None
    install: list[InstallAction] = Field(default_factory=list)
    required: bool = False
    warning: str = "not found"
    hint: str | None = None
    version_args: list[str] = Field(default_factory=list, alias="versionArgs")
    refresh_command: list[str] = Field(default_factory=list, alias="refreshCommand")
    package_manager: bool = Field(default=False, alias="packageManager")

    @model_validator(mode="after")
    def _has_probe(self) -> ToolSpec:
        if not self.command and not self.path:
            raise ValueError(f"tool '{self.name}' needs a command or a path to probe")
        return self

    def probe_path(self, home: Path) -> Path | None:
        """Filesystem location probed for GUI applications and fonts."""
        if not self.path:
            return None
        return expand_home(self.path, home)


class RuntimeCheck(BaseModel):
    """A module that the installed interpreter must be able to import."""

    name: str
    module: str
    required: bool = False
    hint: str | None = None


class PathCheck(BaseModel):
    """A directory the setup is expected to leave behind."""

    name: str
    path: str
    required: bool = False
    hint: str | None = None

    def resolve(self, home: Path, workspace: Path) -> Path:
        """Resolve ~ against home and a leading {workspace} against workspace."""
        if self.path == WORKSPACE_TOKEN:
            return workspace
        if self.path.startswith(WORKSPACE_TOKEN + "/"):
            return workspace / self.path[len(WORKSPACE_TOKEN) + 1 :]
        return expand_home(self.path, home)


class PackageGroup(BaseModel):
    """A batch of Python packages installed in one pip invocation."""

    label: str
    packages: list[str]


class Repositories(BaseModel):
    """Git repositories cloned into the user's environment."""

    model_config = ConfigDict(populate_by_name=True)

    workspace: str
    workspace_dir_name: str = Field(default="mcp-system", alias="workspaceDirName")
    editor_starter: str = Field(alias="editorStarter")


class Catalog(BaseModel):
    """Everything the orchestrator installs and verifies."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = "1.0"
    preconditions: list[str] = Field(default_factory=lambda: ["curl", "git"])
    tools: list[ToolSpec] = Field(default_factory=list)
    runtime_checks: list[RuntimeCheck] = Field(default_factory=list, alias="runtimeChecks")
    path_checks: list[PathCheck] = Field(default_factory=list, alias="pathChecks")
    python_packages: list[PackageGroup] = Field(default_factory=list, alias="pythonPackages")
    repositories: Repositories

    @field_validator("tools")
    @classmethod
    def _unique_names(cls, tools: list[ToolSpec]) -> list[ToolSpec]:
        seen: set[str] = set()
        for tool in tools:
            if tool.name in seen:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            seen.add(tool.name)
        return tools

    @classmethod
    def from_file(cls, path: Path) -> Catalog:
        """Load a catalog from a YAML file.

        Args:
            path: Path to the catalog file.

        Returns:
            Parsed Catalog.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the document is not valid YAML, not a mapping,
                or fails validation.
        """
        if not path.exists():
            raise FileNotFoundError(f"Catalog not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in catalog {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Catalog must be a mapping: {path}")
        return cls.model_validate(data)

    def get_tool(self, name: str) -> ToolSpec | None:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None

    def with_interpreter(self, executable: str) -> Catalog:
        """Point the interpreter tool at a different executable.

        The tool named ``python`` is checked under whatever name pip, the
        launcher and the import checks use, so setup and verification agree
        on which interpreter counts as installed. Install actions are left
        alone.

        Args:
            executable: Interpreter command, e.g. ``python3.13``.

        Returns:
            This catalog if nothing changes, otherwise an updated copy.
        """
        tool = self.get_tool(INTERPRETER_TOOL)
        if tool is None or tool.command == executable:
            return self

        hint = tool.hint.replace(tool.command, executable) if tool.hint and tool.command else tool.hint
        retargeted = tool.model_copy(
            update={"command": executable, "display_name": f"Python ({executable})", "hint": hint}
        )
        tools = [retargeted if candidate is tool else candidate for candidate in self.tools]
        return self.model_copy(update={"tools": tools})

    @property
    def package_manager(self) -> ToolSpec | None:
        """The tool flagged as the package manager, if any."""
        for tool in self.tools:
            if tool.package_manager:
                return tool
        return None
