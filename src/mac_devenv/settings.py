"""Runtime settings resolved from the environment.

Every field can be overridden with a MAC_DEVENV_* environment variable:
MAC_DEVENV_HOME, MAC_DEVENV_WORKSPACE, MAC_DEVENV_CATALOG and
MAC_DEVENV_PYTHON are the ones users normally touch. Empty values are
treated as unset.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mac_devenv.catalog import DEFAULT_CATALOG

# Shell startup files patched with PATH exports
DEFAULT_PROFILES = [".zshrc", ".bash_profile", ".bashrc"]

# Directories added to the session PATH when present
DEFAULT_SESSION_PATHS = [
    "/opt/homebrew/bin",
    "/opt/homebrew/sbin",
    "/usr/local/bin",
    "~/.local/bin",
    "/usr/bin",
    "/bin",
]


class Settings(BaseSettings):
    """Paths and names the orchestrator works with."""

    model_config = SettingsConfigDict(
        env_prefix="MAC_DEVENV_",
        env_ignore_empty=True,
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    home: Path = Field(default_factory=Path.home)
    # Follows home unless set explicitly
    workspace_dir: Path | None = Field(default=None, validation_alias="MAC_DEVENV_WORKSPACE")
    catalog_path: Path = Field(default=DEFAULT_CATALOG, validation_alias="MAC_DEVENV_CATALOG")
    python_executable: str = Field(default="python3.12", validation_alias="MAC_DEVENV_PYTHON")
    backup_suffix: str = ".devenv-backup"
    build_root: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    profiles: list[str] = Field(default_factory=lambda: list(DEFAULT_PROFILES))
    session_paths: list[str] = Field(default_factory=lambda: list(DEFAULT_SESSION_PATHS))

    @model_validator(mode="after")
    def _derive_workspace(self) -> Settings:
        if self.workspace_dir is None:
            self.workspace_dir = self.home / "mcp-workspace"
        return self

    @classmethod
    def create(cls, home: Path, **overrides: object) -> Settings:
        """Create settings rooted at a home directory.

        Unlike the plain constructor, this ignores MAC_DEVENV_* variables.

        Args:
            home: Home directory all user paths are resolved against.
            **overrides: Field overrides.

        Returns:
            Configured Settings.
        """
        return cls.model_validate({"home": home, **overrides})

    @property
    def profile_paths(self) -> list[Path]:
        return [self.home / name for name in self.profiles]

    @property
    def config_dir(self) -> Path:
        return self.home / ".config"

    @property
    def editor_config_dir(self) -> Path:
        return self.config_dir / "nvim"

    @property
    def launcher_path(self) -> Path:
        return self.workspace_dir / "launch-mcp-system.sh"

    @property
    def claude_desktop_config(self) -> Path:
        return self.home / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"

    @property
    def ghostty_config(self) -> Path:
        return self.config_dir / "ghostty" / "config"

    @property
    def gemini_guide(self) -> Path:
        return self.config_dir / "gemini" / "setup-guide.md"
