"""Protocol definitions for core abstractions.

This module defines abstract interfaces (Protocols) for the services the
orchestrator talks to. Designing to interfaces enables:
- Loose coupling between components
- Easy substitution of test doubles
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from mac_devenv.types import CommandResult, ProbeResult

if TYPE_CHECKING:
    from mac_devenv.catalog import ToolSpec


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for running external processes."""

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        extra_env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run a command to completion.

        Args:
            args: Program and arguments.
            cwd: Working directory.
            extra_env: Variables layered over the base environment.

        Returns:
            CommandResult; never raises for a failing or missing program.
        """
        ...


@runtime_checkable
class Prober(Protocol):
    """Protocol for read-only environment inspection."""

    def probe(self, spec: ToolSpec) -> ProbeResult:
        """Check whether a tool is present.

        Args:
            spec: Tool to look for.

        Returns:
            ProbeResult; absence is a normal outcome, never an exception.
        """
        ...

    def which(self, command: str) -> Path | None:
        """Resolve a command on the session search path.

        Args:
            command: Executable name.

        Returns:
            Absolute path if resolvable, None otherwise.
        """
        ...

    def is_macos(self) -> bool:
        """Return True when running on macOS."""
        ...

    def prepend_path(self, directory: str) -> bool:
        """Add a directory to the session search path.

        Args:
            directory: Directory to add (``~`` is expanded).

        Returns:
            True if the search path changed.
        """
        ...


@runtime_checkable
class SourceRepository(Protocol):
    """Protocol for git repository operations."""

    def clone(self, url: str, path: Path, ref: str = "main", shallow: bool = True) -> Path:
        """Clone a repository into a path.

        Args:
            url: Git repository URL.
            path: Destination directory (must not exist).
            ref: Branch/tag to checkout.
            shallow: Clone with depth 1.

        Returns:
            Path to the clone.
        """
        ...

    def clone_or_pull(self, url: str, path: Path, ref: str = "main") -> bool:
        """Clone a repository, or pull if the path already holds a clone.

        Args:
            url: Git repository URL.
            path: Local clone location.
            ref: Branch to track.

        Returns:
            True if a fresh clone was made, False if an existing clone was updated.
        """
        ...

    def strip_history(self, path: Path) -> bool:
        """Remove the .git directory from a clone.

        Args:
            path: Clone location.

        Returns:
            True if a .git directory was removed.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Enables testing without real I/O by allowing mock implementations.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...

    def append_text(self, path: Path, content: str) -> None:
        """Append text content to a file, creating it if needed."""
        ...

    def write_atomic(self, path: Path, content: str, executable: bool = False) -> None:
        """Replace a file's content atomically."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a file."""
        ...

    def rmtree(self, path: Path) -> None:
        """Remove a directory tree."""
        ...
