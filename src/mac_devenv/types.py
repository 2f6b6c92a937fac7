"""Shared data types for mac-devenv."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

__all__ = [
    "CheckState",
    "CommandResult",
    "InstallStatus",
    "InstallationRecord",
    "ProbeResult",
    "Report",
    "VerificationEntry",
    "WriteMode",
    "WriteResult",
]


class InstallStatus(str, Enum):
    """Outcome of processing one tool."""

    ALREADY_PRESENT = "already_present"
    INSTALLED = "installed"
    FAILED = "failed"


class CheckState(str, Enum):
    """Verification state of one tool or check."""

    OK = "ok"
    MISSING = "missing"
    WARNING = "warning"


class WriteMode(str, Enum):
    """How a config fragment is written to its target."""

    APPEND = "append"
    OVERWRITE = "overwrite"


@dataclass(frozen=True)
class ProbeResult:
    """Result of probing for a tool.

    Attributes:
        found: True if the tool resolved on the search path or on disk.
        path: Resolved location (None when not found).
    """

    found: bool
    path: Path | None = None

    @classmethod
    def not_found(cls) -> ProbeResult:
        return cls(found=False)


@dataclass(frozen=True)
class CommandResult:
    """Completed external process."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def first_line(self) -> str:
        """First non-empty line of stdout, falling back to stderr."""
        for stream in (self.stdout, self.stderr):
            for line in stream.splitlines():
                if line.strip():
                    return line.strip()
        return ""


@dataclass
class InstallationRecord:
    """Result of ensuring one tool is installed.

    Attributes:
        name: Catalog key of the tool.
        display_name: Human-readable name.
        status: AlreadyPresent, Installed or Failed.
        path: Resolved path (None on failure).
        error: Failure message (None unless status is FAILED).
    """

    name: str
    display_name: str
    status: InstallStatus
    path: Path | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if self.status is InstallStatus.FAILED:
            if self.path is not None:
                raise ValueError("failed record cannot carry a path")
        elif self.error is not None:
            raise ValueError(f"status={self.status.value} but error is set")

    @property
    def succeeded(self) -> bool:
        return self.status is not InstallStatus.FAILED


@dataclass
class WriteResult:
    """What the configuration writer did with one fragment."""

    target: Path
    mode: WriteMode
    changed: bool
    backup: Path | None = None
    reason: str = ""


@dataclass
class VerificationEntry:
    """One line of the verification report."""

    name: str
    state: CheckState
    detail: str = ""
    hint: str | None = None


@dataclass
class Report:
    """Structured verification report."""

    entries: list[VerificationEntry] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)

    @property
    def errors(self) -> int:
        """Number of entries counted as hard failures."""
        return sum(1 for entry in self.entries if entry.state is CheckState.MISSING)

    @property
    def warnings(self) -> int:
        """Number of advisory entries."""
        return sum(1 for entry in self.entries if entry.state is CheckState.WARNING)

    @property
    def ok(self) -> bool:
        return self.errors == 0

    def add(self, entry: VerificationEntry) -> None:
        self.entries.append(entry)

    def get(self, name: str) -> VerificationEntry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None
