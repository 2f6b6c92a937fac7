"""Idempotent writes of profile fragments and generated config files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from mac_devenv.filesystem import RealFileSystem
from mac_devenv.protocols import FileSystem
from mac_devenv.types import WriteMode, WriteResult

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_SUFFIX = ".devenv-backup"


@dataclass(frozen=True)
class ConfigFragment:
    """One unit of configuration to write.

    Attributes:
        target: File to write.
        content: Line or block (Append) or full file body (Overwrite).
        mode: Append or Overwrite.
        marker: Text whose presence in the target means the fragment is
            already applied. Required for Append mode.
        executable: Mark an Overwrite target executable.
        only_if_exists: Skip an Append fragment when the target is missing.
    """

    target: Path
    content: str
    mode: WriteMode = WriteMode.APPEND
    marker: str | None = None
    executable: bool = False
    only_if_exists: bool = False

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.mode is WriteMode.APPEND and not self.marker:
            raise ValueError(f"append fragment for {self.target} needs a marker")


class ConfigWriter:
    """Applies config fragments so that re-running never duplicates content.

    Append targets are backed up once, before their first mutation, to
    ``<file><suffix>``. An existing backup is never overwritten, so the backup
    always holds the content from before the first run that touched the file.
    """

    def __init__(self, filesystem: FileSystem, backup_suffix: str = DEFAULT_BACKUP_SUFFIX) -> None:
        self.fs = filesystem
        self.backup_suffix = backup_suffix
        self._backed_up: set[Path] = set()

    @classmethod
    def create(cls, backup_suffix: str = DEFAULT_BACKUP_SUFFIX, filesystem: FileSystem | None = None) -> ConfigWriter:
        return cls(filesystem=filesystem or RealFileSystem(), backup_suffix=backup_suffix)

    def backup_path(self, target: Path) -> Path:
        return target.with_name(f"{target.name}{self.backup_suffix}")

    def apply_config(self, fragments: Iterable[ConfigFragment]) -> list[WriteResult]:
        """Apply fragments in order.

        Args:
            fragments: Fragments to apply.

        Returns:
            One WriteResult per fragment.
        """
        results = []
        for fragment in fragments:
            if fragment.mode is WriteMode.APPEND:
                results.append(self.append(fragment))
            else:
                results.append(self.overwrite(fragment))
        return results

    def append(self, fragment: ConfigFragment) -> WriteResult:
        """Append a fragment unless its marker is already present."""
        target = fragment.target
        exists = self.fs.exists(target)

        if not exists and fragment.only_if_exists:
            return WriteResult(target, WriteMode.APPEND, changed=False, reason="target missing")

        if exists and fragment.marker in self.fs.read_text(target):
            logger.debug("%s already contains %r", target, fragment.marker)
            return WriteResult(target, WriteMode.APPEND, changed=False, reason="already present")

        backup = None
        if exists:
            backup = self._ensure_backup(target)
        else:
            self.fs.mkdir(target.parent, parents=True, exist_ok=True)

        self.fs.append_text(target, self._separated(target, exists, fragment.content))
        logger.info("Appended %r to %s", fragment.marker, target)
        return WriteResult(target, WriteMode.APPEND, changed=True, backup=backup)

    def overwrite(self, fragment: ConfigFragment) -> WriteResult:
        """Replace a file's content with the fragment atomically."""
        target = fragment.target
        self.fs.mkdir(target.parent, parents=True, exist_ok=True)
        changed = not self.fs.exists(target) or self.fs.read_text(target) != fragment.content
        self.fs.write_atomic(target, fragment.content, executable=fragment.executable)
        logger.info("Wrote %s", target)
        return WriteResult(target, WriteMode.OVERWRITE, changed=changed)

    def _ensure_backup(self, target: Path) -> Path | None:
        """Back up a file once per run, and only if no backup exists yet.

        Returns:
            Backup path if one was created now, None otherwise.
        """
        if target in self._backed_up:
            return None
        self._backed_up.add(target)

        backup = self.backup_path(target)
        if self.fs.exists(backup):
            logger.debug("Backup %s already exists, keeping it", backup)
            return None
        self.fs.copy_file(target, backup)
        logger.info("Backed up %s to %s", target, backup)
        return backup

    def _separated(self, target: Path, exists: bool, content: str) -> str:
        """Ensure appended content starts on its own line and ends with a newline."""
        if not content.endswith("\n"):
            content = f"{content}\n"
        if exists:
            current = self.fs.read_text(target)
            if current and not current.endswith("\n"):
                content = f"\n{content}"
        return content
