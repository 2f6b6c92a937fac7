"""Tests for idempotent configuration writes."""

from __future__ import annotations

import stat
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mac_devenv.config_writer import ConfigFragment, ConfigWriter
from mac_devenv.filesystem import RealFileSystem
from mac_devenv.types import WriteMode

EXPORT_LINE = 'export PATH="/opt/homebrew/bin:$PATH"'


@pytest.fixture
def writer() -> ConfigWriter:
    """Create a ConfigWriter using factory method."""
    return ConfigWriter.create()


def append_fragment(target: Path, **kwargs: object) -> ConfigFragment:
    return ConfigFragment(target=target, content=EXPORT_LINE, marker="/opt/homebrew/bin", **kwargs)


class TestConfigFragment:
    def test_append_requires_marker(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="needs a marker"):
            ConfigFragment(target=tmp_path / ".zshrc", content="x")

    def test_overwrite_without_marker(self, tmp_path: Path) -> None:
        fragment = ConfigFragment(target=tmp_path / "config", content="x", mode=WriteMode.OVERWRITE)
        assert fragment.marker is None


class TestAppend:
    """Tests for append-mode fragments."""

    def test_appends_once(self, writer: ConfigWriter, tmp_path: Path) -> None:
        """Test applying the same fragment twice leaves one copy."""
        profile = tmp_path / ".zshrc"
        profile.write_text("alias ll='ls -l'\n")
        fragment = append_fragment(profile)

        first = writer.apply_config([fragment])
        second = writer.apply_config([fragment])

        assert first[0].changed is True
        assert second[0].changed is False
        assert second[0].reason == "already present"
        assert profile.read_text().count(EXPORT_LINE) == 1

    def test_idempotent_across_writers(self, tmp_path: Path) -> None:
        """Test a second run with a fresh writer changes nothing."""
        profile = tmp_path / ".zshrc"
        profile.write_text("# mine\n")
        fragment = append_fragment(profile)

        ConfigWriter.create().apply_config([fragment])
        after_first = profile.read_text()
        ConfigWriter.create().apply_config([fragment])

        assert profile.read_text() == after_first

    def test_preexisting_line_not_duplicated(self, writer: ConfigWriter, tmp_path: Path) -> None:
        """Test a user-written equivalent line counts as present."""
        profile = tmp_path / ".zshrc"
        profile.write_text('export PATH="/opt/homebrew/bin:/opt/homebrew/sbin:$PATH"\n')

        results = writer.apply_config([append_fragment(profile)])

        assert results[0].changed is False
        assert not writer.backup_path(profile).exists()

    def test_separates_from_unterminated_last_line(self, writer: ConfigWriter, tmp_path: Path) -> None:
        profile = tmp_path / ".bashrc"
        profile.write_text("export EDITOR=vim")

        writer.apply_config([append_fragment(profile)])

        assert profile.read_text() == f"export EDITOR=vim\n{EXPORT_LINE}\n"

    def test_creates_missing_target(self, writer: ConfigWriter, tmp_path: Path) -> None:
        """Test a missing target is created without a backup."""
        profile = tmp_path / "nested" / ".zshrc"

        results = writer.apply_config([append_fragment(profile)])

        assert profile.read_text() == f"{EXPORT_LINE}\n"
        assert results[0].backup is None

    def test_only_if_exists_skips_missing(self, writer: ConfigWriter, tmp_path: Path) -> None:
        """Test profiles the user does not have are left alone."""
        profile = tmp_path / ".bash_profile"

        results = writer.apply_config([append_fragment(profile, only_if_exists=True)])

        assert results[0].changed is False
        assert results[0].reason == "target missing"
        assert not profile.exists()


class TestBackup:
    """Tests for one-time backups."""

    def test_backup_taken_before_first_mutation(self, writer: ConfigWriter, tmp_path: Path) -> None:
        profile = tmp_path / ".zshrc"
        profile.write_text("original\n")

        results = writer.apply_config([append_fragment(profile)])

        backup = writer.backup_path(profile)
        assert results[0].backup == backup
        assert backup.name == ".zshrc.devenv-backup"
        assert backup.read_text() == "original\n"

    def test_one_backup_for_several_fragments(self, writer: ConfigWriter, tmp_path: Path) -> None:
        """Test two fragments on one file in one run share a single backup."""
        profile = tmp_path / ".zshrc"
        profile.write_text("original\n")
        fragments = [
            append_fragment(profile),
            ConfigFragment(target=profile, content='export PATH="$HOME/.local/bin:$PATH"', marker="$HOME/.local/bin"),
        ]

        results = writer.apply_config(fragments)

        assert results[0].backup is not None
        assert results[1].backup is None
        assert writer.backup_path(profile).read_text() == "original\n"

    def test_existing_backup_never_overwritten(self, tmp_path: Path) -> None:
        """Test later runs keep the backup of the pristine file."""
        profile = tmp_path / ".zshrc"
        profile.write_text("original\n")
        ConfigWriter.create().apply_config([append_fragment(profile)])

        later = ConfigFragment(target=profile, content="alias vim=nvim", marker="alias vim=nvim")
        results = ConfigWriter.create().apply_config([later])

        assert results[0].changed is True
        assert results[0].backup is None
        assert ConfigWriter.create().backup_path(profile).read_text() == "original\n"
        assert len(list(tmp_path.glob(".zshrc*"))) == 2

    def test_custom_suffix(self, tmp_path: Path) -> None:
        writer = ConfigWriter(RealFileSystem(), backup_suffix=".bak")
        assert writer.backup_path(tmp_path / ".zshrc") == tmp_path / ".zshrc.bak"


class TestOverwrite:
    """Tests for overwrite-mode fragments."""

    def test_writes_full_content(self, writer: ConfigWriter, tmp_path: Path) -> None:
        target = tmp_path / ".config" / "ghostty" / "config"
        fragment = ConfigFragment(target=target, content="font-size = 14\n", mode=WriteMode.OVERWRITE)

        results = writer.apply_config([fragment])

        assert target.read_text() == "font-size = 14\n"
        assert results[0].changed is True

    def test_rewrite_identical_content_unchanged(self, writer: ConfigWriter, tmp_path: Path) -> None:
        """Test rewriting the same content reports no change and keeps bytes identical."""
        target = tmp_path / "config.json"
        fragment = ConfigFragment(target=target, content='{"a": 1}\n', mode=WriteMode.OVERWRITE)

        writer.apply_config([fragment])
        before = target.read_bytes()
        results = writer.apply_config([fragment])

        assert results[0].changed is False
        assert target.read_bytes() == before

    def test_replaces_user_edits(self, writer: ConfigWriter, tmp_path: Path) -> None:
        target = tmp_path / "config"
        target.write_text("edited by hand\n")
        fragment = ConfigFragment(target=target, content="generated\n", mode=WriteMode.OVERWRITE)

        results = writer.apply_config([fragment])

        assert target.read_text() == "generated\n"
        assert results[0].changed is True
        assert results[0].backup is None

    def test_executable(self, writer: ConfigWriter, tmp_path: Path) -> None:
        target = tmp_path / "launch.sh"
        fragment = ConfigFragment(
            target=target, content="#!/bin/bash\n", mode=WriteMode.OVERWRITE, executable=True
        )

        writer.apply_config([fragment])

        assert target.stat().st_mode & stat.S_IXUSR

    def test_uses_atomic_write(self, mock_filesystem: MagicMock, tmp_path: Path) -> None:
        """Test overwrites go through write_atomic, never an append."""
        writer = ConfigWriter(mock_filesystem)
        target = tmp_path / "config"

        writer.apply_config([ConfigFragment(target=target, content="x", mode=WriteMode.OVERWRITE)])

        mock_filesystem.write_atomic.assert_called_once_with(target, "x", executable=False)
        mock_filesystem.append_text.assert_not_called()
