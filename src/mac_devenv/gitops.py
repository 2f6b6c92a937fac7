"""Git operations for repositories cloned during setup."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

logger = logging.getLogger(__name__)

# Default branches to try when cloning
DEFAULT_BRANCHES = ["main", "master"]


class GitOpsError(Exception):
    """Error during git operations."""

    pass


class GitOps:
    """Clones and updates repositories with GitPython."""

    @classmethod
    def create(cls) -> GitOps:
        """Create a git operations manager.

        Returns:
            GitOps instance.
        """
        return cls()

    def clone(self, url: str, path: Path, ref: str = "main", shallow: bool = True) -> Path:
        """Clone a repository with branch fallback.

        Tries the specified ref first. If ref is "main" and fails, tries "master".
        A partial clone left by a failed attempt is removed before the next one.

        Args:
            url: Git repository URL.
            path: Destination directory.
            ref: Branch/tag to checkout. Defaults to "main".
            shallow: Clone with depth 1.

        Returns:
            Path to the clone.

        Raises:
            GitOpsError: If every branch attempt fails.
        """
        last_error: GitCommandError | None = None
        for branch in self._get_branches_to_try(ref):
            try:
                return self._try_clone(url, path, branch, shallow)
            except GitCommandError as e:
                last_error = e
                logger.debug("Clone of %s failed with branch '%s': %s", url, branch, e)
                self._cleanup_failed_clone(path)

        raise GitOpsError(f"Failed to clone {url}: {last_error}")

    def clone_or_pull(self, url: str, path: Path, ref: str = "main") -> bool:
        """Clone a repository or pull updates if already cloned.

        Args:
            url: Git repository URL.
            path: Local clone location.
            ref: Branch to pull.

        Returns:
            True if freshly cloned, False if an existing clone was pulled.

        Raises:
            GitOpsError: If clone or pull fails.
        """
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            self.clone(url, path, ref, shallow=False)
            return True

        try:
            repo = Repo(path)
            repo.remotes.origin.pull(ref)
        except (GitCommandError, InvalidGitRepositoryError, NoSuchPathError, AttributeError) as e:
            raise GitOpsError(f"Failed to update {path}: {e}") from e
        logger.debug("Pulled %s into %s", ref, path)
        return False

    def strip_history(self, path: Path) -> bool:
        """Remove the .git directory from a clone, leaving a plain tree.

        Args:
            path: Clone location.

        Returns:
            True if a .git directory was removed.
        """
        git_dir = path / ".git"
        if git_dir.exists():
            shutil.rmtree(git_dir)
            return True
        return False

    def _get_branches_to_try(self, ref: str) -> list[str]:
        """Get ordered list of branches to try for cloning.

        Args:
            ref: The requested branch reference.

        Returns:
            List of branches to try in order.
        """
        if ref in DEFAULT_BRANCHES:
            return DEFAULT_BRANCHES.copy()
        return [ref]

    def _try_clone(self, url: str, path: Path, ref: str, shallow: bool) -> Path:
        """Attempt to clone with a specific branch."""
        if shallow:
            Repo.clone_from(url, path, branch=ref, depth=1)
        else:
            Repo.clone_from(url, path, branch=ref)
        logger.debug("Cloned %s with branch '%s' into %s", url, ref, path)
        return path

    def _cleanup_failed_clone(self, path: Path) -> None:
        """Remove partial clone directory after failed attempt.

        Args:
            path: Path to clean up.
        """
        if path.exists():
            shutil.rmtree(path)
