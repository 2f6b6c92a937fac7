"""External process execution."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from mac_devenv.types import CommandResult

logger = logging.getLogger(__name__)

# Exit status reported when the executable cannot be started
COMMAND_NOT_FOUND = 127


class SubprocessRunner:
    """Runs external commands and captures their output.

    Commands block until they finish; no timeout is applied. A command
    that cannot be started is reported as exit status 127 instead of raising,
    so callers only ever inspect a CommandResult.
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize runner.

        Args:
            env: Environment passed to every child process. None inherits
                the current process environment.
        """
        self.env = env

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
            extra_env: Variables layered over the runner's environment.

        Returns:
            CommandResult with exit status and captured output.
        """
        env = self._build_env(extra_env)
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
        try:
            completed = subprocess.run(
                list(args),
                cwd=cwd,
                env=env,
                capture_output=True,
                text=True,
                check=False,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            logger.debug("Could not start %s: %s", args[0], e)
            return CommandResult(args=tuple(args), returncode=COMMAND_NOT_FOUND, stderr=str(e))

        if completed.returncode != 0:
            logger.debug(
                "%s exited with %d: %s", args[0], completed.returncode, completed.stderr.strip()
            )
        return CommandResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def _build_env(self, extra_env: Mapping[str, str] | None) -> dict[str, str] | None:
        if self.env is None and not extra_env:
            return None
        env = dict(os.environ if self.env is None else self.env)
        if extra_env:
            env.update(extra_env)
        return env
