"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.

Dependencies are typed using Protocols (abstract interfaces) rather than
concrete implementations, so test doubles can be injected without inheritance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from mac_devenv.catalog import Catalog
from mac_devenv.config_writer import ConfigWriter
from mac_devenv.console import Reporter
from mac_devenv.install import Installer
from mac_devenv.probe import EnvironmentProber
from mac_devenv.protocols import CommandRunner, FileSystem
from mac_devenv.provision import WorkspaceProvisioner
from mac_devenv.settings import Settings
from mac_devenv.verify import Verifier


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for all services used by CLI commands.
    """

    settings: Settings
    catalog: Catalog
    runner: CommandRunner
    prober: EnvironmentProber
    filesystem: FileSystem
    installer: Installer
    provisioner: WorkspaceProvisioner
    writer: ConfigWriter
    verifier: Verifier
    reporter: Reporter


def create_context(
    settings: Settings | None = None,
    env: dict[str, str] | None = None,
    platform: str | None = None,
    home: Path | None = None,
) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, pass a temporary home and a fake environment, or construct
    AppContext directly with test doubles.

    Args:
        settings: Override settings (defaults to MAC_DEVENV_* variables).
        env: Session environment. Defaults to a copy of os.environ.
        platform: Platform string override for the prober.
        home: Override home directory.

    Returns:
        Configured AppContext with all dependencies.
    """
    from mac_devenv.actions import create_executors
    from mac_devenv.filesystem import RealFileSystem
    from mac_devenv.gitops import GitOps
    from mac_devenv.runner import SubprocessRunner

    session_env = dict(os.environ) if env is None else env
    if settings is None:
        settings = Settings.create(home) if home else Settings()
    catalog = Catalog.from_file(settings.catalog_path).with_interpreter(settings.python_executable)

    filesystem = RealFileSystem()
    runner = SubprocessRunner(env=session_env)
    prober = EnvironmentProber(session_env, settings.home, runner=runner, platform=platform)
    gitops = GitOps.create()
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
        reporter=Reporter(),
    )
