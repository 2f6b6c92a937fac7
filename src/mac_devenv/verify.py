"""Post-install verification."""

from __future__ import annotations

import logging

from mac_devenv.catalog import Catalog, PathCheck, RuntimeCheck, ToolSpec
from mac_devenv.protocols import CommandRunner, FileSystem, Prober
from mac_devenv.settings import Settings
from mac_devenv.types import CheckState, Report, VerificationEntry

logger = logging.getLogger(__name__)

# Imports each module named on the command line and prints <module>:ok|missing
IMPORT_CHECK_SCRIPT = """\
import importlib, sys
for name in sys.argv[1:]:
    try:
        importlib.import_module(name)
    except Exception:
        print(name + ":missing")
    else:
        print(name + ":ok")
"""

PATH_HINT = (
    "If commands are not found: restart the terminal or run 'source ~/.zshrc'"
)


class Verifier:
    """Re-probes the environment and builds a Report.

    Whether an absent item is an error or a warning is declared per item
    in the catalog (``required``), never inferred.
    """

    def __init__(
        self,
        settings: Settings,
        prober: Prober,
        runner: CommandRunner,
        filesystem: FileSystem,
    ) -> None:
        self.settings = settings
        self.prober = prober
        self.runner = runner
        self.fs = filesystem

    def verify(self, catalog: Catalog) -> Report:
        """Check tools, interpreter modules and expected directories.

        Args:
            catalog: Catalog whose tools, runtime checks and path checks
                are re-probed.

        Returns:
            Report with one entry per check and the remediation hints.
        """
        report = Report()
        manager = catalog.package_manager
        manager_reachable = True

        for spec in catalog.tools:
            entry = self.check_tool(spec)
            report.add(entry)
            if spec is manager and entry.state is not CheckState.OK:
                manager_reachable = False

        for entry in self.check_runtime(catalog.runtime_checks):
            report.add(entry)

        for check in catalog.path_checks:
            report.add(self.check_path(check))

        report.hints = self._collect_hints(report, manager_reachable)
        logger.debug("Verification finished: %d errors, %d warnings", report.errors, report.warnings)
        return report

    def check_tool(self, spec: ToolSpec) -> VerificationEntry:
        probe = self.prober.probe(spec)
        if probe.found:
            detail = str(probe.path)
            if spec.command and spec.version_args:
                version = self.runner.run([spec.command, *spec.version_args])
                if version.ok and version.first_line:
                    detail = version.first_line
            return VerificationEntry(spec.display_name, CheckState.OK, detail)

        if spec.required:
            return VerificationEntry(spec.display_name, CheckState.MISSING, "not found", spec.hint)
        return VerificationEntry(spec.display_name, CheckState.WARNING, spec.warning, spec.hint)

    def check_runtime(self, checks: list[RuntimeCheck]) -> list[VerificationEntry]:
        """Ask the installed interpreter to import each module in one invocation."""
        if not checks:
            return []

        python = self.settings.python_executable
        modules = [check.module for check in checks]
        result = self.runner.run([python, "-c", IMPORT_CHECK_SCRIPT, *modules])

        statuses: dict[str, str] = {}
        if result.ok:
            for line in result.stdout.splitlines():
                module, _, status = line.strip().partition(":")
                if module:
                    statuses[module] = status
            unavailable = ""
        else:
            unavailable = f"{python} unavailable"

        entries = []
        for check in checks:
            if statuses.get(check.module) == "ok":
                entries.append(VerificationEntry(check.name, CheckState.OK, "Ready"))
                continue
            detail = unavailable or "import failed"
            state = CheckState.MISSING if check.required else CheckState.WARNING
            entries.append(VerificationEntry(check.name, state, detail, check.hint))
        return entries

    def check_path(self, check: PathCheck) -> VerificationEntry:
        path = check.resolve(self.settings.home, self.settings.workspace_dir)
        if self.fs.is_dir(path):
            return VerificationEntry(check.name, CheckState.OK, str(path))
        state = CheckState.MISSING if check.required else CheckState.WARNING
        return VerificationEntry(check.name, state, "not found", check.hint)

    def _collect_hints(self, report: Report, manager_reachable: bool) -> list[str]:
        hints: list[str] = []
        for entry in report.entries:
            if entry.state is not CheckState.OK and entry.hint and entry.hint not in hints:
                hints.append(entry.hint)
        if not manager_reachable:
            hints.append(PATH_HINT)
        return hints
