"""Idempotent macOS development environment bootstrap."""

__version__ = "1.2.1"

# Export protocol interfaces for type hints and dependency injection
from mac_devenv.protocols import (
    CommandRunner,
    FileSystem,
    Prober,
    SourceRepository,
)

__all__ = [
    "__version__",
    "CommandRunner",
    "FileSystem",
    "Prober",
    "SourceRepository",
]
