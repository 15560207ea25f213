"""
Storage abstractions.

Backends that stub modules can be written to:
- OutputFileSystem → native recursive mkdir (LocalFileSystem)
- RawDirectoryFileSystem → mkdir/stat primitives only (InMemoryFileSystem)
"""

from assetmodule.storage.base import (
    Backend,
    OutputFileSystem,
    RawDirectoryFileSystem,
    backend_name,
    ensure_directory,
    mkdirp,
)
from assetmodule.storage.local import LocalFileSystem
from assetmodule.storage.memory import InMemoryFileSystem


def create_local_file_system(root: str | None = None, name: str = "local") -> LocalFileSystem:
    """Create a LocalFileSystem rooted at ``root`` (defaults to the cwd)."""
    return LocalFileSystem(root, name=name)


__all__ = [
    "Backend",
    "OutputFileSystem",
    "RawDirectoryFileSystem",
    "InMemoryFileSystem",
    "LocalFileSystem",
    "backend_name",
    "create_local_file_system",
    "ensure_directory",
    "mkdirp",
]
