"""
Storage abstraction layer.

Stub modules are written through these interfaces so the same emitter
can target the real filesystem, an in-memory filesystem, or any other
backend.

Two shapes are supported:
- OutputFileSystem: offers a native recursive ``mkdirp``
- RawDirectoryFileSystem: offers only ``mkdir`` (one level) and ``stat``;
  recursive creation is done by the generic ``mkdirp`` helper below
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any, Union


# =============================================================================
# Storage Interfaces
# =============================================================================


class OutputFileSystem(ABC):
    """
    File system with native recursive directory creation.
    
    Local Implementation: LocalFileSystem
    """
    
    name: str = "output"
    
    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        """Write ``content`` to ``path``, replacing any existing file."""
        pass
    
    @abstractmethod
    async def mkdirp(self, path: str) -> None:
        """Create ``path`` and any missing parents. No-op if it exists."""
        pass


class RawDirectoryFileSystem(ABC):
    """
    File system exposing only raw directory-entry primitives.
    
    Local Implementation: InMemoryFileSystem
    """
    
    name: str = "raw"
    
    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        """Write ``content`` to ``path``, replacing any existing file."""
        pass
    
    @abstractmethod
    async def mkdir(self, path: str) -> None:
        """
        Create a single directory.
        
        Raises:
            FileExistsError: If the entry already exists
            FileNotFoundError: If the parent does not exist
        """
        pass
    
    @abstractmethod
    async def stat(self, path: str) -> dict[str, Any]:
        """
        Describe an entry as ``{"type": "file" | "directory", ...}``.
        
        Raises:
            FileNotFoundError: If the entry does not exist
        """
        pass


Backend = Union[OutputFileSystem, RawDirectoryFileSystem]


# =============================================================================
# Directory helpers
# =============================================================================


async def mkdirp(fs: RawDirectoryFileSystem, path: str) -> None:
    """
    Recursively create ``path`` on a file system that only has ``mkdir``.
    
    Existing directories are left alone. An existing non-directory entry
    anywhere along the path raises ``NotADirectoryError``.
    """
    path = os.path.normpath(path)
    
    try:
        entry = await fs.stat(path)
    except FileNotFoundError:
        entry = None
    
    if entry is not None:
        if entry.get("type") != "directory":
            raise NotADirectoryError(f"Not a directory: {path}")
        return
    
    parent = os.path.dirname(path)
    if parent and parent != path:
        await mkdirp(fs, parent)
    
    try:
        await fs.mkdir(path)
    except FileExistsError:
        # Created by a concurrent writer between stat and mkdir
        entry = await fs.stat(path)
        if entry.get("type") != "directory":
            raise NotADirectoryError(f"Not a directory: {path}")


async def ensure_directory(fs: Backend, path: str) -> None:
    """Create ``path`` on any backend, using its native mkdirp if it has one."""
    if isinstance(fs, OutputFileSystem):
        await fs.mkdirp(path)
    else:
        await mkdirp(fs, path)


def backend_name(fs: Backend) -> str:
    return getattr(fs, "name", None) or fs.__class__.__name__
