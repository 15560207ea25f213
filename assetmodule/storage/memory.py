"""
In-memory storage for development and tests.

Only raw directory primitives are exposed, so directory trees are created
with the generic ``mkdirp`` helper.
"""

from __future__ import annotations

import os
from typing import Any

from assetmodule.storage.base import RawDirectoryFileSystem


class InMemoryFileSystem(RawDirectoryFileSystem):
    """Directory tree and file contents held in dictionaries."""
    
    def __init__(self, name: str = "memory"):
        self.name = name
        self._directories: set[str] = {os.sep}
        self._files: dict[str, str] = {}
    
    def _normalize(self, path: str) -> str:
        return os.path.normpath(os.path.join(os.sep, path))
    
    async def write_file(self, path: str, content: str) -> None:
        path = self._normalize(path)
        if os.path.dirname(path) not in self._directories:
            raise FileNotFoundError(f"No such directory: {os.path.dirname(path)}")
        if path in self._directories:
            raise IsADirectoryError(f"Is a directory: {path}")
        self._files[path] = content
    
    async def mkdir(self, path: str) -> None:
        path = self._normalize(path)
        if path in self._directories or path in self._files:
            raise FileExistsError(f"File exists: {path}")
        if os.path.dirname(path) not in self._directories:
            raise FileNotFoundError(f"No such directory: {os.path.dirname(path)}")
        self._directories.add(path)
    
    async def stat(self, path: str) -> dict[str, Any]:
        path = self._normalize(path)
        if path in self._directories:
            return {"type": "directory"}
        if path in self._files:
            return {"type": "file", "size": len(self._files[path])}
        raise FileNotFoundError(f"No such file or directory: {path}")
    
    # =========================================================================
    # Inspection
    # =========================================================================
    
    def read_file(self, path: str) -> str:
        path = self._normalize(path)
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return self._files[path]
    
    def exists(self, path: str) -> bool:
        path = self._normalize(path)
        return path in self._files or path in self._directories
    
    def list_files(self) -> list[str]:
        return sorted(self._files)
