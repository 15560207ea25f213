"""
Local filesystem storage.

Writes stub modules to disk. Relative paths are resolved against the
configured root, absolute paths are used as-is.
"""

from __future__ import annotations

from pathlib import Path

from assetmodule.storage.base import OutputFileSystem


class LocalFileSystem(OutputFileSystem):
    """Store stub modules on the local filesystem."""
    
    def __init__(self, root: str | Path | None = None, name: str = "local"):
        self.root = Path(root) if root is not None else Path.cwd()
        self.name = name
    
    def _resolve(self, path: str) -> Path:
        target = Path(path)
        if target.is_absolute():
            return target
        return self.root / target
    
    async def write_file(self, path: str, content: str) -> None:
        self._resolve(path).write_text(content, encoding="utf-8")
    
    async def mkdirp(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True, exist_ok=True)
    
    def read_file(self, path: str) -> str:
        return self._resolve(path).read_text(encoding="utf-8")
    
    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()
