"""
Exception hierarchy for assetmodule.

Configuration errors are fatal and raised where they are detected.
Emission errors wrap backend I/O failures for a single write.
"""

from __future__ import annotations

from typing import Any


class AssetModuleError(Exception):
    """Base class for all assetmodule errors."""
    pass


class ConfigurationError(AssetModuleError):
    """Raised when plugin options are invalid."""
    pass


class UnsupportedPatternError(ConfigurationError):
    """Raised when a value cannot be used as a path pattern."""
    
    def __init__(self, pattern: Any):
        self.pattern = pattern
        super().__init__(f"Unsupported pattern: {pattern!r}")


class EmissionError(AssetModuleError):
    """Raised when writing a stub module to a backend fails."""
    
    def __init__(self, path: str, backend: str, message: str):
        self.path = path
        self.backend = backend
        super().__init__(f"{message} ({backend}: {path})")
