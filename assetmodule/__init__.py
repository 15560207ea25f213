"""
assetmodule - stub modules for bundled assets.

Mirrors the assets a bundler processes into a parallel tree of tiny
modules that evaluate to each asset's public URL, so server code can
require the same module graph without running the bundler.
"""

from assetmodule.core import (
    AssetModuleOptions,
    CustomBackend,
    DefaultBackend,
    DiscoveredModule,
    EventBus,
    PassResult,
)
from assetmodule.services import AssetModuleEmitter

__version__ = "0.1.0"

__all__ = [
    "AssetModuleEmitter",
    "AssetModuleOptions",
    "CustomBackend",
    "DefaultBackend",
    "DiscoveredModule",
    "EventBus",
    "PassResult",
]
