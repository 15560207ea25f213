"""
Services that react to build lifecycle events.
"""

from assetmodule.services.base import Service
from assetmodule.services.emitter import AssetModuleEmitter

__all__ = [
    "Service",
    "AssetModuleEmitter",
]
