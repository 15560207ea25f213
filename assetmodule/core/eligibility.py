"""
Eligibility filter.

Decides whether a discovered module is an asset that should get a stub
module. Pure and synchronous; no I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from assetmodule.core.patterns import matches

if TYPE_CHECKING:
    from assetmodule.core.models import AssetModuleOptions


def should_emit(resource_path: str, options: AssetModuleOptions) -> bool:
    """
    Apply the ``test``, ``include`` and ``exclude`` options to a path.
    
    Unset options never reject. ``exclude`` rejects when it matches.
    """
    if options.test is not None and not matches(options.test, resource_path):
        return False
    if options.include is not None and not matches(options.include, resource_path):
        return False
    if options.exclude is not None and matches(options.exclude, resource_path):
        return False
    return True
