"""
Destination path remapping.

The relative path from the source base to a resource is re-applied to the
destination base. Resources outside the source base are allowed; their
relative path simply climbs out with ``..`` segments.

Example:
    source_base="src/web", destination_base="build/web"
    src/web/assets/icon.png   -> build/web/assets/icon.png
    src/favicons/favicon.png  -> build/favicons/favicon.png
"""

from __future__ import annotations

import os


def compute_destination(resource_path: str, source_base: str, destination_base: str) -> str:
    """Return the absolute destination path for ``resource_path``."""
    relative_path = os.path.relpath(resource_path, source_base)
    return os.path.abspath(os.path.join(destination_base, relative_path))


def is_same_path(resource_path: str, destination_path: str) -> bool:
    """True if writing to ``destination_path`` would overwrite the resource."""
    return os.path.abspath(resource_path) == os.path.abspath(destination_path)


def to_url_path(path: str) -> str:
    """Convert an OS path fragment to forward-slash form for URLs."""
    return path.replace(os.sep, "/")
