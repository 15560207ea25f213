"""
Core data models for assetmodule.

Options and discovered modules come from the host build; build passes,
targets and results are created and owned by the emitter for a single
pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

from pydantic import BaseModel, Field, field_validator

from assetmodule.core.errors import ConfigurationError
from assetmodule.core.patterns import as_pattern
from assetmodule.core.utils import generate_id
from assetmodule.storage.base import Backend, OutputFileSystem, RawDirectoryFileSystem

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class StubStrategy(str, Enum):
    """How the content of a stub module is produced."""

    RAW = "raw"  # Module's processed source, verbatim
    PUBLIC_PATH = "public_path"  # Export of the computed public URL


class StubFormat(str, Enum):
    """Statement shape used for public-path stubs."""

    COMMONJS = "commonjs"  # module.exports = "...";
    ESM = "esm"  # export default "...";


class WarningKind(str, Enum):
    """Non-fatal conditions recorded during a pass."""

    PATH_COLLISION = "path_collision"  # Destination equals source
    AMBIGUOUS_ASSET = "ambiguous_asset"  # More than one generated asset


# =============================================================================
# Backend targets
# =============================================================================


@dataclass(frozen=True)
class DefaultBackend:
    """Write to the host build's own output file system."""


@dataclass(frozen=True)
class CustomBackend:
    """Write to an explicitly configured file system."""

    handle: Backend


BackendTarget = Union[DefaultBackend, CustomBackend]


def as_backend_target(value: Any) -> BackendTarget:
    """Convert a raw ``file_systems`` entry into a backend target."""
    if isinstance(value, (DefaultBackend, CustomBackend)):
        return value
    if isinstance(value, (OutputFileSystem, RawDirectoryFileSystem)):
        return CustomBackend(value)
    raise ConfigurationError(f"Unsupported file system: {value!r}")


# =============================================================================
# Options
# =============================================================================


class AssetModuleOptions(BaseModel):
    """
    Options for the asset module emitter.

    ``source_base`` is the portion of each asset path that is replaced by
    ``destination_base``. Assets don't need to live under ``source_base``;
    the relative path from it is applied to ``destination_base`` either way.
    """

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    source_base: str
    destination_base: str

    # Patterns applied to each resource path
    test: Any = None
    include: Any = None
    exclude: Any = None

    # None means the host's default backend only
    file_systems: list[Any] | None = None

    strategy: StubStrategy = StubStrategy.PUBLIC_PATH
    stub_format: StubFormat = StubFormat.COMMONJS

    @field_validator("test", "include", "exclude", mode="before")
    @classmethod
    def _coerce_pattern(cls, value: Any) -> Any:
        if value is None:
            return None
        return as_pattern(value)

    @field_validator("file_systems", mode="before")
    @classmethod
    def _coerce_file_systems(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, (list, tuple)):
            value = [value]
        if not value:
            raise ConfigurationError("file_systems must not be empty")
        return [as_backend_target(item) for item in value]

    @property
    def backend_targets(self) -> list[BackendTarget]:
        return self.file_systems or [DefaultBackend()]


# =============================================================================
# Discovered modules
# =============================================================================


def _empty_source() -> str:
    return ""


class DiscoveredModule(BaseModel):
    """
    A module reported by the host build.

    ``assets`` maps generated filenames to host-specific descriptors, in
    the order the host produced them.
    """

    model_config = {"arbitrary_types_allowed": True}

    resource: str
    assets: dict[str, Any] = Field(default_factory=dict)
    raw_source: Callable[[], str] = _empty_source


# =============================================================================
# Per-pass records
# =============================================================================


class BuildWarning(BaseModel):
    """A non-fatal condition recorded against a pass."""

    kind: WarningKind
    resource: str
    message: str


@dataclass
class BuildError:
    """A failed render or backend write recorded against a pass."""

    resource: str
    path: str
    backend: str
    error: Exception


@dataclass(frozen=True)
class DestinationTarget:
    """Stub content and where it goes."""

    resource: str
    path: str
    content: str


@dataclass
class PendingEmission:
    """A module that passed the filter and awaits rendering."""

    module: DiscoveredModule
    destination: str


@dataclass
class BuildPass:
    """
    State owned by a single build pass.

    Created fresh when a pass starts and discarded after its writes
    settle. Never shared between passes.
    """

    default_backend: Backend
    public_path: str = ""
    build_id: str = field(default_factory=lambda: generate_id("build"))

    emitted_resources: set[str] = field(default_factory=set)
    pending: list[PendingEmission] = field(default_factory=list)
    targets: list[DestinationTarget] = field(default_factory=list)
    warnings: list[BuildWarning] = field(default_factory=list)
    errors: list[BuildError] = field(default_factory=list)

    def claim(self, resource: str) -> bool:
        """Mark a resource as scheduled. False if it already was."""
        if resource in self.emitted_resources:
            return False
        self.emitted_resources.add(resource)
        return True

    def warn(self, kind: WarningKind, resource: str, message: str) -> BuildWarning:
        warning = BuildWarning(kind=kind, resource=resource, message=message)
        self.warnings.append(warning)
        logger.warning(f"[{self.build_id}] {message}")
        return warning

    def record_error(self, resource: str, path: str, backend: str, error: Exception) -> BuildError:
        build_error = BuildError(resource=resource, path=path, backend=backend, error=error)
        self.errors.append(build_error)
        logger.error(f"[{self.build_id}] Failed to emit {path} ({backend}): {error}")
        return build_error


@dataclass
class PassResult:
    """Outcome of a build pass once every write has settled."""

    build_id: str
    written: list[tuple[str, str]] = field(default_factory=list)  # (backend, path)
    warnings: list[BuildWarning] = field(default_factory=list)
    errors: list[BuildError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Exception | None:
        return self.errors[0].error if self.errors else None
