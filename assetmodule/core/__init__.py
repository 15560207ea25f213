"""
Core module - data models and the pure parts of emission.

This module contains:
- models: Options, discovered modules, per-pass state and results
- patterns: Path patterns and matching
- eligibility: The test/include/exclude filter
- paths: Destination path remapping
- stubs: Stub module rendering
- events: Event bus for the build lifecycle
- errors: Exception hierarchy
"""

from assetmodule.core.errors import (
    AssetModuleError,
    ConfigurationError,
    EmissionError,
    UnsupportedPatternError,
)

from assetmodule.core.patterns import (
    AnyOfPattern,
    Pattern,
    PredicatePattern,
    PrefixPattern,
    RegexPattern,
    as_pattern,
    matches,
)

from assetmodule.core.models import (
    AssetModuleOptions,
    BackendTarget,
    BuildError,
    BuildPass,
    BuildWarning,
    CustomBackend,
    DefaultBackend,
    DestinationTarget,
    DiscoveredModule,
    PassResult,
    StubFormat,
    StubStrategy,
    WarningKind,
)

from assetmodule.core.eligibility import should_emit
from assetmodule.core.paths import compute_destination
from assetmodule.core.stubs import render_stub

from assetmodule.core.events import (
    Event,
    EventBus,
    build_after_emit,
    build_started,
    module_succeeded,
)

__all__ = [
    # Errors
    "AssetModuleError",
    "ConfigurationError",
    "EmissionError",
    "UnsupportedPatternError",
    # Patterns
    "AnyOfPattern",
    "Pattern",
    "PredicatePattern",
    "PrefixPattern",
    "RegexPattern",
    "as_pattern",
    "matches",
    # Models
    "AssetModuleOptions",
    "BackendTarget",
    "BuildError",
    "BuildPass",
    "BuildWarning",
    "CustomBackend",
    "DefaultBackend",
    "DestinationTarget",
    "DiscoveredModule",
    "PassResult",
    "StubFormat",
    "StubStrategy",
    "WarningKind",
    # Operations
    "should_emit",
    "compute_destination",
    "render_stub",
    # Events
    "Event",
    "EventBus",
    "build_after_emit",
    "build_started",
    "module_succeeded",
]
