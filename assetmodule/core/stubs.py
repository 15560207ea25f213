"""
Stub module rendering.

A stub module's only behavior is to evaluate to the asset's public URL
when loaded, so a server process can require the same module graph the
bundler processed and get identical asset paths.
"""

from __future__ import annotations

import json
import os

from assetmodule.core.models import (
    BuildPass,
    DiscoveredModule,
    StubFormat,
    StubStrategy,
    WarningKind,
)
from assetmodule.core.paths import to_url_path


_TEMPLATES = {
    StubFormat.COMMONJS: "module.exports = {literal};\n",
    StubFormat.ESM: "export default {literal};\n",
}


def resolve_asset_filename(
    module: DiscoveredModule,
    source_base: str,
    build_pass: BuildPass | None = None,
) -> str:
    """
    Pick the filename the host produced for a module.
    
    With no generated assets, the path relative to ``source_base`` is used.
    With several, the first one wins and an ambiguity warning is recorded.
    """
    filenames = list(module.assets)
    if not filenames:
        return to_url_path(os.path.relpath(module.resource, source_base))
    
    if len(filenames) > 1 and build_pass is not None:
        build_pass.warn(
            WarningKind.AMBIGUOUS_ASSET,
            module.resource,
            f"{module.resource} produced {len(filenames)} assets "
            f"({', '.join(filenames)}); using {filenames[0]}",
        )
    return filenames[0]


def render_literal(value: str, stub_format: StubFormat = StubFormat.COMMONJS) -> str:
    """Render a single export statement evaluating to ``value``."""
    return _TEMPLATES[stub_format].format(literal=json.dumps(value))


def render_stub(
    module: DiscoveredModule,
    source_base: str,
    public_path: str,
    strategy: StubStrategy = StubStrategy.PUBLIC_PATH,
    stub_format: StubFormat = StubFormat.COMMONJS,
    build_pass: BuildPass | None = None,
) -> str:
    """
    Produce the content of the stub module for ``module``.
    
    Args:
        module: The discovered module
        source_base: Base used when the module produced no asset filenames
        public_path: The build's public-path prefix, used as-is
        strategy: RAW passes the processed source through; PUBLIC_PATH
            exports ``public_path + filename``
        stub_format: Statement shape for PUBLIC_PATH stubs
        build_pass: Pass that receives any warnings
    
    Returns:
        The stub module source
    """
    if strategy == StubStrategy.RAW:
        return module.raw_source()
    
    filename = resolve_asset_filename(module, source_base, build_pass)
    return render_literal(public_path + filename, stub_format)
