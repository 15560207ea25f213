"""
Tests for destination path remapping and stub rendering.
"""

import json
import os

import pytest

from assetmodule.core.models import (
    BuildPass,
    DiscoveredModule,
    StubFormat,
    StubStrategy,
    WarningKind,
)
from assetmodule.core.paths import compute_destination, is_same_path
from assetmodule.core.stubs import render_literal, render_stub, resolve_asset_filename
from assetmodule.storage.memory import InMemoryFileSystem


def parse_commonjs(content):
    """Extract the exported value from a CommonJS stub."""
    prefix, suffix = "module.exports = ", ";\n"
    assert content.startswith(prefix)
    assert content.endswith(suffix)
    return json.loads(content[len(prefix):-len(suffix)])


@pytest.fixture
def build_pass():
    return BuildPass(default_backend=InMemoryFileSystem(), build_id="b1")


# =============================================================================
# compute_destination
# =============================================================================


class TestComputeDestination:
    def test_nested_resource(self):
        assert compute_destination(
            "/project/src/icons/x.png", "/project/src", "/project/build"
        ) == "/project/build/icons/x.png"

    def test_relative_bases(self):
        assert compute_destination("src/icons/x.png", "src", "build") == os.path.abspath(
            os.path.join("build", "icons", "x.png")
        )

    def test_resource_outside_source_base(self):
        # src/web → build/web maps src/favicons → build/favicons
        assert compute_destination(
            "/project/src/favicons/favicon.png", "/project/src/web", "/project/build/web"
        ) == "/project/build/favicons/favicon.png"

    def test_same_bases_collide(self):
        destination = compute_destination("/project/src/x.png", "/project/src", "/project/src")
        assert is_same_path("/project/src/x.png", destination)

    def test_is_same_path_normalizes(self):
        assert is_same_path("/project/src/../src/x.png", "/project/src/x.png")
        assert not is_same_path("/project/src/x.png", "/project/build/x.png")


# =============================================================================
# resolve_asset_filename
# =============================================================================


class TestResolveAssetFilename:
    def test_no_assets_falls_back_to_relative_path(self, build_pass):
        module = DiscoveredModule(resource="/project/src/icons/x.png")

        assert resolve_asset_filename(module, "/project/src", build_pass) == "icons/x.png"
        assert build_pass.warnings == []

    def test_single_asset(self, build_pass):
        module = DiscoveredModule(
            resource="/project/src/icons/x.png",
            assets={"x.3f2a1b.png": {"size": 120}},
        )

        assert resolve_asset_filename(module, "/project/src", build_pass) == "x.3f2a1b.png"
        assert build_pass.warnings == []

    def test_several_assets_first_wins(self, build_pass):
        module = DiscoveredModule(
            resource="/project/src/icons/x.png",
            assets={"x.first.png": {}, "x.second.png": {}},
        )

        assert resolve_asset_filename(module, "/project/src", build_pass) == "x.first.png"
        assert len(build_pass.warnings) == 1
        assert build_pass.warnings[0].kind == WarningKind.AMBIGUOUS_ASSET
        assert build_pass.warnings[0].resource == "/project/src/icons/x.png"


# =============================================================================
# render_stub
# =============================================================================


class TestRenderStub:
    def test_public_path_stub(self):
        module = DiscoveredModule(resource="/project/src/icon.png", assets={"icon.abc.png": {}})

        content = render_stub(module, "/project/src", "/static/")

        assert content == 'module.exports = "/static/icon.abc.png";\n'

    def test_esm_format(self):
        module = DiscoveredModule(resource="/project/src/icon.png", assets={"icon.abc.png": {}})

        content = render_stub(module, "/project/src", "https://cdn.example.com/", stub_format=StubFormat.ESM)

        assert content == 'export default "https://cdn.example.com/icon.abc.png";\n'

    def test_raw_passthrough(self):
        module = DiscoveredModule(
            resource="/project/src/icon.png",
            assets={"icon.abc.png": {}},
            raw_source=lambda: 'module.exports = __webpack_public_path__ + "icon.abc.png";',
        )

        content = render_stub(module, "/project/src", "/static/", strategy=StubStrategy.RAW)

        assert content == 'module.exports = __webpack_public_path__ + "icon.abc.png";'

    def test_ambiguous_warning_recorded_once(self, build_pass):
        module = DiscoveredModule(
            resource="/project/src/icon.png",
            assets={"a.png": {}, "b.png": {}},
        )

        content = render_stub(module, "/project/src", "/", build_pass=build_pass)

        assert parse_commonjs(content) == "/a.png"
        assert len(build_pass.warnings) == 1

    def test_quoting_round_trips(self):
        public_path = '/st"at\\ic/</script>é/'
        module = DiscoveredModule(resource="/project/src/we'ird \"name\".png")

        content = render_stub(module, "/project/src", public_path)

        assert parse_commonjs(content) == public_path + "we'ird \"name\".png"
        assert content.count("\n") == 1

    def test_render_literal_is_data_not_code(self):
        content = render_literal('"; process.exit(1); "')
        assert parse_commonjs(content) == '"; process.exit(1); "'
