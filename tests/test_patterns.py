"""
Tests for path patterns and the eligibility filter.
"""

import re

import pytest

from assetmodule.core.errors import UnsupportedPatternError
from assetmodule.core.eligibility import should_emit
from assetmodule.core.models import AssetModuleOptions
from assetmodule.core.patterns import (
    AnyOfPattern,
    PredicatePattern,
    PrefixPattern,
    RegexPattern,
    as_pattern,
    matches,
)


def make_options(**kwargs):
    return AssetModuleOptions(source_base="/project/src", destination_base="/project/build", **kwargs)


# =============================================================================
# as_pattern
# =============================================================================


class TestAsPattern:
    def test_variants(self):
        assert isinstance(as_pattern("src/"), PrefixPattern)
        assert isinstance(as_pattern(re.compile(r"\.png$")), RegexPattern)
        assert isinstance(as_pattern(lambda path: True), PredicatePattern)

        combined = as_pattern(["a", re.compile("b")])
        assert isinstance(combined, AnyOfPattern)
        assert isinstance(combined.patterns[0], PrefixPattern)
        assert isinstance(combined.patterns[1], RegexPattern)

    def test_existing_pattern_returned_unchanged(self):
        pattern = PrefixPattern("src/")
        assert as_pattern(pattern) is pattern

    @pytest.mark.parametrize("value", [42, 3.5, {"regex": "x"}, None, b"src/"])
    def test_unsupported_shapes(self, value):
        with pytest.raises(UnsupportedPatternError) as exc_info:
            as_pattern(value)
        assert exc_info.value.pattern == value

    def test_unsupported_nested_in_list(self):
        with pytest.raises(UnsupportedPatternError):
            as_pattern(["ok", 7])


# =============================================================================
# matches
# =============================================================================


class TestMatches:
    def test_string_is_anchored_prefix(self):
        pattern = as_pattern("src/a")

        assert matches(pattern, "src/abc.png")
        assert matches(pattern, "src/a")
        assert not matches(pattern, "lib/src/abc.png")

    def test_string_metacharacters_are_literal(self):
        assert not matches(as_pattern("a.png"), "aXpng")
        assert matches(as_pattern("a.png"), "a.png")
        assert matches(as_pattern("(x)[1]+"), "(x)[1]+/icon.png")
        assert not matches(as_pattern("^src"), "src/icon.png")

    def test_regex_searches_anywhere(self):
        assert matches(as_pattern(re.compile(r"\.png$")), "/project/src/icon.png")
        assert matches(as_pattern(re.compile("icons")), "/project/src/icons/x.png")
        assert not matches(as_pattern(re.compile(r"^icons")), "/project/src/icons/x.png")

    def test_predicate(self):
        calls = []

        def is_font(path):
            calls.append(path)
            return path.endswith(".woff2")

        assert matches(as_pattern(is_font), "/a/b.woff2")
        assert not matches(as_pattern(is_font), "/a/b.png")
        assert calls == ["/a/b.woff2", "/a/b.png"]

    def test_predicate_result_coerced_to_bool(self):
        assert matches(as_pattern(lambda path: "yes"), "x") is True
        assert matches(as_pattern(lambda path: 0), "x") is False

    def test_list_is_or(self):
        assert matches(as_pattern(["a.png", "b.png"]), "b.png")
        assert not matches(as_pattern(["a.png", "b.png"]), "c.png")
        assert not matches(as_pattern([]), "a.png")

    def test_list_short_circuits_in_order(self):
        seen = []

        def record(name, result):
            def predicate(path):
                seen.append(name)
                return result
            return predicate

        pattern = as_pattern([record("first", False), record("second", True), record("third", True)])

        assert matches(pattern, "x")
        assert seen == ["first", "second"]

    def test_nested_lists(self):
        pattern = as_pattern(["a", ["b", re.compile("c$")]])
        assert matches(pattern, "xyzc")
        assert matches(pattern, "b/1")
        assert not matches(pattern, "zzz")

    def test_unknown_variant(self):
        marker = object()
        with pytest.raises(UnsupportedPatternError) as exc_info:
            matches(marker, "x")
        assert exc_info.value.pattern is marker


# =============================================================================
# should_emit
# =============================================================================


class TestShouldEmit:
    def test_no_options_accepts(self):
        assert should_emit("/project/src/icon.png", make_options())

    def test_exclude_only(self):
        options = make_options(exclude=re.compile(r"\.png$"))

        assert not should_emit("/project/src/icon.png", options)
        assert should_emit("/project/src/site.css", options)

    def test_include_only(self):
        options = make_options(include="/project/src/images/")

        assert should_emit("/project/src/images/icon.png", options)
        assert not should_emit("/project/src/styles/site.css", options)

    def test_test_only(self):
        options = make_options(test=re.compile(r"\.(png|svg)$"))

        assert should_emit("/project/src/a.svg", options)
        assert not should_emit("/project/src/a.js", options)

    def test_all_three(self):
        options = make_options(
            test=re.compile(r"\.png$"),
            include="/project/src/",
            exclude=["/project/src/vendor/", re.compile(r"\.inline\.")],
        )

        assert should_emit("/project/src/icon.png", options)
        assert not should_emit("/project/lib/icon.png", options)  # include
        assert not should_emit("/project/src/icon.jpg", options)  # test
        assert not should_emit("/project/src/vendor/icon.png", options)  # exclude
        assert not should_emit("/project/src/logo.inline.png", options)  # exclude

    def test_exclude_rejects_only_on_match(self):
        options = make_options(exclude="/project/src/vendor/")
        assert should_emit("/project/src/icon.png", options)

    def test_deterministic(self):
        options = make_options(test=re.compile(r"\.png$"), exclude=["/x/"])
        path = "/project/src/icon.png"

        assert should_emit(path, options) == should_emit(path, options)

    def test_test_rejection_short_circuits(self):
        seen = []

        def include(path):
            seen.append(path)
            return True

        options = make_options(test=lambda path: False, include=include)

        assert not should_emit("/project/src/icon.png", options)
        assert seen == []

    def test_unsupported_option_value(self):
        with pytest.raises(UnsupportedPatternError):
            make_options(include=42)
