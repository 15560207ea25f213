"""
Path patterns.

A pattern decides whether a resource path is selected by one of the
``test`` / ``include`` / ``exclude`` options. Raw option values (strings,
compiled regexes, callables, lists) are converted into one of the
variants below by ``as_pattern`` and evaluated with ``matches``.

Variants:
- PrefixPattern: literal prefix anchored at the start of the path
- RegexPattern: regular expression searched anywhere in the path
- PredicatePattern: callable returning a bool
- AnyOfPattern: ordered list of patterns, OR-combined
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from assetmodule.core.errors import UnsupportedPatternError


@dataclass(frozen=True)
class PrefixPattern:
    """Matches paths that start with ``prefix``, taken literally."""
    
    prefix: str
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)
    
    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile("^" + re.escape(self.prefix)))


@dataclass(frozen=True)
class RegexPattern:
    """Matches paths where ``regex`` is found anywhere."""
    
    regex: re.Pattern


@dataclass(frozen=True)
class PredicatePattern:
    predicate: Callable[[str], bool]


@dataclass(frozen=True)
class AnyOfPattern:
    """Matches if any of ``patterns`` matches, checked in order."""
    
    patterns: tuple[Pattern, ...] = ()


Pattern = Union[PrefixPattern, RegexPattern, PredicatePattern, AnyOfPattern]


def as_pattern(value: Any) -> Pattern:
    """
    Convert a raw option value into a pattern.
    
    Args:
        value: A string (prefix), compiled regex, callable, list/tuple of
            any of these, or an existing pattern
    
    Returns:
        The corresponding pattern variant
    
    Raises:
        UnsupportedPatternError: If the value has any other shape
    """
    if isinstance(value, (PrefixPattern, RegexPattern, PredicatePattern, AnyOfPattern)):
        return value
    if isinstance(value, re.Pattern):
        return RegexPattern(value)
    if isinstance(value, str):
        return PrefixPattern(value)
    if isinstance(value, (list, tuple)):
        return AnyOfPattern(tuple(as_pattern(item) for item in value))
    if callable(value):
        return PredicatePattern(value)
    raise UnsupportedPatternError(value)


def matches(pattern: Pattern, path: str) -> bool:
    """Check whether ``pattern`` selects ``path``."""
    if isinstance(pattern, AnyOfPattern):
        return any(matches(sub, path) for sub in pattern.patterns)
    if isinstance(pattern, RegexPattern):
        return pattern.regex.search(path) is not None
    if isinstance(pattern, PrefixPattern):
        return pattern._compiled.search(path) is not None
    if isinstance(pattern, PredicatePattern):
        return bool(pattern.predicate(path))
    raise UnsupportedPatternError(pattern)
