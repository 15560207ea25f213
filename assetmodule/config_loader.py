"""
Options loader.

Reads emitter options from a YAML file. Base directories and local file
system roots are resolved relative to the file's directory. String
patterns are literal prefixes of the absolute resource path and are not
resolved.

Example file:

    source_base: src/web
    destination_base: build/web
    test: {regex: '\\.(png|jpe?g|svg|css)$'}
    exclude:
      - /srv/app/src/web/vendor/
      - {regex: '\\.inline\\.'}
    file_systems:
      - default
      - local: ../server/build
    stub_format: commonjs
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from assetmodule.config import Settings, get_settings
from assetmodule.core.errors import ConfigurationError, UnsupportedPatternError
from assetmodule.core.models import AssetModuleOptions, DefaultBackend
from assetmodule.core.patterns import AnyOfPattern, Pattern, PrefixPattern, RegexPattern
from assetmodule.storage.local import LocalFileSystem


class ConfigLoader:
    """
    Builds AssetModuleOptions from YAML.
    
    Patterns in YAML are strings (prefix match), ``{regex: ...}`` mappings
    or lists of either. Predicate patterns can only be given in code.
    """
    
    def __init__(self, base_dir: Path | str | None = None):
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    
    def load(self, path: Path | str) -> AssetModuleOptions:
        """Load options from a YAML file."""
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        
        return ConfigLoader(path.parent).from_dict(data or {})
    
    def from_dict(self, data: dict[str, Any]) -> AssetModuleOptions:
        """Build options from an already parsed mapping."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping of options, got {type(data).__name__}")
        
        missing = [key for key in ("source_base", "destination_base") if not data.get(key)]
        if missing:
            raise ConfigurationError(f"Missing required option(s): {', '.join(missing)}")
        
        options: dict[str, Any] = {
            "source_base": self._path(data["source_base"]),
            "destination_base": self._path(data["destination_base"]),
        }
        for key in ("test", "include", "exclude"):
            if data.get(key) is not None:
                options[key] = self.parse_pattern(data[key])
        if data.get("file_systems") is not None:
            options["file_systems"] = self.parse_file_systems(data["file_systems"])
        for key in ("strategy", "stub_format"):
            if data.get(key) is not None:
                options[key] = data[key]
        
        try:
            return AssetModuleOptions(**options)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
    
    def parse_pattern(self, value: Any) -> Pattern:
        """Convert a YAML pattern value into a pattern."""
        if isinstance(value, str):
            return PrefixPattern(value)
        if isinstance(value, list):
            return AnyOfPattern(tuple(self.parse_pattern(item) for item in value))
        if isinstance(value, dict) and set(value) == {"regex"}:
            try:
                return RegexPattern(re.compile(value["regex"]))
            except (re.error, TypeError) as exc:
                raise ConfigurationError(f"Invalid regex {value['regex']!r}: {exc}") from exc
        raise UnsupportedPatternError(value)
    
    def parse_file_systems(self, value: Any) -> list[Any]:
        if not isinstance(value, list):
            value = [value]
        
        targets: list[Any] = []
        for entry in value:
            if entry == "default":
                targets.append(DefaultBackend())
            elif isinstance(entry, dict) and set(entry) == {"local"}:
                root = self._path(entry["local"])
                targets.append(LocalFileSystem(root, name=f"local:{root}"))
            else:
                raise ConfigurationError(f"Unsupported file system entry: {entry!r}")
        return targets
    
    def _path(self, value: Any) -> str:
        path = Path(str(value))
        if not path.is_absolute():
            path = self.base_dir / path
        return str(path.resolve())


def load_options(path: Path | str) -> AssetModuleOptions:
    """Convenience function to load options from a YAML file."""
    return ConfigLoader().load(path)


def options_from_settings(settings: Settings | None = None) -> AssetModuleOptions:
    """Build options from environment settings alone (no patterns)."""
    settings = settings or get_settings()
    return AssetModuleOptions(
        source_base=settings.source_base,
        destination_base=settings.destination_base,
        strategy=settings.stub_strategy,
        stub_format=settings.stub_format,
    )
