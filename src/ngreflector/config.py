"""
Resolver configuration and settings file discovery.

Settings priority:
1. NGREFLECTOR_CONFIG environment variable
2. ./ngreflector.toml (project config)
3. ~/.config/ngreflector/config.toml (user config)

Settings file structure:
[reflector]
output_extension = ".template.dart"
record_components_as_injectables = true
record_directives_as_injectables = true
record_pipes_as_injectables = true
record_router_annotations_for_components = true
"""

import copy
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ngreflector.dependencies import DependencyReader, StaticDependencyReader
from ngreflector.exceptions import ConfigError
from ngreflector.linking import HasInput, IsLibrary

DEFAULT_OUTPUT_EXTENSION = ".template.dart"

DEFAULTS = {
    "reflector": {
        "output_extension": DEFAULT_OUTPUT_EXTENSION,
        "record_components_as_injectables": True,
        "record_directives_as_injectables": True,
        "record_pipes_as_injectables": True,
        "record_router_annotations_for_components": True,
    },
}


def _no_input(uri: str) -> bool:
    return False


def _no_library(uri: str) -> bool:
    return False


@dataclass(frozen=True)
class ResolverConfig:
    """
    Fixed configuration for one `ReflectableReader`.

    Attributes:
        has_input: Whether a URI is a file of the same build, i.e. will produce
            a generated file. May return an awaitable. Relative URIs are
            relative to the library being analyzed.
        is_library: Whether a URI is an already analyzed library.
        dependency_reader: Reads constructor/function dependencies.
        output_extension: Extension of generated files.
        record_components_as_injectables: Register a factory for `@Component`
            classes. This disables tree-shaking them.
        record_directives_as_injectables: Register a factory for `@Directive`
            classes.
        record_pipes_as_injectables: Register a factory for `@Pipe` classes.
        record_router_annotations_for_components: Register `@RouteConfig` of
            components for the legacy router, which reads it at runtime.
    """
    has_input: HasInput
    is_library: IsLibrary
    dependency_reader: DependencyReader = field(default_factory=StaticDependencyReader)
    output_extension: str = DEFAULT_OUTPUT_EXTENSION
    record_components_as_injectables: bool = True
    record_directives_as_injectables: bool = True
    record_pipes_as_injectables: bool = True
    record_router_annotations_for_components: bool = True

    def __post_init__(self):
        if not self.output_extension.startswith(".") or len(self.output_extension) < 2:
            raise ConfigError(
                f"output_extension must start with '.', got '{self.output_extension}'"
            )

    @classmethod
    def no_linking(cls, **options) -> "ResolverConfig":
        """A configuration that never links to other generated files."""
        return cls(has_input=_no_input, is_library=_no_library, **options)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Dict[str, Any]] = None,
        *,
        has_input: HasInput = _no_input,
        is_library: IsLibrary = _no_library,
        **overrides,
    ) -> "ResolverConfig":
        """
        Build a configuration from a settings dict (see `load_settings`).

        Keyword overrides win over the settings.
        """
        if settings is None:
            settings = load_settings()
        options = dict(settings.get("reflector", {}))
        options.update(overrides)
        return cls(has_input=has_input, is_library=is_library, **options)


def load_config() -> Optional[Dict[str, Any]]:
    """
    Load the raw settings file.

    Returns:
        Configuration dict or None if no config found
    """
    config_paths = []

    env_config = os.environ.get("NGREFLECTOR_CONFIG")
    if env_config:
        config_paths.append(Path(env_config))

    config_paths.append(Path("ngreflector.toml"))
    config_paths.append(Path.home() / ".config" / "ngreflector" / "config.toml")

    for path in config_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid settings file {path}: {e}") from e

    return None


def load_settings(raw: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge settings over DEFAULTS, validating keys and value types.

    Args:
        raw: Parsed settings; loaded with `load_config` when omitted.
    """
    if raw is None:
        raw = load_config() or {}
    settings = copy.deepcopy(DEFAULTS)
    for section, values in raw.items():
        if section not in DEFAULTS:
            raise ConfigError(f"Unknown settings section '{section}'")
        if not isinstance(values, dict):
            raise ConfigError(f"Settings section '{section}' must be a table")
        for key, value in values.items():
            if key not in DEFAULTS[section]:
                raise ConfigError(f"Unknown setting '{section}.{key}'")
            expected = type(DEFAULTS[section][key])
            if not isinstance(value, expected):
                raise ConfigError(
                    f"Setting '{section}.{key}' must be {expected.__name__}, got {type(value).__name__}"
                )
            settings[section][key] = value
    return settings


def get_config_value(key: str, default: Any = None) -> Any:
    """
    Get an effective setting by dot-notation key.

    Example:
        get_config_value("reflector.output_extension")
    """
    value: Any = load_settings()
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value
