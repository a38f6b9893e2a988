"""
ngreflector: build-time resolution of reflective registration.

Decides which classes and functions of a library need an `initReflector`
registration and which generated files of other libraries it links to.
"""

from .reflector import ReflectableReader
from .linking import LinkingAnalyzer, with_output_extension
from .config import ResolverConfig, load_settings, get_config_value
from .dependencies import DependencyReader, StaticDependencyReader
from .annotations import AnnotationKind, ParameterAnnotation, find_route_config
from .build import BuildContext
from .exceptions import ReflectorError, DependencyReadError, MalformedUriError, ConfigError
from .schemas import (
    AnnotationValue,
    Revivable,
    ParameterElement,
    ConstructorElement,
    ClassElement,
    FunctionElement,
    Directive,
    ResolvedLibrary,
    DependencyElement,
    DependencyInvocation,
    ReflectableClass,
    ReflectableOutput,
)

__all__ = [
    "ReflectableReader",
    "LinkingAnalyzer",
    "with_output_extension",
    "ResolverConfig",
    "load_settings",
    "get_config_value",
    "DependencyReader",
    "StaticDependencyReader",
    "AnnotationKind",
    "ParameterAnnotation",
    "find_route_config",
    "BuildContext",
    "ReflectorError",
    "DependencyReadError",
    "MalformedUriError",
    "ConfigError",
    "AnnotationValue",
    "Revivable",
    "ParameterElement",
    "ConstructorElement",
    "ClassElement",
    "FunctionElement",
    "Directive",
    "ResolvedLibrary",
    "DependencyElement",
    "DependencyInvocation",
    "ReflectableClass",
    "ReflectableOutput",
]
