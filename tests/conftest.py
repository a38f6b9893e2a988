"""
Pytest configuration for the ngreflector test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Builders for resolved library models
- A recording build context for linking tests
"""

import os
from types import SimpleNamespace
from typing import Iterable

import pytest

from ngreflector.annotations import AnnotationKind
from ngreflector.logging_config import setup_logging
from ngreflector.schemas import (
    AnnotationValue,
    ClassElement,
    ConstructorElement,
    Directive,
    FunctionElement,
    ParameterElement,
    ResolvedLibrary,
)


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    os.environ.setdefault("NGREFLECTOR_MACHINE_MODE", "1")


@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)


# ============================================================================
# LIBRARY BUILDERS
# ============================================================================

def make_class(name: str, *kinds: AnnotationKind, parameters=(), metadata: Iterable[AnnotationValue] = ()) -> ClassElement:
    """A class annotated with `kinds`, whose unnamed constructor takes `parameters`."""
    return ClassElement(
        name=name,
        metadata=tuple(kind.annotate() for kind in kinds) + tuple(metadata),
        constructors=(ConstructorElement(parameters=tuple(parameters)),),
    )


def make_function(name: str, *kinds: AnnotationKind, parameters=()) -> FunctionElement:
    return FunctionElement(
        name=name,
        parameters=tuple(parameters),
        metadata=tuple(kind.annotate() for kind in kinds),
    )


def param(name: str, type_name=None, *annotations: AnnotationValue, kind="positional") -> ParameterElement:
    return ParameterElement(name=name, type_name=type_name, kind=kind, metadata=tuple(annotations))


def import_(uri: str, deferred: bool = False) -> Directive:
    return Directive(kind="import", uri=uri, deferred=deferred)


def library(classes=(), functions=(), directives=(), uri: str = "lib/app.dart") -> ResolvedLibrary:
    return ResolvedLibrary(
        uri=uri,
        classes=tuple(classes),
        functions=tuple(functions),
        directives=tuple(directives),
    )


@pytest.fixture
def builders():
    """Namespace of model builders: builders.make_class(...), builders.library(...)."""
    return SimpleNamespace(
        make_class=make_class,
        make_function=make_function,
        param=param,
        import_=import_,
        library=library,
    )


# ============================================================================
# BUILD COLLABORATORS
# ============================================================================

class RecordingBuild:
    """
    In-memory `has_input` / `is_library` pair that records every query.
    """

    def __init__(self, inputs=(), libraries=()):
        self.inputs = set(inputs)
        self.libraries = set(libraries)
        self.has_input_calls = []
        self.is_library_calls = []

    async def has_input(self, uri: str) -> bool:
        self.has_input_calls.append(uri)
        return uri in self.inputs

    def is_library(self, uri: str) -> bool:
        self.is_library_calls.append(uri)
        return uri in self.libraries


@pytest.fixture
def recording_build():
    """Factory: recording_build(inputs=..., libraries=...)."""
    return RecordingBuild
