"""
Annotation matching for framework metadata.

The set of annotation kinds that drive registration is closed: adding a kind
means adding a member here.
"""

from enum import Enum
from typing import Optional, Union

from ngreflector.schemas import (
    AnnotationValue,
    ClassElement,
    FunctionElement,
    ParameterElement,
)

METADATA_LIBRARY = "asset:angular/lib/src/core/metadata.dart"
DI_LIBRARY = "asset:angular/lib/src/core/di/decorators.dart"

# Type name of the legacy router's route configuration annotation.
ROUTE_CONFIG_TYPE_NAME = "RouteConfig"

Annotated = Union[ClassElement, FunctionElement, ParameterElement]


class _ExactAnnotation(Enum):
    def __init__(self, type_name: str, library_uri: str):
        self.type_name = type_name
        self.library_uri = library_uri

    def matches(self, annotation: AnnotationValue) -> bool:
        """Whether `annotation` is exactly this type (subtypes do not match)."""
        return (
            annotation.type_name == self.type_name
            and annotation.library_uri == self.library_uri
        )

    def first_annotation_of(self, element: Annotated) -> Optional[AnnotationValue]:
        for annotation in element.metadata:
            if self.matches(annotation):
                return annotation
        return None

    def is_on(self, element: Annotated) -> bool:
        return self.first_annotation_of(element) is not None

    def annotate(self, **arguments) -> AnnotationValue:
        """Builds an instance of this annotation."""
        return AnnotationValue(
            type_name=self.type_name,
            library_uri=self.library_uri,
            arguments=arguments,
        )


class AnnotationKind(_ExactAnnotation):
    """Annotations that make a declaration a candidate for registration."""
    INJECTABLE = ("Injectable", DI_LIBRARY)
    COMPONENT = ("Component", METADATA_LIBRARY)
    DIRECTIVE = ("Directive", METADATA_LIBRARY)
    PIPE = ("Pipe", METADATA_LIBRARY)


class ParameterAnnotation(_ExactAnnotation):
    """Annotations that change how a single dependency is resolved."""
    INJECT = ("Inject", DI_LIBRARY)
    OPTIONAL = ("Optional", DI_LIBRARY)
    SELF = ("Self", DI_LIBRARY)
    SKIP_SELF = ("SkipSelf", DI_LIBRARY)
    HOST = ("Host", DI_LIBRARY)
    ATTRIBUTE = ("Attribute", METADATA_LIBRARY)


def find_route_config(element: ClassElement) -> Optional[AnnotationValue]:
    """
    Returns the first `RouteConfig` annotation on `element`, in metadata order.

    Matched by type name only; the declaring library is not checked.
    """
    for annotation in element.metadata:
        if annotation.type_name == ROUTE_CONFIG_TYPE_NAME:
            return annotation
    return None
