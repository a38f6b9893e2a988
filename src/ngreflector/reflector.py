"""
Determines how to generate and link to `initReflector` in other files.

`initReflector` builds a graph of all generated code that mirrors the
user-authored code. Significant classes and factories are recorded into a
global map that can be used at runtime.
"""

from typing import List, Optional

from ngreflector.annotations import AnnotationKind, find_route_config
from ngreflector.config import ResolverConfig
from ngreflector.linking import LinkingAnalyzer
from ngreflector.logging_config import logger
from ngreflector.schemas import (
    ClassElement,
    DependencyInvocation,
    ReflectableClass,
    ReflectableOutput,
    ResolvedLibrary,
)


class ReflectableReader:
    """
    Reads which declarations of a library need registration and which
    generated files it needs to link to.
    """

    def __init__(self, config: ResolverConfig):
        self.config = config
        self.dependency_reader = config.dependency_reader
        self.linking = LinkingAnalyzer(
            has_input=config.has_input,
            is_library=config.is_library,
            output_extension=config.output_extension,
        )

    @classmethod
    def no_linking(cls, **options) -> "ReflectableReader":
        """
        A reader that always emits an empty `urls_needing_init_reflector`.

        Useful for tests that do not want to emulate a complete build.
        """
        return cls(ResolverConfig.no_linking(**options))

    async def resolve(self, library: ResolvedLibrary) -> ReflectableOutput:
        """Returns information needed to write the library's generated file."""
        register_classes: List[ReflectableClass] = []
        for element in library.classes:
            reflectable = self._resolve_class(element)
            if reflectable is not None:
                register_classes.append(reflectable)

        register_functions = [
            self.dependency_reader.parse_dependencies(function)
            for function in library.functions
            if AnnotationKind.INJECTABLE.is_on(function)
        ]

        urls = await self.linking.resolve_urls(library)
        logger.debug(
            f"Resolved {library.uri or '<library>'}: {len(register_classes)} classes, "
            f"{len(register_functions)} functions, {len(urls)} links"
        )
        return ReflectableOutput(
            urls_needing_init_reflector=tuple(urls),
            register_classes=tuple(register_classes),
            register_functions=tuple(register_functions),
        )

    def _resolve_class(self, element: ClassElement) -> Optional[ReflectableClass]:
        factory: Optional[DependencyInvocation] = None
        if self._should_record_factory(element):
            factory = self.dependency_reader.parse_dependencies(element)
        is_component = AnnotationKind.COMPONENT.is_on(element)
        if factory is None and not is_component:
            return None

        register_annotation = None
        if self.config.record_router_annotations_for_components and is_component:
            route_config = find_route_config(element)
            if route_config is not None:
                register_annotation = route_config.revive()

        return ReflectableClass(
            name=element.name,
            factory=factory,
            register_annotation=register_annotation,
            register_component_factory=is_component,
        )

    def _should_record_factory(self, element: ClassElement) -> bool:
        config = self.config
        return (
            AnnotationKind.INJECTABLE.is_on(element)
            or config.record_components_as_injectables and AnnotationKind.COMPONENT.is_on(element)
            or config.record_directives_as_injectables and AnnotationKind.DIRECTIVE.is_on(element)
            or config.record_pipes_as_injectables and AnnotationKind.PIPE.is_on(element)
        )
