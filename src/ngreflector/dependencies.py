"""
Reading constructor and function dependencies.

A dependency reader turns a class (its primary constructor) or a top-level
function into a `DependencyInvocation`. The resolver only depends on the
`DependencyReader` protocol, so tests and callers can substitute their own.
"""

from typing import Dict, List, Protocol, Union, overload

from ngreflector.annotations import ParameterAnnotation
from ngreflector.exceptions import DependencyReadError
from ngreflector.schemas import (
    ClassElement,
    DependencyElement,
    DependencyInvocation,
    FunctionElement,
    ParameterElement,
)


class DependencyReader(Protocol):
    @overload
    def parse_dependencies(self, element: ClassElement) -> DependencyInvocation: ...

    @overload
    def parse_dependencies(self, element: FunctionElement) -> DependencyInvocation: ...

    def parse_dependencies(
        self, element: Union[ClassElement, FunctionElement]
    ) -> DependencyInvocation: ...


class StaticDependencyReader:
    """
    Reads dependencies from parameter types and DI annotations.

    Token precedence for a parameter: `@Inject(token)`, then
    `@Attribute(name)`, then the declared type.
    """

    def parse_dependencies(
        self, element: Union[ClassElement, FunctionElement]
    ) -> DependencyInvocation:
        if isinstance(element, ClassElement):
            constructor = element.primary_constructor
            if constructor is None:
                raise DependencyReadError(
                    element.name, "no unnamed constructor to create the class with"
                )
            bound = constructor
            owner = element.name
        else:
            bound = element
            owner = element.name

        positional: List[DependencyElement] = []
        named: Dict[str, DependencyElement] = {}
        for parameter in bound.parameters:
            dependency = self._read_parameter(owner, parameter)
            if parameter.kind == "named":
                named[parameter.name] = dependency
            else:
                positional.append(dependency)
        return DependencyInvocation(
            bound=bound,
            positional=tuple(positional),
            named=named,
        )

    def _read_parameter(self, owner: str, parameter: ParameterElement) -> DependencyElement:
        return DependencyElement(
            token=self._token_of(owner, parameter),
            optional=ParameterAnnotation.OPTIONAL.is_on(parameter),
            self_=ParameterAnnotation.SELF.is_on(parameter),
            skip_self=ParameterAnnotation.SKIP_SELF.is_on(parameter),
            host=ParameterAnnotation.HOST.is_on(parameter),
        )

    def _token_of(self, owner: str, parameter: ParameterElement) -> str:
        inject = ParameterAnnotation.INJECT.first_annotation_of(parameter)
        if inject is not None:
            token = inject.argument("token")
            if token is None:
                raise DependencyReadError(
                    owner, f"@Inject on parameter '{parameter.name}' has no token"
                )
            return str(token)
        attribute = ParameterAnnotation.ATTRIBUTE.first_annotation_of(parameter)
        if attribute is not None:
            return f"@Attribute({attribute.argument('attributeName', parameter.name)})"
        if parameter.type_name and parameter.type_name != "dynamic":
            return parameter.type_name
        raise DependencyReadError(
            owner, f"parameter '{parameter.name}' has no type or @Inject token"
        )
