from collections.abc import Mapping
from pydantic import BaseModel, BeforeValidator, ConfigDict
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union


def freeze(value: Any) -> Any:
    """
    Converts mappings into tuples of (key, value) pairs and other collections
    into tuples, recursively.
    """
    if isinstance(value, Mapping):
        return tuple((key, freeze(item)) for key, item in value.items())
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(freeze(item) for item in value)
    return value


def _lookup(pairs: Tuple[Tuple[str, Any], ...], name: str, default: Any = None) -> Any:
    for key, value in pairs:
        if key == name:
            return value
    return default


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


Arguments = Annotated[Tuple[Tuple[str, Any], ...], BeforeValidator(freeze)]


# Resolved library model

class AnnotationValue(_Frozen):
    """
    A constant annotation (metadata) value attached to an element.

    `type_name` is the runtime type of the constant and `library_uri` the
    library that declares that type.
    """
    type_name: str
    library_uri: str = ""
    # Constant field values as (name, value) pairs; nested collections are tuples.
    arguments: Arguments = ()

    def argument(self, name: str, default: Any = None) -> Any:
        return _lookup(self.arguments, name, default)

    @property
    def source(self) -> str:
        return f"{self.library_uri}#{self.type_name}"

    def revive(self) -> "Revivable":
        """Returns the information needed to re-create this constant in generated code."""
        return Revivable(source=self.source, arguments=self.arguments)


class Revivable(_Frozen):
    """
    A constant that can be re-created in generated code.

    Two revivables are the same registration when they come from the same
    `source`; the arguments are carried for the writer only.
    """
    source: str
    arguments: Arguments = ()

    def argument(self, name: str, default: Any = None) -> Any:
        return _lookup(self.arguments, name, default)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Revivable) and self.source == other.source

    def __hash__(self) -> int:
        return hash(self.source)


class ParameterElement(_Frozen):
    """A constructor or function parameter."""
    name: str
    type_name: Optional[str] = None
    kind: Literal["positional", "optional_positional", "named"] = "positional"
    metadata: Tuple[AnnotationValue, ...] = ()


class ConstructorElement(_Frozen):
    """A class constructor; the unnamed constructor has an empty `name`."""
    name: str = ""
    parameters: Tuple[ParameterElement, ...] = ()


class ClassElement(_Frozen):
    name: str
    metadata: Tuple[AnnotationValue, ...] = ()
    constructors: Tuple[ConstructorElement, ...] = ()
    is_abstract: bool = False

    @property
    def primary_constructor(self) -> Optional[ConstructorElement]:
        """
        The unnamed constructor of this class.

        A class declaring no constructors at all has an implicit one without
        parameters. Returns None when only named constructors exist.
        """
        if not self.constructors:
            return ConstructorElement()
        for constructor in self.constructors:
            if constructor.name == "":
                return constructor
        return None


class FunctionElement(_Frozen):
    """A top-level function."""
    name: str
    parameters: Tuple[ParameterElement, ...] = ()
    metadata: Tuple[AnnotationValue, ...] = ()


DirectiveKind = Literal["import", "export", "part", "part_of", "library"]


class Directive(_Frozen):
    """
    An import/export/part/library directive as written in the source file.

    `uri` is the raw string literal; it is None for directives that do not
    reference another file (`library foo;`, `part of foo;`).
    """
    kind: DirectiveKind
    uri: Optional[str] = None
    deferred: bool = False
    prefix: Optional[str] = None

    @property
    def is_uri_based(self) -> bool:
        return self.kind in ("import", "export", "part") and self.uri is not None


class ResolvedLibrary(_Frozen):
    """
    The resolved defining unit of one source file.

    Declarations and directives are kept in source order.
    """
    uri: str = ""
    classes: Tuple[ClassElement, ...] = ()
    functions: Tuple[FunctionElement, ...] = ()
    directives: Tuple[Directive, ...] = ()


# Dependency invocations

class DependencyElement(_Frozen):
    """One resolved dependency of a constructor or function."""
    token: str
    optional: bool = False
    self_: bool = False
    skip_self: bool = False
    host: bool = False


class DependencyInvocation(_Frozen):
    """
    Binds a constructor or function to the dependencies needed to invoke it.
    """
    bound: Union[ConstructorElement, FunctionElement]
    positional: Tuple[DependencyElement, ...] = ()
    # Named parameter dependencies as (parameter name, dependency) pairs.
    named: Annotated[Tuple[Tuple[str, DependencyElement], ...], BeforeValidator(freeze)] = ()

    def named_dependency(self, name: str) -> Optional[DependencyElement]:
        return _lookup(self.named, name)


# Resolver output

class ReflectableClass(_Frozen):
    """
    A class requiring registration in the generated `initReflector`.
    """
    name: str
    # Factory required to invoke the constructor of the class.
    factory: Optional[DependencyInvocation] = None
    # If set, this object should be registered as an annotation.
    register_annotation: Optional[Revivable] = None
    # Whether this class has a component view factory needing registration.
    register_component_factory: bool = False

    def __str__(self) -> str:
        return "ReflectableClass " + str({
            "factory": self.factory,
            "name": self.name,
            "registerAnnotation": self.register_annotation.source if self.register_annotation else None,
            "registerComponentFactory": self.register_component_factory,
        })


class ReflectableOutput(_Frozen):
    """
    Information needed to write one generated `.template.dart` file.
    """
    # What generated files need to be imported and linked to this file.
    urls_needing_init_reflector: Tuple[str, ...] = ()
    # What classes require registration in `initReflector`.
    register_classes: Tuple[ReflectableClass, ...] = ()
    # What factory functions require registration in `initReflector`.
    register_functions: Tuple[DependencyInvocation, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def __str__(self) -> str:
        return "ReflectableOutput " + str({
            "urlsNeedingInitReflector": list(self.urls_needing_init_reflector),
            "registerClasses": [str(c) for c in self.register_classes],
            "registerFunctions": [f.bound.name for f in self.register_functions],
        })
