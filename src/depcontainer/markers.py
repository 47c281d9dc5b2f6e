"""Declarative markers read by the registry, and the queries that read them.

The markers are plain attributes set by decorators:

    @component
    class Mailer:
        @autowired
        def __init__(self, transport: Annotated[Transport, "smtp"], name: str):
            ...

        @post_construct
        def connect(self):
            ...
"""

import inspect
import types
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Callable,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

__all__ = [
    "component",
    "autowired",
    "post_construct",
    "is_component",
    "is_autowired",
    "is_post_construct",
    "Constructor",
    "Dependency",
    "constructors_of",
    "dependencies_of",
    "qualifier_of",
    "post_construct_hooks",
]

_COMPONENT = "__component__"
_AUTOWIRED = "__autowired__"
_POST_CONSTRUCT = "__post_construct__"

_UNION_TYPES = (Union, types.UnionType)


def _set_marker(target: Any, marker: str) -> Any:
    # classmethod/staticmethod wrappers carry the marker on the wrapped function
    func = getattr(target, "__func__", target)
    setattr(func, marker, True)
    return target


def component(cls: type) -> type:
    """Mark a class as a component managed by the registry."""
    if not isinstance(cls, type):
        raise TypeError(f"@component can only decorate classes, not {cls!r}")
    return _set_marker(cls, _COMPONENT)


def autowired(target: Callable) -> Callable:
    """Designate the constructor the registry uses for injection.

    Applies to ``__init__`` or to a public classmethod/staticmethod factory.
    """
    return _set_marker(target, _AUTOWIRED)


def post_construct(target: Callable) -> Callable:
    """Mark a method to be called with no arguments once construction completes."""
    return _set_marker(target, _POST_CONSTRUCT)


def is_component(cls: Any) -> bool:
    # Read from the class's own namespace: subclasses must be marked themselves.
    return isinstance(cls, type) and vars(cls).get(_COMPONENT, False) is True


def is_autowired(func: Any) -> bool:
    return getattr(getattr(func, "__func__", func), _AUTOWIRED, False) is True


def is_post_construct(func: Any) -> bool:
    return getattr(getattr(func, "__func__", func), _POST_CONSTRUCT, False) is True


@dataclass(frozen=True)
class Constructor:
    """A way of building instances of a component type.

    Attributes:
        name: Human readable name, used in error messages.
        func: The callable invoked with the resolved arguments.
        annotated: The function whose annotations describe the parameters.
        designated: Whether the constructor carries the ``@autowired`` marker.
    """

    name: str
    func: Callable
    annotated: Callable
    designated: bool


@dataclass(frozen=True)
class Dependency:
    """Represents a parameter of a constructor.

    Attributes:
        name: The parameter name in the constructor signature.
        type: The declared type of the parameter, without ``Annotated`` metadata.
        qualifier: The qualifier attached with ``Annotated[T, "qualifier"]``, if any.
        default: The parameter's default value, or ``inspect.Parameter.empty``.
        positional_only: Whether the argument must be passed positionally.
    """

    name: str
    type: Any
    qualifier: Optional[str]
    default: Any = inspect.Parameter.empty
    positional_only: bool = False

    @property
    def is_annotated(self) -> bool:
        return self.type is not inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def binds_qualifier(self) -> bool:
        """Whether the parameter receives the qualifier of the component being built."""
        if self.type is str:
            return True
        if get_origin(self.type) in _UNION_TYPES:
            return set(get_args(self.type)) == {str, type(None)}
        return False


def constructors_of(cls: type) -> list[Constructor]:
    """List the constructors of a class in declaration order.

    The class itself always comes first, followed by every public classmethod
    or staticmethod marked ``@autowired`` declared directly on the class.
    """
    result = []

    initializer = cls.__init__
    if initializer is object.__init__ and cls.__new__ is not object.__new__:
        initializer = cls.__new__
    result.append(
        Constructor(
            f"{cls.__qualname__}.{initializer.__name__}",
            cls,
            initializer,
            is_autowired(initializer),
        )
    )

    for name, attribute in vars(cls).items():
        if name.startswith("_"):
            continue
        if isinstance(attribute, (classmethod, staticmethod)) and is_autowired(attribute):
            result.append(
                Constructor(
                    f"{cls.__qualname__}.{name}",
                    getattr(cls, name),
                    attribute.__func__,
                    True,
                )
            )

    return result


def qualifier_of(annotation: Any) -> tuple[Any, Optional[str]]:
    """Split an annotation into its base type and the qualifier attached to it."""
    if get_origin(annotation) is Annotated:
        base_type, *metadata = get_args(annotation)
        return base_type, next((m for m in metadata if isinstance(m, str)), None)
    return annotation, None


def dependencies_of(constructor: Constructor) -> list[Dependency]:
    """Describe the parameters of a constructor in declaration order.

    Variadic parameters are skipped: the registry never fills them. A
    constructor whose signature cannot be introspected, such as the
    initializer of a builtin base class, is called without arguments.

    Raises:
        NameError: If a string annotation cannot be evaluated.
    """
    try:
        sig = inspect.signature(constructor.func)
    except (TypeError, ValueError):
        return []
    if not sig.parameters:
        return []

    hints = get_type_hints(constructor.annotated, include_extras=True)
    result = []

    for name, param in sig.parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        base_type, qualifier = qualifier_of(hints.get(name, inspect.Parameter.empty))
        result.append(
            Dependency(
                name,
                base_type,
                qualifier,
                param.default,
                param.kind is param.POSITIONAL_ONLY,
            )
        )

    return result


def post_construct_hooks(cls: type) -> list[str]:
    """Names of the public methods of a class marked ``@post_construct``.

    Hooks declared on base classes come first, then those of subclasses, each
    in declaration order. An override without the marker is not a hook.
    """
    names: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name in vars(klass):
            if not name.startswith("_"):
                names.setdefault(name)

    return [name for name in names if is_post_construct(getattr(cls, name, None))]
