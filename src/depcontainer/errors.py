"""Exceptions raised by the registry.

Every failure indicates a wiring defect in the calling code rather than a
transient condition, so none of them is retried.
"""

from typing import Optional

__all__ = [
    "DependencyError",
    "NotAComponent",
    "NullComponent",
    "TypeMismatch",
    "DuplicateComponent",
    "CyclicDependency",
    "NoConstructor",
    "DependencyResolutionFailed",
    "ConstructionFailed",
    "PostConstructionFailed",
]


def describe(component_type: type, qualifier: Optional[str] = None) -> str:
    name = getattr(component_type, "__qualname__", repr(component_type))
    if qualifier is None:
        return name
    return f"{name}['{qualifier}']"


class DependencyError(Exception):
    """Raised when a component's dependency cannot be resolved or is misannotated."""

    def __init__(
        self,
        message: str,
        component_type: Optional[type] = None,
        qualifier: Optional[str] = None,
    ):
        super().__init__(message)
        self.component_type = component_type
        self.qualifier = qualifier

    @property
    def cause(self) -> Optional[BaseException]:
        return self.__cause__


class NotAComponent(DependencyError):
    def __init__(self, component_type: type):
        super().__init__(
            f"{describe(component_type)} is not decorated with @component",
            component_type,
        )


class NullComponent(DependencyError):
    def __init__(self, component_type: Optional[type], qualifier: Optional[str] = None):
        target = describe(component_type, qualifier) if component_type else "component"
        super().__init__(f"Cannot register None as {target}", component_type, qualifier)


class TypeMismatch(DependencyError):
    def __init__(self, component_type: type, qualifier: Optional[str], value: object):
        super().__init__(
            f"Component {describe(component_type, qualifier)} must be an instance "
            f"of {describe(component_type)}, got {type(value).__qualname__}",
            component_type,
            qualifier,
        )


class DuplicateComponent(DependencyError):
    def __init__(self, component_type: type, qualifier: Optional[str]):
        super().__init__(
            f"Registry already contains {describe(component_type)} "
            f"with qualifier {qualifier!r}",
            component_type,
            qualifier,
        )


class CyclicDependency(DependencyError):
    """Raised when resolution re-enters a component that is still being built.

    Attributes:
        path: The keys under construction when the cycle was detected, ending
            with the re-entered key.
    """

    def __init__(
        self,
        component_type: type,
        qualifier: Optional[str],
        path: list[tuple[type, Optional[str]]],
    ):
        chain = " -> ".join(describe(t, q) for t, q in path)
        super().__init__(
            f"Cyclic dependency detected: {describe(component_type, qualifier)} "
            f"is currently being created ({chain})",
            component_type,
            qualifier,
        )
        self.path = path


class NoConstructor(DependencyError):
    def __init__(self, component_type: type):
        super().__init__(
            f"No public constructors in {describe(component_type)}", component_type
        )


class DependencyResolutionFailed(DependencyError):
    def __init__(
        self, component_type: type, qualifier: Optional[str], parameter_name: str
    ):
        super().__init__(
            f"Unable to resolve dependency <{parameter_name}> "
            f"of {describe(component_type, qualifier)}",
            component_type,
            qualifier,
        )
        self.parameter_name = parameter_name


class ConstructionFailed(DependencyError):
    def __init__(self, component_type: type, qualifier: Optional[str], constructor: str):
        super().__init__(
            f"Failed to call {constructor} for {describe(component_type, qualifier)}",
            component_type,
            qualifier,
        )
        self.constructor = constructor


class PostConstructionFailed(DependencyError):
    def __init__(self, component_type: type, qualifier: Optional[str], hook_name: str):
        super().__init__(
            f"Failed to call {hook_name} post-construction hook "
            f"on {describe(component_type, qualifier)} instance",
            component_type,
            qualifier,
        )
        self.hook_name = hook_name
