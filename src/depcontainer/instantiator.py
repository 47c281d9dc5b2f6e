"""Construction of component instances with injected dependencies."""

import logging
from typing import Any, Callable, Optional

from depcontainer.errors import (
    ConstructionFailed,
    CyclicDependency,
    DependencyError,
    DependencyResolutionFailed,
    NoConstructor,
    NullComponent,
    PostConstructionFailed,
    TypeMismatch,
    describe,
)
from depcontainer.markers import (
    Constructor,
    Dependency,
    constructors_of,
    dependencies_of,
    is_component,
    post_construct_hooks,
)

__all__ = ["Resolve", "ComponentInstantiator", "select_constructor"]

logger = logging.getLogger(__name__)

Resolve = Callable[[type, Optional[str]], Any]


def select_constructor(component_type: type) -> Constructor:
    """Pick the constructor used to build a component.

    The single constructor marked ``@autowired`` wins; without one, or when
    several are marked, the first declared constructor is used.

    Raises:
        NoConstructor: If the type exposes no constructor at all.
    """
    constructors = constructors_of(component_type)
    if not constructors:
        raise NoConstructor(component_type)

    designated = [c for c in constructors if c.designated]
    if len(designated) == 1:
        return designated[0]
    if designated:
        logger.warning(
            "Several constructors of %s are marked @autowired (%s), using %s",
            describe(component_type),
            ", ".join(c.name for c in designated),
            constructors[0].name,
        )
    return constructors[0]


class ComponentInstantiator:
    """Build fully initialised component instances.

    Each constructor parameter is obtained through ``resolve``, which is
    expected to be the owning registry's ``get``, so dependencies are shared
    and cached like any other component.
    """

    def __init__(self, resolve: Resolve):
        self._resolve = resolve

    def build(self, component_type: type, qualifier: Optional[str]) -> Any:
        """Construct an instance of ``component_type`` and run its hooks.

        Args:
            component_type: The component class to instantiate.
            qualifier: The qualifier the instance is being built for; bound to
                constructor parameters annotated as ``str``.

        Returns:
            The new instance, with every ``@post_construct`` hook applied.

        Raises:
            NoConstructor: If the type has no usable constructor.
            DependencyResolutionFailed: If a parameter cannot be resolved.
            CyclicDependency: If a parameter depends back on a component under
                construction.
            ConstructionFailed: If the constructor raises.
            PostConstructionFailed: If a hook raises.
        """
        constructor = select_constructor(component_type)
        args, kwargs = self._arguments_for(component_type, qualifier, constructor)

        logger.debug("Calling %s for %s", constructor.name, describe(component_type, qualifier))
        try:
            instance = constructor.func(*args, **kwargs)
        except Exception as e:
            raise ConstructionFailed(component_type, qualifier, constructor.name) from e

        if instance is None:
            raise NullComponent(component_type, qualifier)
        if not isinstance(instance, component_type):
            raise TypeMismatch(component_type, qualifier, instance)

        self._run_hooks(component_type, qualifier, instance)
        return instance

    def _arguments_for(
        self, component_type: type, qualifier: Optional[str], constructor: Constructor
    ) -> tuple[list[Any], dict[str, Any]]:
        try:
            dependencies = dependencies_of(constructor)
        except NameError as e:
            raise DependencyResolutionFailed(
                component_type, qualifier, constructor.name
            ) from e

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dependency in dependencies:
            value = self._argument_for(component_type, qualifier, dependency)
            if dependency.positional_only:
                args.append(value)
            else:
                kwargs[dependency.name] = value

        return args, kwargs

    def _argument_for(
        self, component_type: type, qualifier: Optional[str], dependency: Dependency
    ) -> Any:
        if dependency.binds_qualifier:
            if qualifier is None and dependency.has_default:
                return dependency.default
            return qualifier

        if dependency.has_default and not is_component(dependency.type):
            return dependency.default

        try:
            if not dependency.is_annotated:
                raise DependencyError(f"Dependency <{dependency.name}> is not annotated")
            return self._resolve(dependency.type, dependency.qualifier)
        except CyclicDependency:
            raise
        except DependencyError as e:
            raise DependencyResolutionFailed(
                component_type, qualifier, dependency.name
            ) from e

    @staticmethod
    def _run_hooks(component_type: type, qualifier: Optional[str], instance: Any):
        for hook_name in post_construct_hooks(component_type):
            logger.debug(
                "Running post-construction hook %s on %s",
                hook_name,
                describe(component_type, qualifier),
            )
            try:
                getattr(instance, hook_name)()
            except Exception as e:
                raise PostConstructionFailed(component_type, qualifier, hook_name) from e
