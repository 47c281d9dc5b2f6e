"""The registry: lazy construction and caching of components by type and qualifier."""

import logging
from typing import Any, Optional, TypeVar, Union

from depcontainer.config import DefaultSelection, RegistryConfig
from depcontainer.errors import (
    CyclicDependency,
    DependencyError,
    DuplicateComponent,
    NotAComponent,
    NullComponent,
    TypeMismatch,
    describe,
)
from depcontainer.events import ComponentEventListener, ComponentEventNotifier
from depcontainer.instantiator import ComponentInstantiator
from depcontainer.markers import is_component
from depcontainer.store import ComponentStore, Entry

__all__ = ["Registry"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

ComponentKey = tuple[type, Optional[str]]


class Registry:
    """Lazily constructs, caches and injects components.

    Each (type, qualifier) pair is built at most once and the same instance is
    returned to every later request, whether it comes from caller code or from
    the constructor of another component.

    Example:
        >>> registry = Registry()
        >>> service = registry.get(Service)
        >>> service is registry.get(Service)
        True
    """

    def __init__(self, config: Optional[RegistryConfig] = None):
        self.config = config or RegistryConfig()
        self._store = ComponentStore()
        self._events = ComponentEventNotifier()
        self._instantiator = ComponentInstantiator(self.get)
        self._under_construction: list[ComponentKey] = []

    def add_pre_insert_listener(self, listener: ComponentEventListener):
        """Call ``listener`` right before a component is inserted.

        Pre-insert listeners are also called when :meth:`add` is about to fail
        because the (type, qualifier) pair is already taken.
        """
        self._events.add_pre_insert_listener(listener)

    def add_post_insert_listener(self, listener: ComponentEventListener):
        """Call ``listener`` right after a component is inserted."""
        self._events.add_post_insert_listener(listener)

    def add(self, component_type: type, component: Any, qualifier: Optional[str] = None):
        """Register an existing instance, bypassing construction.

        Args:
            component_type: The component type the instance is registered as.
            component: The instance; must be an instance of ``component_type``.
            qualifier: Optional qualifier distinguishing it from other instances
                of the same type.

        Raises:
            NullComponent: If ``component`` is None.
            NotAComponent: If ``component_type`` is not decorated with @component.
            TypeMismatch: If ``component`` is not a ``component_type``.
            DuplicateComponent: If the (type, qualifier) pair is already present.
        """
        if component is None:
            raise NullComponent(component_type, qualifier)
        if not is_component(component_type):
            raise NotAComponent(component_type)
        if not isinstance(component, component_type):
            raise TypeMismatch(component_type, qualifier, component)

        self._events.pre_insert(component_type, qualifier, component)

        if (component_type, qualifier) in self._store:
            raise DuplicateComponent(component_type, qualifier)

        logger.debug("Adding %s", describe(component_type, qualifier))
        self._store.put(component_type, qualifier, Entry.ready(component))
        self._events.post_insert(component_type, qualifier, component)

    def add_instance(self, component: Any, qualifier: Optional[str] = None):
        """Register an instance under its own class."""
        if component is None:
            raise NullComponent(None, qualifier)
        self.add(type(component), component, qualifier)

    def get(self, component_type: type[T], qualifier: Optional[str] = None) -> T:
        """Return the component for (type, qualifier), constructing it if needed.

        Without a qualifier the configured :class:`DefaultSelection` applies:
        by default the first entry registered for the type is returned,
        whatever its qualifier.

        Raises:
            NotAComponent: If ``component_type`` is not decorated with @component.
            CyclicDependency: If the requested component is still being built.
            DependencyError: Any construction failure, see
                :meth:`ComponentInstantiator.build`.
        """
        if not is_component(component_type):
            raise NotAComponent(component_type)

        found_qualifier, entry = self._lookup(component_type, qualifier)
        if entry.is_ready:
            if not isinstance(entry.value, component_type):
                raise TypeMismatch(component_type, found_qualifier, entry.value)
            return entry.value
        if entry.is_in_progress:
            key = (component_type, found_qualifier)
            raise CyclicDependency(
                component_type, found_qualifier, [*self._under_construction, key]
            )

        return self._create(component_type, qualifier)

    def find(self, component_type: type, qualifier: Optional[str] = None) -> Entry:
        """Look up the entry for an exact (type, qualifier) match without constructing."""
        return self._store.find(component_type, qualifier)

    def reset(self):
        """Forget every component. Listeners stay registered.

        Raises:
            DependencyError: If called while a component is being constructed,
                for example from an insertion listener.
        """
        if self._under_construction:
            component_type, qualifier = self._under_construction[-1]
            raise DependencyError(
                f"Cannot reset while {describe(component_type, qualifier)} "
                "is being constructed",
                component_type,
                qualifier,
            )
        self._store.clear()

    def __getitem__(self, key: Union[type, ComponentKey]) -> Any:
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get(key)

    def __len__(self) -> int:
        return len(self._store)

    def _lookup(
        self, component_type: type, qualifier: Optional[str]
    ) -> tuple[Optional[str], Entry]:
        if qualifier is None and self.config.default_selection is DefaultSelection.FIRST:
            return self._store.first(component_type)
        return qualifier, self._store.find(component_type, qualifier)

    def _create(self, component_type: type[T], qualifier: Optional[str]) -> T:
        key = (component_type, qualifier)
        self._store.reserve(component_type, qualifier)
        self._under_construction.append(key)
        logger.debug("Constructing %s", describe(component_type, qualifier))

        try:
            instance = self._instantiator.build(component_type, qualifier)
            self._events.pre_insert(component_type, qualifier, instance)
        except Exception:
            if self.config.release_on_failure:
                self._store.discard(component_type, qualifier)
                logger.debug(
                    "Released reservation of %s after failed construction",
                    describe(component_type, qualifier),
                )
            raise
        finally:
            self._under_construction.pop()

        self._store.put(component_type, qualifier, Entry.ready(instance))
        self._events.post_insert(component_type, qualifier, instance)
        return instance
