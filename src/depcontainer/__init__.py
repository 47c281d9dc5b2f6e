"""Depcontainer inversion-of-control registry.

Depcontainer lazily constructs and caches components: classes marked with
``@component`` whose constructor parameters are themselves components. A
:class:`Registry` builds each (type, qualifier) pair once, injecting the
parameters it resolves along the way, and refuses dependency cycles instead
of trying to break them.

Key Features:
    - Lazy singleton per (type, qualifier)
    - Constructor injection driven by standard type hints
    - Named instances with ``Annotated[T, "qualifier"]``
    - Post-construction hooks
    - Insertion listeners for reacting to new components

Basic Usage:
    >>> from depcontainer import Registry, component
    >>>
    >>> @component
    ... class Database:
    ...     pass
    >>>
    >>> @component
    ... class Service:
    ...     def __init__(self, db: Database):
    ...         self.db = db
    >>>
    >>> registry = Registry()
    >>> registry.get(Service).db is registry.get(Database)
    True

The package consists of:
    - markers: decorators marking components, constructors and hooks
    - registry: the Registry entry point and resolution
    - instantiator: constructor selection and dependency injection
    - store: per-type storage of qualified entries
    - events: insertion listeners
    - config: registry behaviour switches
    - errors: framework-specific exceptions
"""

from depcontainer.config import DefaultSelection, RegistryConfig
from depcontainer.errors import (
    ConstructionFailed,
    CyclicDependency,
    DependencyError,
    DependencyResolutionFailed,
    DuplicateComponent,
    NoConstructor,
    NotAComponent,
    NullComponent,
    PostConstructionFailed,
    TypeMismatch,
)
from depcontainer.markers import autowired, component, post_construct
from depcontainer.registry import Registry
from depcontainer.store import Entry, EntryState

__all__ = [
    "Registry",
    "RegistryConfig",
    "DefaultSelection",
    "Entry",
    "EntryState",
    "component",
    "autowired",
    "post_construct",
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
