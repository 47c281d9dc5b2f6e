"""Storage of component instances keyed by type and qualifier."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional

from depcontainer.errors import NotAComponent, TypeMismatch
from depcontainer.markers import is_component

__all__ = ["EntryState", "Entry", "ABSENT", "IN_PROGRESS", "ComponentStore"]

logger = logging.getLogger(__name__)


class EntryState(Enum):
    ABSENT = "absent"
    IN_PROGRESS = "in-progress"
    READY = "ready"


@dataclass(frozen=True)
class Entry:
    """The state of one (type, qualifier) slot.

    Attributes:
        state: Whether the slot is empty, reserved for construction, or filled.
        value: The component instance; only meaningful when ``state`` is READY.
    """

    state: EntryState
    value: Any = None

    @classmethod
    def ready(cls, value: Any) -> "Entry":
        return cls(EntryState.READY, value)

    @property
    def is_absent(self) -> bool:
        return self.state is EntryState.ABSENT

    @property
    def is_in_progress(self) -> bool:
        return self.state is EntryState.IN_PROGRESS

    @property
    def is_ready(self) -> bool:
        return self.state is EntryState.READY


ABSENT = Entry(EntryState.ABSENT)
IN_PROGRESS = Entry(EntryState.IN_PROGRESS)


class ComponentStore:
    """Maps each component type to its chain of qualified entries.

    A chain preserves insertion order and holds at most one entry per
    qualifier; ``None`` is a qualifier like any other.
    """

    def __init__(self):
        self._chains: dict[type, dict[Optional[str], Entry]] = {}

    def put(self, component_type: type, qualifier: Optional[str], entry: Entry) -> bool:
        """Insert or replace the entry for (component_type, qualifier).

        Args:
            component_type: The declared type; must carry the component marker.
            qualifier: Optional qualifier distinguishing instances of the type.
            entry: Either IN_PROGRESS or a READY entry holding an instance of
                ``component_type``.

        Returns:
            True if an entry already existed and was replaced.

        Raises:
            NotAComponent: If ``component_type`` is not a component.
            TypeMismatch: If a READY value is not an instance of ``component_type``.
        """
        _check_component(component_type)
        if entry.is_absent:
            raise ValueError("Use discard() to remove an entry")
        if entry.is_ready and not isinstance(entry.value, component_type):
            raise TypeMismatch(component_type, qualifier, entry.value)

        chain = self._chains.setdefault(component_type, {})
        existed = qualifier in chain
        chain[qualifier] = entry
        logger.debug(
            "Stored %s for %s (qualifier=%r, replaced=%s)",
            entry.state.value,
            component_type.__qualname__,
            qualifier,
            existed,
        )
        return existed

    def reserve(self, component_type: type, qualifier: Optional[str]) -> bool:
        return self.put(component_type, qualifier, IN_PROGRESS)

    def find(self, component_type: type, qualifier: Optional[str]) -> Entry:
        """Return the entry for an exact (component_type, qualifier) match, or ABSENT."""
        _check_component(component_type)
        return self._chains.get(component_type, {}).get(qualifier, ABSENT)

    def first(self, component_type: type) -> tuple[Optional[str], Entry]:
        """Return the first (qualifier, entry) of a type's chain in insertion order."""
        _check_component(component_type)
        chain = self._chains.get(component_type)
        if not chain:
            return None, ABSENT
        return next(iter(chain.items()))

    def discard(self, component_type: type, qualifier: Optional[str]) -> bool:
        """Remove an entry, returning whether it existed."""
        chain = self._chains.get(component_type)
        if chain is None or qualifier not in chain:
            return False
        del chain[qualifier]
        if not chain:
            del self._chains[component_type]
        return True

    def qualifiers(self, component_type: type) -> list[Optional[str]]:
        return list(self._chains.get(component_type, {}))

    def clear(self):
        self._chains.clear()

    def __contains__(self, key: tuple[type, Optional[str]]) -> bool:
        component_type, qualifier = key
        return qualifier in self._chains.get(component_type, {})

    def __iter__(self) -> Iterator[tuple[type, Optional[str]]]:
        for component_type, chain in self._chains.items():
            for qualifier in chain:
                yield component_type, qualifier

    def __len__(self) -> int:
        return sum(len(chain) for chain in self._chains.values())


def _check_component(component_type: Any):
    if not is_component(component_type):
        raise NotAComponent(component_type)
