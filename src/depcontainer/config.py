"""Behavioural switches of a :class:`~depcontainer.registry.Registry`."""

from dataclasses import dataclass
from enum import Enum

__all__ = ["DefaultSelection", "RegistryConfig"]


class DefaultSelection(Enum):
    """How a request without a qualifier picks among a type's entries.

    FIRST: the first entry registered for the type, whatever its qualifier.
    EXACT: only the entry registered without a qualifier.
    """

    FIRST = "first"
    EXACT = "exact"


@dataclass(frozen=True)
class RegistryConfig:
    """
    Attributes:
        default_selection: Rule applied to requests made without a qualifier.
        release_on_failure: Whether a failed construction removes its
            in-progress reservation. When False the reservation is kept, and a
            later request for the same key reports a cyclic dependency.
    """

    default_selection: DefaultSelection = DefaultSelection.FIRST
    release_on_failure: bool = True
