"""Notification of components being inserted into a registry."""

import logging
from typing import Any, Callable, Optional

__all__ = ["ComponentEventListener", "ComponentEventNotifier"]

logger = logging.getLogger(__name__)

ComponentEventListener = Callable[[type, Optional[str], Any], None]


class ComponentEventNotifier:
    """Holds the pre- and post-insertion listeners of a registry.

    Listeners are called in registration order with
    ``(component_type, qualifier, component)``. A listener that raises aborts
    the remaining notifications and the operation that triggered them.
    """

    def __init__(self):
        self._pre_insert: list[ComponentEventListener] = []
        self._post_insert: list[ComponentEventListener] = []

    def add_pre_insert_listener(self, listener: ComponentEventListener):
        self._pre_insert.append(listener)

    def add_post_insert_listener(self, listener: ComponentEventListener):
        self._post_insert.append(listener)

    def pre_insert(self, component_type: type, qualifier: Optional[str], component: Any):
        self._notify(self._pre_insert, component_type, qualifier, component)

    def post_insert(self, component_type: type, qualifier: Optional[str], component: Any):
        self._notify(self._post_insert, component_type, qualifier, component)

    @staticmethod
    def _notify(
        listeners: list[ComponentEventListener],
        component_type: type,
        qualifier: Optional[str],
        component: Any,
    ):
        for listener in listeners:
            logger.debug(
                "Notifying %r of %s (qualifier=%r)",
                listener,
                component_type.__qualname__,
                qualifier,
            )
            listener(component_type, qualifier, component)
