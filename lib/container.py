# =============================================================================
# lib/container.py - Service Container
# =============================================================================
# A minimal service locator exposing has(id) / get(id).
#
# The alteration engine never owns its services: callables, document models,
# hydration schemas and plain configuration values (like "baseUrl") are all
# registered here by the application and looked up by name at runtime.
#
# Usage:
#   from lib.container import Container
#
#   container = Container({"baseUrl": "https://api.example.com"})
#   container.set("users", InMemoryDocumentModel([...]))
#   container.factory("slugify", lambda c: make_slugify())
#
#   container.has("users")   # True
#   container.get("users")   # the registered instance
# =============================================================================

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class ServiceNotFoundError(ApplicationError):
    """Raised when get() is called with an id the container does not know."""

    def __init__(self, service_id: str):
        super().__init__(
            message=f"No service registered under '{service_id}'",
            code="SERVICE_NOT_FOUND",
            suggestion="Register it with container.set() or container.factory() first",
            details={"service_id": service_id},
        )
        self.service_id = service_id


class Container:
    """
    Dictionary-backed service container.

    Entries are either plain values (set) or factories (factory) that are
    called once, with the container as their only argument, the first time
    the id is requested. The built instance is cached.

    Reads are safe from several threads at once: factory construction is
    serialized by a lock so each factory runs a single time.
    """

    def __init__(self, definitions: dict[str, Any] | None = None):
        self._entries: dict[str, Any] = dict(definitions or {})
        self._factories: dict[str, Callable[[Container], Any]] = {}
        self._lock = threading.Lock()

    def has(self, service_id: str) -> bool:
        """Return True if the id is registered as a value or a factory."""
        if not isinstance(service_id, str):
            return False
        return service_id in self._entries or service_id in self._factories

    def get(self, service_id: str) -> Any:
        """
        Return the service registered under the id.

        Raises:
            ServiceNotFoundError: If the id is unknown
        """
        if service_id in self._entries:
            return self._entries[service_id]

        if service_id not in self._factories:
            raise ServiceNotFoundError(service_id)

        with self._lock:
            # Another thread may have built it while we waited
            if service_id not in self._entries:
                logger.debug(f"Building service '{service_id}' from factory")
                self._entries[service_id] = self._factories[service_id](self)
            return self._entries[service_id]

    def set(self, service_id: str, value: Any) -> Container:
        """Register a ready-made value. Replaces any previous entry."""
        with self._lock:
            self._factories.pop(service_id, None)
            self._entries[service_id] = value
        return self

    def factory(self, service_id: str, builder: Callable[[Container], Any]) -> Container:
        """Register a lazily-built service."""
        with self._lock:
            self._entries.pop(service_id, None)
            self._factories[service_id] = builder
        return self

    def __contains__(self, service_id: object) -> bool:
        return isinstance(service_id, str) and self.has(service_id)
