# =============================================================================
# alterations/resolver.py - Dependency Resolution
# =============================================================================
# Resolves the names found in alter definitions into live objects:
#   - callables for the call / map alters and array sub-steps
#   - document models for the get alter
#   - schema classes for the hydrate alter
#   - plain values (the base URL of the url alter)
#
# Lookup order for a string name:
#   1. the container (has(name) -> get(name))
#   2. a dotted import path: "package.module.func" or "package.module.Class.method"
#   3. a builtin: "str", "len", "round", ...
#
# Every method is fail-soft and returns None when nothing matches. The one
# exception is a container that raises while building an entry it reports
# having: that is a configuration defect and surfaces as
# DependencyResolutionError.
# =============================================================================

from __future__ import annotations

import builtins
import importlib
import logging
from typing import Any, Callable

from alterations.exceptions import DependencyResolutionError
from alterations.types import ContainerProtocol

logger = logging.getLogger(__name__)


def import_from_path(path: str) -> Any:
    """
    Import an attribute from a dotted path.

    Tries "module.attr" first, then "module.Class.attr". Returns None when
    neither form resolves.
    """
    parts = path.split(".")
    if len(parts) < 2:
        return None

    # module.attr
    try:
        module = importlib.import_module(".".join(parts[:-1]))
        if hasattr(module, parts[-1]):
            return getattr(module, parts[-1])
    except ImportError:
        pass

    # module.Class.attr
    if len(parts) >= 3:
        try:
            module = importlib.import_module(".".join(parts[:-2]))
            owner = getattr(module, parts[-2], None)
            if owner is not None and hasattr(owner, parts[-1]):
                return getattr(owner, parts[-1])
        except ImportError:
            pass

    return None


class DependencyResolver:
    """
    Name -> object resolution over an optional container.

    Usage:
        resolver = DependencyResolver(container)
        fn = resolver.resolve_callable("slugify")           # container entry
        fn = resolver.resolve_callable("textwrap.dedent")   # dotted path
        model = resolver.resolve_service("users", lambda s: hasattr(s, "get"))
    """

    def __init__(self, container: ContainerProtocol | None = None):
        self.container = container

    # -------------------------------------------------------------------------
    # Container access
    # -------------------------------------------------------------------------

    def _from_container(self, name: str) -> tuple[bool, Any]:
        """Return (found, value) for a container entry."""
        if self.container is None or not name:
            return False, None
        if not self.container.has(name):
            return False, None
        try:
            return True, self.container.get(name)
        except Exception as e:
            raise DependencyResolutionError(name, e) from e

    def get_value(self, name: str, default: Any = None) -> Any:
        """Plain container read with a default."""
        found, value = self._from_container(name)
        return value if found else default

    # -------------------------------------------------------------------------
    # Callables
    # -------------------------------------------------------------------------

    def resolve_callable(self, reference: Any) -> Callable | None:
        """
        Resolve a callable reference.

        Args:
            reference: A callable, or the name of one

        Returns:
            The callable, or None when it cannot be resolved
        """
        if callable(reference):
            return reference

        if not isinstance(reference, str) or not reference:
            return None

        found, value = self._from_container(reference)
        if found:
            if callable(value):
                return value
            logger.debug(f"Container entry '{reference}' is not callable")
            return None

        if "." in reference:
            target = import_from_path(reference)
            return target if callable(target) else None

        target = getattr(builtins, reference, None)
        return target if callable(target) else None

    # -------------------------------------------------------------------------
    # Services and types
    # -------------------------------------------------------------------------

    def resolve_service(
        self,
        reference: Any,
        predicate: Callable[[Any], bool] | None = None,
    ) -> Any:
        """
        Resolve a named service, checking it with an optional predicate.

        A reference that already satisfies the predicate is returned as is.
        """
        if reference is None:
            return None

        if not isinstance(reference, str):
            return reference if predicate is None or predicate(reference) else None

        found, value = self._from_container(reference)
        if not found and "." in reference:
            value = import_from_path(reference)
            found = value is not None

        if not found:
            return None
        if predicate is not None and not predicate(value):
            logger.debug(f"Service '{reference}' does not provide the expected capability")
            return None
        return value

    def resolve_type(self, reference: Any, base: type | None = None) -> type | None:
        """Resolve a class, optionally required to subclass base."""

        def is_expected_type(candidate: Any) -> bool:
            if not isinstance(candidate, type):
                return False
            return base is None or issubclass(candidate, base)

        return self.resolve_service(reference, is_expected_type)
