# =============================================================================
# alterations/exceptions.py - Alteration Error Hierarchy
# =============================================================================
# Two classes of failure exist in the pipeline:
#
# - Data-level mismatches (wrong type, malformed JSON, unresolved callable,
#   service or schema, a failing document store). Handlers raise
#   SoftMismatch; the registry collapses it to "value unchanged" (or to the
#   fallback it carries) and logs a warning. It never reaches the caller.
#
# - Infra-level failures (a container that throws on an id it claims to have,
#   a schema rejecting the data it is hydrated with, a document that refuses
#   the altered value).
#   These are AlterationError subclasses and abort the whole alter() call.
# =============================================================================

from __future__ import annotations

from typing import Any

from lib.utils import ApplicationError


class SoftMismatch(Exception):
    """
    Data-level mismatch raised inside a handler.

    Caught by registry.dispatch(), which keeps the incoming value, or
    replaces it with `fallback` when one is given.
    """

    KEEP = object()

    def __init__(self, reason: str, fallback: Any = KEEP, **details: Any):
        super().__init__(reason)
        self.reason = reason
        self.fallback = fallback
        self.details = details

    @property
    def keeps_value(self) -> bool:
        return self.fallback is SoftMismatch.KEEP


class AlterationError(ApplicationError):
    """Base class for errors that escape AlterationEngine.alter()."""

    def __init__(self, message: str, code: str = "ALTERATION_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class InvalidDefinitionError(AlterationError):
    """An alters map entry could not be turned into a chain of steps."""

    def __init__(self, key: str, definition: Any, reason: str):
        super().__init__(
            message=f"Invalid alter definition for '{key}': {reason}",
            code="INVALID_DEFINITION",
            suggestion="Use a tag, [tag, *args], a list of steps or AlterStep instances",
            details={"key": key, "definition": repr(definition)},
        )
        self.key = key


class DependencyResolutionError(AlterationError):
    """The container failed while building a service it claims to have."""

    def __init__(self, name: str, cause: Exception):
        super().__init__(
            message=f"Container failed to provide '{name}': {cause}",
            code="DEPENDENCY_RESOLUTION_FAILED",
            suggestion="Check the container definition registered under this name",
            details={"name": name, "cause": type(cause).__name__},
        )
        self.name = name


class HydrationError(AlterationError):
    """The data could not be hydrated into the resolved schema."""

    def __init__(self, schema: str, cause: Exception, key: str | None = None):
        super().__init__(
            message=f"Hydration into '{schema}' failed: {cause}",
            code="HYDRATION_FAILED",
            suggestion="Check that the stored structure matches the schema fields",
            details={"schema": schema, "key": key},
        )
        self.schema = schema


class AlterationStepError(AlterationError):
    """
    Raised when a handler fails with an unexpected exception.

    Args:
        message: Error description
        key: Property being altered
        operation: Tag of the failing step
        index: Index of the document inside a list, when fanned out
    """

    def __init__(
        self,
        message: str,
        key: str,
        operation: str,
        index: int | None = None,
    ):
        self.key = key
        self.operation = operation
        self.index = index

        context_parts = [f"key='{key}'", f"operation='{operation}'"]
        if index is not None:
            context_parts.append(f"index={index}")

        super().__init__(
            message=f"{message} ({', '.join(context_parts)})",
            code="ALTERATION_STEP_FAILED",
            details={"key": key, "operation": operation, "index": index},
        )
