# =============================================================================
# alterations/types.py - Core Types and Schemas
# =============================================================================
# Defines all types used throughout the alteration pipeline: the closed set
# of operation tags, cleaning flags, chain steps, handler results and the
# per-invocation context handed to every handler.
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from alterations.resolver import DependencyResolver


# A document is a map (dict / attribute object) or a list of documents.
Document = Any

# Raw, declarative definition of one property's alterations
AlterDefinition = Any

# property name -> definition
AltersMap = Mapping[str, AlterDefinition]


# =============================================================================
# Enums
# =============================================================================

class AlterTag(str, Enum):
    """
    Names of the operations an alters map can reference.

    Values are the strings used in declarative definitions, so
    ["url", "/users"] and [AlterTag.URL, "/users"] are equivalent.
    """

    ARRAY_SPLIT = "array"
    CALL = "call"
    CLEAN = "clean"
    FLOAT = "float"
    GET = "get"
    HYDRATE = "hydrate"
    INT = "int"
    JSON_PARSE = "jsonParse"
    JSON_STRINGIFY = "jsonStringify"
    LISTIFY = "list"
    MAP = "map"
    NORMALIZE = "normalize"
    NOT = "not"
    URL = "url"
    VALUE = "value"

    @classmethod
    def coerce(cls, value: Any) -> AlterTag | None:
        """Return the matching tag, or None when value names no known operation."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None

    @classmethod
    def includes(cls, value: Any) -> bool:
        return cls.coerce(value) is not None


class CleanFlag(IntFlag):
    """
    Flags driving clean() and normalize().

    NULLS        drop None
    EMPTY        drop "" and empty lists / maps
    TRIM         treat whitespace-only strings as empty, trim top-level strings
    FALSY        drop every falsy value (0, False, "", [], {})
    RETURN_NULL  collapse a container emptied by cleaning to None
    """

    NONE = 0
    NULLS = 1
    EMPTY = 2
    TRIM = 4
    FALSY = 8
    RETURN_NULL = 16

    DEFAULT = NULLS | EMPTY | TRIM
    ALL = NULLS | EMPTY | TRIM | FALSY | RETURN_NULL


# Tags allowed to create a property that is absent from the document
MATERIALIZING_TAGS = frozenset({AlterTag.VALUE, AlterTag.URL, AlterTag.MAP})


# =============================================================================
# Chain Steps
# =============================================================================

@dataclass(frozen=True)
class AlterStep:
    """
    One operation of a chain.

    Examples:
        AlterStep(AlterTag.INT)
        AlterStep(AlterTag.URL, ("/users", "slug"))
        AlterStep(AlterTag.ARRAY_SPLIT, ("clean", ("call", str.upper)))
    """
    tag: AlterTag | str
    args: tuple[Any, ...] = ()

    @property
    def name(self) -> str:
        return self.tag.value if isinstance(self.tag, AlterTag) else str(self.tag)

    @property
    def known(self) -> bool:
        return isinstance(self.tag, AlterTag)

    def arg(self, index: int, default: Any = None) -> Any:
        """Positional argument, or default when absent or None."""
        if index < len(self.args) and self.args[index] is not None:
            return self.args[index]
        return default


# =============================================================================
# Handler Result
# =============================================================================

@dataclass
class AlterResult:
    """
    Result of a single handler invocation.

    `modified` is informational: the engine writes a property back only when
    at least one step of its chain reports a modification.
    """
    value: Any
    modified: bool = False


# =============================================================================
# Handler Context
# =============================================================================

@dataclass(frozen=True)
class AlterContext:
    """
    Read-only bundle handed to every handler.

    Attributes:
        key: Property being altered
        document: The document as it was before this alter() pass
        resolver: Resolves callables, services and schemas by name
        logger: Where soft mismatches are reported
        alter_key: Default identifier property (get / url alters)
        index: Position of the document inside a list, when fanned out
    """
    key: str
    document: Document
    resolver: DependencyResolver
    logger: logging.Logger
    alter_key: str = "id"
    index: int | None = None

    @property
    def container(self) -> ContainerProtocol | None:
        return self.resolver.container


# =============================================================================
# Handler Metadata
# =============================================================================

@dataclass
class HandlerInfo:
    """Metadata registered next to each handler."""
    tag: AlterTag
    category: str
    description: str
    elementwise: bool = False  # applied per element inside an array alter


Handler = Callable[[Any, tuple, AlterContext], AlterResult]


# =============================================================================
# External Capabilities
# =============================================================================

@runtime_checkable
class ContainerProtocol(Protocol):
    """Anything exposing has(id) / get(id)."""

    def has(self, service_id: str) -> bool: ...

    def get(self, service_id: str) -> Any: ...


@runtime_checkable
class DocumentModel(Protocol):
    """A document store able to fetch one document by key/value criteria."""

    def get(self, criteria: dict[str, Any]) -> Union[dict[str, Any], None]: ...


# =============================================================================
# Execution Telemetry
# =============================================================================

@dataclass
class StepRecord:
    """Telemetry for one executed step of one property."""
    key: str
    operation: str
    modified: bool
    index: int | None = None
    duration_ms: float = 0.0


@dataclass
class AlterationResult:
    """
    Result of an AlterationEngine.execute() call.

    Contains the altered document and a record for each executed step.
    """
    document: Document
    steps: list[StepRecord] = field(default_factory=list)
    total_duration_ms: float = 0.0

    @property
    def modified(self) -> bool:
        return any(step.modified for step in self.steps)

    @property
    def modified_keys(self) -> list[str]:
        seen: list[str] = []
        for step in self.steps:
            if step.modified and step.key not in seen:
                seen.append(step.key)
        return seen
