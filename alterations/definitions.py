# =============================================================================
# alterations/definitions.py - Alter Definition Parsing
# =============================================================================
# Turns the declarative entries of an alters map into explicit chains of
# AlterStep. Accepted shapes for one property:
#
#   "int"                                   one step, no args
#   AlterTag.INT                            same
#   ["url", "/users", "slug"]               one step with args
#   [["get", "users"], "normalize"]         chain: first two items are steps
#   ["array", "clean", "int"]               chain of three bare steps
#   [["array", "clean", "int"], "not"]      chain; "clean", "int" are the
#                                           nested sub-steps of "array"
#   AlterStep(AlterTag.INT)                 explicit step
#   [AlterStep(...), AlterStep(...)]        explicit chain
#
# A list is a chain when its first AND second items both look like steps, or
# when its first item is itself a list or an AlterStep ([["array", "clean"]]).
# Otherwise the tail of the list is the argument list of its first item.
# =============================================================================

from __future__ import annotations

from typing import Any

from alterations.exceptions import InvalidDefinitionError
from alterations.types import AlterStep, AlterTag, AltersMap


def _to_tag(value: Any) -> AlterTag | str:
    return AlterTag.coerce(value) or value


def looks_like_step(item: Any) -> bool:
    """A known tag, an AlterStep, or a list/tuple starting with a known tag."""
    if isinstance(item, AlterStep):
        return True
    if AlterTag.includes(item):
        return True
    if isinstance(item, (list, tuple)) and len(item) > 0:
        return AlterTag.includes(item[0])
    return False


def is_chained_definition(definition: Any) -> bool:
    """True when a list definition holds several steps rather than one step's args."""
    if not isinstance(definition, (list, tuple)) or len(definition) < 2:
        return False
    return looks_like_step(definition[0]) and looks_like_step(definition[1])


def parse_step(item: Any, key: str = "") -> AlterStep:
    """Build one AlterStep from a bare tag, a [tag, *args] list or a step."""
    if isinstance(item, AlterStep):
        return item

    if isinstance(item, (list, tuple)):
        if len(item) == 0:
            raise InvalidDefinitionError(key, item, "empty step")
        tag, *args = item
        return AlterStep(tag=_to_tag(tag), args=tuple(args))

    if isinstance(item, (str, AlterTag)):
        return AlterStep(tag=_to_tag(item))

    raise InvalidDefinitionError(key, item, f"unsupported step type {type(item).__name__}")


def parse_definition(definition: Any, key: str = "") -> list[AlterStep]:
    """
    Parse one property definition into its chain.

    Raises:
        InvalidDefinitionError: If the definition is empty or malformed
    """
    if isinstance(definition, AlterStep):
        return [definition]

    if isinstance(definition, (list, tuple)):
        if len(definition) == 0:
            raise InvalidDefinitionError(key, definition, "empty definition")

        if all(isinstance(item, AlterStep) for item in definition):
            return list(definition)

        if is_chained_definition(definition) or isinstance(definition[0], (list, tuple, AlterStep)):
            return [parse_step(item, key) for item in definition]

        return [parse_step(definition, key)]

    return [parse_step(definition, key)]


def parse_sub_steps(args: tuple[Any, ...], key: str = "") -> list[AlterStep]:
    """
    Parse the nested sub-steps carried as arguments of an array alter.

    Every argument is a step on its own: "clean", ["call", fn], AlterStep(...).
    """
    return [parse_step(arg, key) for arg in args if arg is not None]


def compile_alters(alters: AltersMap | None) -> dict[str, list[AlterStep]]:
    """Parse every entry of an alters map."""
    if not alters:
        return {}
    return {key: parse_definition(definition, key) for key, definition in alters.items()}
