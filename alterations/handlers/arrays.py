# =============================================================================
# alterations/handlers/arrays.py - Array Alters
# =============================================================================
# Handlers producing or reshaping lists: array, clean, jsonParse, jsonStringify.
#
# The array alter turns "a;b;c" into ["a", "b", "c"] and then runs its own
# nested sub-steps over the list:
#   ["array", "clean", ["call", str.upper], "int"]   as a single step
#   [["array", "clean", "int"], "not"]               inside a chain
# Sub-steps flagged elementwise in the registry (call, get, hydrate,
# jsonParse) run once per element; the others see the whole list.
# =============================================================================

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from alterations.definitions import parse_sub_steps
from alterations.exceptions import SoftMismatch
from alterations.normalize import is_removable
from alterations.registry import dispatch, get_handler_info, register_handler
from alterations.types import AlterContext, AlterResult, AlterTag, CleanFlag
from app.config import settings

# Operations allowed as nested sub-steps of the array alter
ARRAY_SUB_STEPS = frozenset({
    AlterTag.CALL,
    AlterTag.CLEAN,
    AlterTag.FLOAT,
    AlterTag.GET,
    AlterTag.HYDRATE,
    AlterTag.INT,
    AlterTag.JSON_PARSE,
    AlterTag.NORMALIZE,
    AlterTag.NOT,
})


def _is_blank(item: Any) -> bool:
    return item is None or (isinstance(item, str) and is_removable(item, CleanFlag.DEFAULT))


# =============================================================================
# clean
# =============================================================================

@register_handler(
    AlterTag.CLEAN,
    category="array",
    description="Drop null, empty and blank elements from a list or map",
)
def alter_clean(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    if isinstance(value, (list, tuple)):
        cleaned = [item for item in value if not _is_blank(item)]
        return AlterResult(cleaned, modified=len(cleaned) < len(value))

    if isinstance(value, Mapping):
        cleaned_map = {key: item for key, item in value.items() if not _is_blank(item)}
        return AlterResult(cleaned_map, modified=len(cleaned_map) < len(value))

    return AlterResult(value, modified=False)


# =============================================================================
# jsonParse
# =============================================================================

def _decode(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise SoftMismatch(f"malformed JSON ({e.args[0] if e.args else e})", value=text[:80])


@register_handler(
    AlterTag.JSON_PARSE,
    category="array",
    description="Decode a JSON string, element-wise for lists",
    elementwise=True,
)
def alter_json_parse(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    if isinstance(value, str):
        return AlterResult(_decode(value), modified=True)

    if isinstance(value, (list, tuple)):
        decoded = []
        modified = False
        for item in value:
            if isinstance(item, str):
                decoded.append(
                    dispatch(AlterTag.JSON_PARSE, item, args, context).value
                )
                modified = True
            else:
                decoded.append(item)
        return AlterResult(decoded, modified=modified)

    return AlterResult(value, modified=False)


# =============================================================================
# jsonStringify
# =============================================================================

@register_handler(
    AlterTag.JSON_STRINGIFY,
    category="array",
    description="Encode the value as a JSON string",
)
def alter_json_stringify(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    options = args[0] if args and isinstance(args[0], Mapping) else {}
    try:
        return AlterResult(json.dumps(value, **options), modified=True)
    except (TypeError, ValueError) as e:
        raise SoftMismatch(f"value is not JSON serializable ({e})")


# =============================================================================
# array
# =============================================================================

def apply_sub_steps(items: list, args: tuple, context: AlterContext) -> list:
    """Run the nested sub-steps of an array alter over a list, in order."""
    for step in parse_sub_steps(args, context.key):
        info = get_handler_info(step.tag)

        if info is None or info.tag not in ARRAY_SUB_STEPS:
            context.logger.debug(f"Unsupported array sub-step '{step.name}' on '{context.key}'")
            continue

        if info.elementwise:
            items = [dispatch(step.tag, item, step.args, context).value for item in items]
        else:
            result = dispatch(step.tag, items, step.args, context).value
            if result is None:
                items = []
            elif isinstance(result, (list, tuple)):
                items = list(result)

    return items


@register_handler(
    AlterTag.ARRAY_SPLIT,
    category="array",
    description="Split a string into a list and apply nested sub-steps to it",
)
def alter_array(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    if isinstance(value, str) and value != "":
        value = value.split(settings.ARRAY_SEPARATOR)

    if not isinstance(value, (list, tuple)):
        return AlterResult([], modified=True)

    items = list(value)
    if items and args:
        items = apply_sub_steps(items, args, context)

    return AlterResult(items, modified=True)
