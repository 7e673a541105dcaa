# =============================================================================
# alterations/handlers/structure.py - Structural Alters
# =============================================================================
# Handlers that reshape a subtree: normalize, list.
# =============================================================================

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from alterations.accessors import same_value
from alterations.exceptions import SoftMismatch
from alterations.normalize import DEFAULT_NORMALIZE_FLAGS, normalize
from alterations.registry import register_handler
from alterations.types import AlterContext, AlterResult, AlterTag, CleanFlag
from app.config import settings


def _flags(raw: Any) -> CleanFlag:
    if raw is None:
        return DEFAULT_NORMALIZE_FLAGS
    try:
        return CleanFlag(int(raw))
    except (TypeError, ValueError):
        raise SoftMismatch(f"invalid clean flags {raw!r}")


# =============================================================================
# normalize
# =============================================================================

@register_handler(
    AlterTag.NORMALIZE,
    category="structure",
    description="Recursively strip null and empty values",
)
def alter_normalize(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    Args:
        args[0]: CleanFlag set (default DEFAULT | RETURN_NULL)
    """
    flags = _flags(args[0] if args else None)
    normalized = normalize(value, flags)
    return AlterResult(normalized, modified=not same_value(normalized, value))


# =============================================================================
# list
# =============================================================================

def listify(
    value: Any,
    separator: str = ";",
    replace: str = "\n",
    default: Any = None,
) -> Any:
    """
    Re-join a separated string (or a list) with a new separator.

    Items are trimmed and empty items dropped. When nothing is left the
    default is returned.

    Example:
        listify("a; b;;c", ";", ", ")   # "a, b, c"
        listify(";;;", ";", "\\n", "N/A")  # "N/A"
    """
    if value is None:
        return default

    if isinstance(value, str):
        items = value.split(separator)
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
    elif isinstance(value, Mapping):
        items = [str(item) for item in value.values() if item is not None]
    else:
        items = [str(value)]

    kept = [item.strip() for item in items if item.strip() != ""]
    return replace.join(kept) if kept else default


@register_handler(
    AlterTag.LISTIFY,
    category="structure",
    description="Split, trim and re-join a separated list, with a fallback",
)
def alter_listify(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    Args:
        args[0]: Input separator (default LISTIFY_SEPARATOR)
        args[1]: Output separator (default LISTIFY_REPLACE)
        args[2]: Value used when the list is empty (default None)
    """
    separator = args[0] if len(args) > 0 and args[0] else settings.LISTIFY_SEPARATOR
    replace = args[1] if len(args) > 1 and args[1] is not None else settings.LISTIFY_REPLACE
    default = args[2] if len(args) > 2 else None

    result = listify(value, separator, replace, default)
    return AlterResult(result, modified=not same_value(result, value))
