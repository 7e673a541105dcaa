# =============================================================================
# alterations/normalize.py - Cleaning and Normalization
# =============================================================================
# Recursive removal of null / empty values from a document subtree, driven by
# CleanFlag. Used by the clean, normalize and hydrate alters and by
# AlterationEngine.alter_bind_vars().
#
#   normalize("  John  ")                  -> "John"
#   normalize(["a", "", None, "  b  "])    -> ["a", "  b  "]
#   normalize({"tags": ["", None]})        -> None      (emptied, RETURN_NULL)
#   normalize(0, CleanFlag.FALSY)          -> None
#
# normalize(normalize(v, f), f) == normalize(v, f) for every value and flag set:
# children are cleaned before their parent decides whether they are empty.
# =============================================================================

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from alterations.types import CleanFlag

DEFAULT_NORMALIZE_FLAGS = CleanFlag.DEFAULT | CleanFlag.RETURN_NULL


def _is_blank(text: str, flags: CleanFlag) -> bool:
    if CleanFlag.TRIM in flags:
        text = text.strip()
    return text == ""


def is_removable(item: Any, flags: CleanFlag) -> bool:
    """Whether clean() drops this (already cleaned) element."""
    if item is None:
        return CleanFlag.NULLS in flags or CleanFlag.FALSY in flags

    if isinstance(item, str):
        return _is_blank(item, flags) and (
            CleanFlag.EMPTY in flags or CleanFlag.FALSY in flags
        )

    if isinstance(item, (list, tuple, Mapping)):
        return len(item) == 0 and (
            CleanFlag.EMPTY in flags or CleanFlag.FALSY in flags
        )

    if CleanFlag.FALSY in flags:
        try:
            return not item
        except (TypeError, ValueError):
            # Objects without a truth value (numpy arrays, ...) are kept
            return False

    return False


def clean(value: Any, flags: CleanFlag = CleanFlag.DEFAULT) -> Any:
    """
    Recursively drop removable elements from lists and maps.

    Lists keep their order and are re-indexed; tuples come back as lists.
    Strings kept inside a container are not trimmed. Non-container values
    are returned unchanged.
    """
    if isinstance(value, (list, tuple)):
        cleaned_items = []
        for item in value:
            if isinstance(item, (list, tuple, Mapping)):
                item = clean(item, flags)
            if not is_removable(item, flags):
                cleaned_items.append(item)
        return cleaned_items

    if isinstance(value, Mapping):
        cleaned_map = {}
        for key, item in value.items():
            if isinstance(item, (list, tuple, Mapping)):
                item = clean(item, flags)
            if not is_removable(item, flags):
                cleaned_map[key] = item
        return cleaned_map

    return value


def normalize(value: Any, flags: CleanFlag = DEFAULT_NORMALIZE_FLAGS) -> Any:
    """
    Normalize any value.

    - None stays None
    - strings are trimmed (TRIM) and become None when empty (EMPTY / FALSY)
    - lists and maps are cleaned recursively; with RETURN_NULL an emptied
      container becomes None
    - other scalars are kept, unless FALSY is set and they are falsy
    """
    flags = CleanFlag(flags)

    if value is None:
        return None

    if isinstance(value, str):
        text = value.strip() if CleanFlag.TRIM in flags else value
        if text == "" and (CleanFlag.EMPTY in flags or CleanFlag.FALSY in flags):
            return None
        return text

    if isinstance(value, (list, tuple, Mapping)):
        cleaned = clean(value, flags)
        if len(cleaned) == 0 and CleanFlag.RETURN_NULL in flags:
            return None
        return cleaned

    if CleanFlag.FALSY in flags and is_removable(value, flags):
        return None

    return value
