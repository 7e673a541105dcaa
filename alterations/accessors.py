# =============================================================================
# alterations/accessors.py - Property Accessors
# =============================================================================
# Uniform get/set over the two document shapes:
#   - maps: dicts (any Mapping) and attribute objects (pydantic models,
#     dataclass instances, SimpleNamespace, ...)
#   - lists: list / tuple of documents or scalars
#
# is_list() and is_map() are the only place where the shape is decided.
# =============================================================================

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Mapping, MutableMapping
from typing import Any

from pydantic import BaseModel


def is_list(value: Any) -> bool:
    """Ordered sequence of documents or scalars (strings are not lists)."""
    return isinstance(value, (list, tuple))


def is_map(value: Any) -> bool:
    """Keyed document: a Mapping, or an instance carrying attributes."""
    if isinstance(value, Mapping):
        return True
    if value is None or isinstance(value, (str, bytes, int, float, bool, type)):
        return False
    return hasattr(value, "__dict__") and not callable(value)


def is_document(value: Any) -> bool:
    return is_list(value) or is_map(value)


def has_key_value(document: Any, key: str) -> bool:
    """True if the map document defines the key (even with a None value)."""
    if isinstance(document, Mapping):
        return key in document
    if is_map(document):
        return hasattr(document, key)
    return False


def get_key_value(document: Any, key: str, default: Any = None) -> Any:
    """
    Read a property.

    For a list document the accessor is applied to every element and the
    list of results is returned, so one chain can target a batch.
    """
    if is_list(document):
        return [get_key_value(item, key, default) for item in document]
    if isinstance(document, Mapping):
        return document.get(key, default)
    if is_map(document):
        return getattr(document, key, default)
    return default


def _is_frozen_dataclass(document: Any) -> bool:
    return (
        dataclasses.is_dataclass(document)
        and not isinstance(document, type)
        and document.__dataclass_params__.frozen
    )


def set_key_value(document: Any, key: str, value: Any) -> Any:
    """
    Write a property and return the document holding it.

    Mutable documents are written in place. pydantic models and frozen
    dataclasses are rebuilt, so callers must use the returned object.
    For a list document the value is written into every element.
    Read-only mappings and scalars are returned untouched.

    Raises:
        TypeError / ValueError: If a frozen dataclass has no such init field
    """
    if is_list(document):
        items = [set_key_value(item, key, value) for item in document]
        if isinstance(document, tuple):
            return tuple(items)
        document[:] = items
        return document
    if isinstance(document, MutableMapping):
        document[key] = value
    elif isinstance(document, BaseModel):
        # update= bypasses validation
        return document.model_copy(update={key: value})
    elif _is_frozen_dataclass(document):
        return dataclasses.replace(document, **{key: value})
    elif is_map(document) and not isinstance(document, Mapping):
        setattr(document, key, value)
    return document


def copy_document(document: Any) -> Any:
    """Shallow copy of a map document; dict subclasses become plain dicts."""
    if isinstance(document, Mapping):
        return dict(document)
    if isinstance(document, BaseModel):
        return document.model_copy()
    return copy.copy(document)


def same_value(left: Any, right: Any) -> bool:
    """Strict comparison: same type and equal (1 is not 1.0, True is not 1)."""
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        # Array-like values with an ambiguous truth value
        return False
