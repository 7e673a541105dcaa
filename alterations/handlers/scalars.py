# =============================================================================
# alterations/handlers/scalars.py - Scalar Alters
# =============================================================================
# Handlers that cast or replace values: value, not, int, float.
# Lists are handled element-wise and maps value-wise.
# =============================================================================

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Callable

import numpy as np

from alterations.accessors import same_value
from alterations.registry import register_handler
from alterations.types import AlterContext, AlterResult, AlterTag

# Leading numeric part of a string: " 12abc" -> "12", "-3.5e2x" -> "-3.5e2"
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _map_values(value: Any, func: Callable[[Any], Any]) -> Any:
    """Apply func to each element of a list / each value of a map, or to value."""
    if isinstance(value, (list, tuple)):
        return [func(item) for item in value]
    if isinstance(value, Mapping):
        return {key: func(item) for key, item in value.items()}
    return func(value)


def is_int(value: Any) -> bool:
    """int or numpy integer, bools excluded."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def is_float(value: Any) -> bool:
    return isinstance(value, (float, np.floating))


def to_int(value: Any) -> int:
    """
    Lenient integer cast.

    Strings use their leading number, truncated ("12abc" -> 12, "1e3" -> 1000,
    "abc" -> 0). Floats are truncated, NaN / infinity / None give 0 and
    containers give 1 when non-empty.
    """
    if value is None:
        return 0
    if isinstance(value, (bool, np.bool_)):
        return int(value)
    if is_int(value):
        return int(value)
    if is_float(value):
        return 0 if math.isnan(value) or math.isinf(value) else int(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if not match:
            return 0
        try:
            return int(match.group(1))
        except ValueError:
            return to_int(float(match.group(1)))
    if isinstance(value, (list, tuple, Mapping)):
        return 1 if len(value) > 0 else 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def to_float(value: Any) -> float:
    """Lenient float cast, same rules as to_int()."""
    if value is None:
        return 0.0
    if isinstance(value, (bool, np.bool_)) or is_int(value) or is_float(value):
        return float(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        return float(match.group(1)) if match else 0.0
    if isinstance(value, (list, tuple, Mapping)):
        return 1.0 if len(value) > 0 else 0.0
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


# =============================================================================
# value
# =============================================================================

@register_handler(
    AlterTag.VALUE,
    category="scalar",
    description="Replace the value with a fixed constant",
)
def alter_value(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    constant = args[0] if args else None
    if same_value(value, constant):
        return AlterResult(value, modified=False)
    return AlterResult(constant, modified=True)


# =============================================================================
# not
# =============================================================================

@register_handler(
    AlterTag.NOT,
    category="scalar",
    description="Boolean negation, element-wise for lists and maps",
)
def alter_not(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    return AlterResult(_map_values(value, lambda item: not bool(item)), modified=True)


# =============================================================================
# int
# =============================================================================

@register_handler(
    AlterTag.INT,
    category="scalar",
    description="Cast to integer, element-wise for lists and maps",
)
def alter_int(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    if is_int(value):
        return AlterResult(value, modified=False)
    return AlterResult(_map_values(value, to_int), modified=True)


# =============================================================================
# float
# =============================================================================

@register_handler(
    AlterTag.FLOAT,
    category="scalar",
    description="Cast to float, element-wise for lists and maps",
)
def alter_float(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    if is_float(value):
        return AlterResult(value, modified=False)
    return AlterResult(_map_values(value, to_float), modified=True)
