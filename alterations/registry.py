# =============================================================================
# alterations/registry.py - Handler Registry
# =============================================================================
# Maps AlterTag values to handler functions.
#
# Each handler takes (value, args, context) and returns an AlterResult.
# Handlers are registered using the @register_handler decorator.
#
# Example:
#   @register_handler(AlterTag.INT, category="scalar", description="Cast to int")
#   def alter_int(value, args, context):
#       ...
#       return AlterResult(new_value, modified=True)
#
# dispatch() is the only entry point used by the engine. It holds the single
# fallback of the pipeline: an unknown tag returns the value unchanged.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable

from alterations.exceptions import SoftMismatch
from alterations.types import AlterContext, AlterResult, AlterTag, Handler, HandlerInfo

logger = logging.getLogger(__name__)


# Global registry: tag -> handler function
HANDLER_REGISTRY: dict[AlterTag, Handler] = {}

# tag -> metadata
HANDLER_INFO: dict[AlterTag, HandlerInfo] = {}


def register_handler(
    tag: AlterTag,
    category: str,
    description: str,
    elementwise: bool = False,
) -> Callable[[Handler], Handler]:
    """
    Decorator to register a handler for a tag.

    Args:
        tag: The operation the handler implements
        category: Grouping used by list_handlers() ("scalar", "array", ...)
        description: One-line summary
        elementwise: Inside an array alter, apply per element instead of
                     to the whole list

    Raises:
        ValueError: If the tag already has a handler
    """
    def decorator(func: Handler) -> Handler:
        if tag in HANDLER_REGISTRY:
            raise ValueError(f"Handler for '{tag.value}' is already registered")
        HANDLER_REGISTRY[tag] = func
        HANDLER_INFO[tag] = HandlerInfo(
            tag=tag,
            category=category,
            description=description,
            elementwise=elementwise,
        )
        return func
    return decorator


def get_handler(tag: AlterTag | str) -> Handler | None:
    """Get the handler for a tag (enum or string value), or None."""
    known = AlterTag.coerce(tag)
    if known is None:
        return None
    return HANDLER_REGISTRY.get(known)


def get_handler_info(tag: AlterTag | str) -> HandlerInfo | None:
    known = AlterTag.coerce(tag)
    return HANDLER_INFO.get(known) if known is not None else None


def list_handlers(category: str | None = None) -> list[str]:
    """
    List registered tag values.

    Args:
        category: If provided, filter by category
    """
    return [
        tag.value for tag, info in HANDLER_INFO.items()
        if category is None or info.category == category
    ]


def dispatch(
    tag: AlterTag | str,
    value: Any,
    args: tuple[Any, ...],
    context: AlterContext,
) -> AlterResult:
    """
    Run the handler registered for a tag.

    Unknown tags and SoftMismatch failures both leave the value unchanged,
    unless the mismatch carries a fallback value;
    a mismatch is logged as a warning with the property and operation.
    Any other exception propagates to the engine.
    """
    handler = get_handler(tag)
    if handler is None:
        logger.debug(f"No handler for '{tag}' on '{context.key}', value kept")
        return AlterResult(value, modified=False)

    try:
        return handler(value, args, context)
    except SoftMismatch as mismatch:
        name = tag.value if isinstance(tag, AlterTag) else tag
        context.logger.warning(
            f"Alter '{name}' skipped on '{context.key}': {mismatch.reason}",
            extra={
                "alter_key": context.key,
                "alter_operation": name,
                "alter_index": context.index,
                "alter_details": mismatch.details,
            },
        )
        if mismatch.keeps_value:
            return AlterResult(value, modified=False)
        return AlterResult(mismatch.fallback, modified=True)
