# =============================================================================
# alterations/handlers/documents.py - Cross-Document Alters
# =============================================================================
# Handlers that reach outside the value through the resolver:
#   call     run a resolvable callable on the value
#   get      replace an identifier with the related document from a model
#   hydrate  turn a map (or list of maps) into pydantic model instances
#   map      derive a value from the whole document
#   url      build a URL from a base path and a document property
# =============================================================================

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from alterations.accessors import get_key_value
from alterations.exceptions import HydrationError, SoftMismatch
from alterations.normalize import DEFAULT_NORMALIZE_FLAGS, normalize
from alterations.registry import register_handler
from alterations.types import AlterContext, AlterResult, AlterTag, CleanFlag
from app.config import settings
from lib.utils import join_paths


def _describe(reference: Any) -> str:
    if isinstance(reference, str):
        return reference
    return getattr(reference, "__qualname__", None) or type(reference).__name__


def _has_get(candidate: Any) -> bool:
    return callable(getattr(candidate, "get", None)) and not isinstance(candidate, (type, Mapping))


# =============================================================================
# call
# =============================================================================

@register_handler(
    AlterTag.CALL,
    category="document",
    description="Invoke a callable with the value and extra arguments",
    elementwise=True,
)
def alter_call(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    Args:
        args[0]: Callable, container id, dotted path or builtin name
        args[1:]: Extra positional arguments passed after the value
    """
    if not args:
        raise SoftMismatch("no callable given")

    function = context.resolver.resolve_callable(args[0])
    if function is None:
        raise SoftMismatch(f"callable '{_describe(args[0])}' could not be resolved")

    return AlterResult(function(value, *args[1:]), modified=True)


# =============================================================================
# get
# =============================================================================

@register_handler(
    AlterTag.GET,
    category="document",
    description="Replace an identifier with the related document",
    elementwise=True,
)
def alter_get(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    Args:
        args[0]: Document model, or its container id / dotted path
        args[1]: Lookup key in the related documents (default: alter key)

    Returns the found document, or None on a miss or when the store raises
    (logged as a warning). A None value is returned as is without touching
    the model.
    """
    if value is None:
        return AlterResult(None, modified=False)

    reference = args[0] if args else None
    model = context.resolver.resolve_service(reference, _has_get)
    if model is None:
        raise SoftMismatch(f"document model '{_describe(reference)}' could not be resolved")

    criteria = {
        "key": args[1] if len(args) > 1 and args[1] else context.alter_key,
        "value": value,
    }
    try:
        document = model.get(criteria)
    except Exception as e:
        raise SoftMismatch(
            f"lookup in '{_describe(reference)}' failed: {e}",
            fallback=None,
            criteria=criteria,
            error=type(e).__name__,
        ) from e

    return AlterResult(document, modified=True)


# =============================================================================
# hydrate
# =============================================================================

def hydrate(data: Any, schema: type[BaseModel]) -> Any:
    """
    Validate a map into the schema; lists are hydrated element-wise.

    Nested models and list[Model] fields are handled by the schema itself.
    Non-map list elements are kept as they are.
    """
    if isinstance(data, Mapping):
        return schema.model_validate(data)
    if isinstance(data, (list, tuple)):
        return [schema.model_validate(item) if isinstance(item, Mapping) else item for item in data]
    return data


@register_handler(
    AlterTag.HYDRATE,
    category="document",
    description="Hydrate a map or a list of maps into a schema",
    elementwise=True,
)
def alter_hydrate(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    Args:
        args[0]: pydantic model class, or its container id / dotted path
        args[1]: Normalize before hydrating (default True)
        args[2]: CleanFlag set used by that normalization
    """
    if not isinstance(value, (Mapping, list, tuple)):
        return AlterResult(value, modified=False)

    reference = args[0] if args else None
    schema = context.resolver.resolve_type(reference, BaseModel)
    if schema is None:
        raise SoftMismatch(f"schema '{_describe(reference)}' could not be resolved")

    should_normalize = args[1] if len(args) > 1 and args[1] is not None else True
    flags = CleanFlag(args[2]) if len(args) > 2 and args[2] is not None else DEFAULT_NORMALIZE_FLAGS

    data = normalize(value, flags) if should_normalize else value
    if data is None:
        return AlterResult(None, modified=True)

    try:
        return AlterResult(hydrate(data, schema), modified=True)
    except ValidationError as e:
        raise HydrationError(schema.__name__, e, key=context.key) from e


# =============================================================================
# map
# =============================================================================

@register_handler(
    AlterTag.MAP,
    category="document",
    description="Derive the value from the whole document",
)
def alter_map(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    The callback receives (document, container, key, value, extra_args),
    where document is the state before this alter() pass.

    Args:
        args[0]: Callable, container id, dotted path or builtin name
        args[1:]: Extra arguments, passed as one list
    """
    if not args:
        return AlterResult(value, modified=False)

    callback = context.resolver.resolve_callable(args[0])
    if callback is None:
        raise SoftMismatch(f"map callback '{_describe(args[0])}' could not be resolved")

    new_value = callback(context.document, context.container, context.key, value, list(args[1:]))
    return AlterResult(new_value, modified=True)


# =============================================================================
# url
# =============================================================================

@register_handler(
    AlterTag.URL,
    category="document",
    description="Build a URL from a base path and a document property",
)
def alter_url(value: Any, args: tuple, context: AlterContext) -> AlterResult:
    """
    Args:
        args[0]: Path appended to the base URL (default "")
        args[1]: Document property appended last (default: alter key)
        args[2]: Container id of the base URL (default BASE_URL_KEY),
                 False to ignore the container
        args[3]: Force a trailing slash (default False)
    """
    path = args[0] if len(args) > 0 and args[0] is not None else ""
    property_name = args[1] if len(args) > 1 and args[1] else context.alter_key
    container_key = args[2] if len(args) > 2 and args[2] is not None else settings.BASE_URL_KEY
    trailing_slash = bool(args[3]) if len(args) > 3 else False

    base_url = ""
    if container_key is not False:
        candidate = context.resolver.get_value(container_key)
        base_url = candidate if isinstance(candidate, str) else ""

    property_value = get_key_value(context.document, property_name)
    url = join_paths(join_paths(base_url, path), "" if property_value is None else property_value)

    if trailing_slash and not url.endswith(("/", "\\")):
        url += "/"

    return AlterResult(url, modified=True)
