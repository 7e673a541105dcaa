# =============================================================================
# alterations - Declarative Document Alteration
# =============================================================================
# Transforms fields of fetched or about-to-be-stored documents according to
# a per-property list of named operations ("alters").
#
# Key principles:
# - Every alter is a registered handler: (value, args, context) -> AlterResult
# - Data mismatches never raise; the value is kept (None for a failing
#   document lookup) and a warning is logged
# - Infra failures (container, schema, refused write-back) raise AlterationError
# - Documents passed in are never mutated
#
# Usage:
#   from alterations import AlterationEngine, AlterTag
#
#   engine = AlterationEngine(container)
#   engine.alter(
#       {"id": 7, "price": "9.5", "tags": "a;;b"},
#       {
#           "price": AlterTag.FLOAT,
#           "tags": ["array", "clean"],
#           "url": ["url", "/products"],
#       },
#   )
#   # {"id": 7, "price": 9.5, "tags": ["a", "b"], "url": "/products/7"}
# =============================================================================

from alterations.registry import (
    register_handler,
    get_handler,
    get_handler_info,
    list_handlers,
    dispatch,
    HANDLER_REGISTRY,
)
from alterations.types import (
    AlterTag,
    AlterStep,
    AlterResult,
    AlterContext,
    AlterationResult,
    CleanFlag,
    ContainerProtocol,
    DocumentModel,
    StepRecord,
)
from alterations.exceptions import (
    AlterationError,
    AlterationStepError,
    DependencyResolutionError,
    HydrationError,
    InvalidDefinitionError,
)
from alterations.accessors import get_key_value, set_key_value, has_key_value, is_list, is_map
from alterations.normalize import clean, normalize
from alterations.resolver import DependencyResolver

# Import handlers to register them
# This must come after registry imports
from alterations import handlers  # noqa: F401, E402
from alterations.engine import AlterationEngine  # noqa: E402

__version__ = "1.0.0"

__all__ = [
    # Registry
    "register_handler",
    "get_handler",
    "get_handler_info",
    "list_handlers",
    "dispatch",
    "HANDLER_REGISTRY",
    # Engine
    "AlterationEngine",
    "AlterationResult",
    "StepRecord",
    # Types
    "AlterTag",
    "AlterStep",
    "AlterResult",
    "AlterContext",
    "CleanFlag",
    "ContainerProtocol",
    "DocumentModel",
    # Errors
    "AlterationError",
    "AlterationStepError",
    "DependencyResolutionError",
    "HydrationError",
    "InvalidDefinitionError",
    # Helpers
    "get_key_value",
    "set_key_value",
    "has_key_value",
    "is_list",
    "is_map",
    "clean",
    "normalize",
    "DependencyResolver",
]
