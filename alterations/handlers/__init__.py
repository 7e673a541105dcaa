# =============================================================================
# alterations/handlers - All Alter Handlers
# =============================================================================
# This package contains every handler, organized by category:
#
#   - scalars: value, not, int, float
#   - arrays: array, clean, jsonParse, jsonStringify
#   - structure: normalize, list
#   - documents: call, get, hydrate, map, url
#
# Import all handler modules here to register them with the global registry.
# =============================================================================

from alterations.handlers import scalars
from alterations.handlers import arrays
from alterations.handlers import structure
from alterations.handlers import documents
