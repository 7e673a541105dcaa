# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - container.py: Service container (has/get) consumed by the alteration engine
# - supabase_client.py: Typed Supabase wrapper used by the Supabase document model
# - utils.py: Shared utilities (error base class, path joining)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.container import Container, ServiceNotFoundError
from lib.utils import ApplicationError, join_paths

__all__ = [
    # Container
    "Container",
    "ServiceNotFoundError",
    # Utils
    "ApplicationError",
    "join_paths",
]
