# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .document_service import InMemoryDocumentModel, SupabaseDocumentModel

__all__ = [
    "InMemoryDocumentModel",
    "SupabaseDocumentModel",
]
