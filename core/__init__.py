# =============================================================================
# core/ - Document Store Package
# =============================================================================
# This package contains the document stores consumed by the alteration
# pipeline:
# - services/: document models looked up by the get alter
#
# Code in this package should NOT import from the alterations package.
# Stores only need to satisfy the DocumentModel protocol.
# =============================================================================
