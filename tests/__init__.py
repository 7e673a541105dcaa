# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the alteration pipeline:
# - test_accessors.py / test_definitions.py / test_normalize.py: building blocks
# - test_*_handlers.py: one module per handler family
# - test_engine.py: folding, fan-out, errors, telemetry and bind variables
# - test_frames.py / test_document_service.py / test_config.py: adapters
#
# Run tests with: pytest
# =============================================================================
