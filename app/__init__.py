# =============================================================================
# app/ - Application Configuration Package
# =============================================================================
# This package holds process-wide configuration:
# - config.py: Environment variable loading and settings
# - log_config.py: Logging setup for scripts embedding the engine
#
# The alteration engine reads its defaults from here; it never owns them.
# =============================================================================
