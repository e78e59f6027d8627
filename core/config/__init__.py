# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for lookup synchronization.
"""

from core.config.defaults import (
    DEFAULT_TABLE_COMMENT,
    LookupDefaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DEFAULT_TABLE_COMMENT",
    "LookupDefaults",
    "get_defaults",
    "reset_defaults",
]
