# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database operations
# PURPOSE: PostgreSQL execution and lookup synchronization runner
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for lookup synchronization.

Provides:
- PostgreSQLRepository: connections and the SQL batch executor
- LookupInitializer: run synchronization with step-by-step reporting
- initialize_lookups: convenience function for startup hooks

Usage:
    from infrastructure import LookupInitializer
    from core.schema import PydanticModelReflector

    result = LookupInitializer().initialize_all(PydanticModelReflector([Rabbit]))
"""

from infrastructure.database_initializer import (
    LookupInitializer,
    InitializationResult,
    StepResult,
    initialize_lookups,
)
from infrastructure.postgresql import (
    PostgreSQLRepository,
)

__all__ = [
    "LookupInitializer",
    "InitializationResult",
    "StepResult",
    "initialize_lookups",
    "PostgreSQLRepository",
]
