# ============================================================================
# LOOKUP SQL DIALECTS
# ============================================================================
# STATUS: Core - Dialect registry
# PURPOSE: Map dialect names to lookup SQL handlers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Lookup SQL dialects.

Adding a dialect means subclassing LookupSqlHandler, implementing render()
and registering the class here.
"""

from typing import Dict, Optional, Type

from core.config import LookupDefaults
from core.schema.dialects.base import LookupSqlHandler, SqlBatch, SqlExecutor
from core.schema.dialects.postgresql import PostgreSQLLookupHandler

DIALECTS: Dict[str, Type[LookupSqlHandler]] = {
    "postgresql": PostgreSQLLookupHandler,
}


def get_handler(dialect: str = "postgresql", settings: Optional[LookupDefaults] = None) -> LookupSqlHandler:
    """Create the lookup SQL handler for a dialect name."""
    try:
        handler_class = DIALECTS[dialect.lower()]
    except KeyError:
        raise ValueError(f"Unknown SQL dialect {dialect!r}, expected one of {sorted(DIALECTS)}") from None
    return handler_class(settings)


__all__ = [
    "DIALECTS",
    "get_handler",
    "LookupSqlHandler",
    "SqlBatch",
    "SqlExecutor",
    "PostgreSQLLookupHandler",
]
