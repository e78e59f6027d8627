# ============================================================================
# LOOKUP SYNC EXCEPTIONS
# ============================================================================
# STATUS: Foundation - Error types for the lookup synchronization engine
# PURPOSE: Distinguish caller errors, skippable discovery gaps and defects
# CREATED: 19 OCT 2026
# ============================================================================
"""
Exceptions raised by the lookup synchronization engine.

Executor (database) errors are never wrapped: they propagate to the caller
as whatever the driver raised.
"""

from typing import Any, Optional


class LookupSyncError(Exception):
    """Base exception for lookup synchronization."""
    pass


class InvalidArgumentError(LookupSyncError, ValueError):
    """Raised when a type cannot be turned into lookup values."""

    def __init__(self, message: str, argument: Optional[Any] = None):
        self.argument = argument
        super().__init__(message)


class DiscoveryIncompleteError(LookupSyncError):
    """Raised when a model field or entity cannot be classified."""

    def __init__(self, message: str, entity: Optional[str] = None, field: Optional[str] = None):
        self.entity = entity
        self.field = field
        super().__init__(message)


class PlanIntegrityError(LookupSyncError):
    """Raised when a synchronization plan would be internally inconsistent."""

    def __init__(self, message: str, enum_type_name: Optional[str] = None):
        self.enum_type_name = enum_type_name
        super().__init__(message)


__all__ = [
    "LookupSyncError",
    "InvalidArgumentError",
    "DiscoveryIncompleteError",
    "PlanIntegrityError",
]
