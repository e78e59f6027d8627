# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export plan contracts and error types
# CREATED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    EnumValue,
    ForeignKeyEdge,
    LookupTable,
    NumericStorage,
    SynchronizationPlan,
)
from core.exceptions import (
    DiscoveryIncompleteError,
    InvalidArgumentError,
    LookupSyncError,
    PlanIntegrityError,
)

__all__ = [
    # Contracts
    "NumericStorage",
    "EnumValue",
    "LookupTable",
    "ForeignKeyEdge",
    "SynchronizationPlan",
    # Errors
    "LookupSyncError",
    "InvalidArgumentError",
    "DiscoveryIncompleteError",
    "PlanIntegrityError",
]
