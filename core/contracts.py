# ============================================================================
# BASE CONTRACTS - LOOKUP SYNCHRONIZATION
# ============================================================================
# STATUS: Foundation - Plan data types
# PURPOSE: Immutable data passed from model discovery to SQL generation
# CREATED: 19 OCT 2026
# EXPORTS: NumericStorage, EnumValue, LookupTable, ForeignKeyEdge, SynchronizationPlan
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for lookup synchronization.

The SynchronizationPlan is the only artifact that crosses from model
discovery to SQL generation. It carries data only, so SQL handlers never
need to know how the model was reflected.

All models are frozen: they are hashable and safe to share.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# ENUMS
# ============================================================================

class NumericStorage(str, Enum):
    """Underlying numeric type of an enum, used to pick the Id column type."""
    BYTE = "byte"    # 0..255
    INT = "int"      # signed 32-bit


# ============================================================================
# PLAN MODELS
# ============================================================================

class EnumValue(BaseModel):
    """One lookup row: numeric id and display name."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=-2**31, le=2**31 - 1)
    name: str


class LookupTable(BaseModel):
    """
    A lookup table to maintain for one enum type.

    Maps to: <prefix><enum_type_name><suffix> table
    """
    model_config = ConfigDict(frozen=True)

    enum_type_name: str = Field(..., min_length=1)
    numeric_storage: NumericStorage = Field(default=NumericStorage.INT)
    values: Tuple[EnumValue, ...] = Field(default_factory=tuple)


class ForeignKeyEdge(BaseModel):
    """A storage column holding values of an enum type."""
    model_config = ConfigDict(frozen=True)

    referencing_table: str = Field(..., min_length=1)
    referencing_field: str = Field(..., min_length=1)
    enum_type_name: str = Field(..., min_length=1)
    referencing_schema: Optional[str] = Field(
        default=None,
        description="Schema of the referencing table (None = handler default)"
    )


class SynchronizationPlan(BaseModel):
    """All lookup tables and foreign keys to reconcile in one run."""
    model_config = ConfigDict(frozen=True)

    lookups: Tuple[LookupTable, ...] = Field(default_factory=tuple)
    edges: Tuple[ForeignKeyEdge, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _check_edges_have_lookups(self) -> "SynchronizationPlan":
        names = [lookup.enum_type_name for lookup in self.lookups]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate lookup tables in plan: {sorted(names)}")

        missing = sorted({e.enum_type_name for e in self.edges} - set(names))
        if missing:
            raise ValueError(f"Edges reference enums without lookup tables: {missing}")
        return self

    def get_lookup(self, enum_type_name: str) -> Optional[LookupTable]:
        """Find the lookup table for an enum type name."""
        for lookup in self.lookups:
            if lookup.enum_type_name == enum_type_name:
                return lookup
        return None

    @property
    def is_empty(self) -> bool:
        return not self.lookups and not self.edges


__all__ = [
    "NumericStorage",
    "EnumValue",
    "LookupTable",
    "ForeignKeyEdge",
    "SynchronizationPlan",
]
