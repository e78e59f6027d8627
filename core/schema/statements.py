# ============================================================================
# LOOKUP SQL STATEMENTS
# ============================================================================
# STATUS: Core - Dialect-neutral statement fragments
# PURPOSE: Typed description of the SQL batch before rendering
# CREATED: 19 OCT 2026
# EXPORTS: Statement types, Phase, ParameterBinder, NamedParameterBinder, LiteralBinder
# DEPENDENCIES: psycopg
# ============================================================================
"""
Lookup SQL Statements.

A synchronization batch is a list of typed statements. Dialect handlers
render each one; they never see enums or models.

Values are bound through a batch-scoped ParameterBinder:
    - NamedParameterBinder: placeholders id0, name1, id2, ... numbered
      across the whole batch, values collected for the executor
    - LiteralBinder: values inlined as SQL literals (migration scripts)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple, Union

from psycopg import sql

from core.contracts import NumericStorage
from core.schema.ddl_utils import quote_literal


class Phase(str, Enum):
    """Batch phases, always emitted in this order."""
    CREATE_TABLES = "create_tables"
    SYNC_CONTENTS = "sync_contents"
    FOREIGN_KEYS = "foreign_keys"


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class CreateLookupTable:
    """Create a lookup table (and its comment) unless it already exists."""
    schema: str
    table: str
    numeric_storage: NumericStorage
    name_length: int
    comment: str
    phase: Phase = Phase.CREATE_TABLES


@dataclass(frozen=True)
class CreateStagingTable:
    """Create the temporary staging table unless it exists, then empty it."""
    table: str
    name_length: int
    phase: Phase = Phase.SYNC_CONTENTS


@dataclass(frozen=True)
class StageRow:
    """Insert one desired row into the staging table."""
    staging_table: str
    id: int
    name: str
    phase: Phase = Phase.SYNC_CONTENTS


@dataclass(frozen=True)
class MergeLookup:
    """Make a lookup table's rows exactly match the staging table."""
    staging_table: str
    schema: str
    table: str
    phase: Phase = Phase.SYNC_CONTENTS


@dataclass(frozen=True)
class TruncateStaging:
    table: str
    phase: Phase = Phase.SYNC_CONTENTS


@dataclass(frozen=True)
class DropStagingTable:
    table: str
    phase: Phase = Phase.SYNC_CONTENTS


@dataclass(frozen=True)
class AddForeignKey:
    """Add a foreign key to a lookup table unless a constraint of that name exists."""
    constraint_name: str
    schema: str
    table: str
    column: str
    lookup_schema: str
    lookup_table: str
    phase: Phase = Phase.FOREIGN_KEYS


Statement = Union[
    CreateLookupTable,
    CreateStagingTable,
    StageRow,
    MergeLookup,
    TruncateStaging,
    DropStagingTable,
    AddForeignKey,
]


# ============================================================================
# PARAMETER BINDING
# ============================================================================

class ParameterBinder(ABC):
    """Turns values into SQL fragments for one batch."""

    @abstractmethod
    def bind(self, prefix: str, value: Any) -> sql.Composable:
        """Return the fragment standing for value."""

    @property
    def parameters(self) -> List[Tuple[str, Any]]:
        return []


class NamedParameterBinder(ParameterBinder):
    """
    Named placeholders with a single counter for the whole batch.

    The executor receives every lookup's values in one parameter list, so
    names must never repeat within a batch.
    """

    def __init__(self, start: int = 0):
        self.next_index = start
        self._parameters: List[Tuple[str, Any]] = []

    def bind(self, prefix: str, value: Any) -> sql.Composable:
        name = f"{prefix}{self.next_index}"
        self.next_index += 1
        self._parameters.append((name, value))
        return sql.Placeholder(name)

    @property
    def parameters(self) -> List[Tuple[str, Any]]:
        return list(self._parameters)


class LiteralBinder(ParameterBinder):
    """Inline values as SQL literals."""

    def bind(self, prefix: str, value: Any) -> sql.Composable:
        return sql.SQL(quote_literal(value))


__all__ = [
    "Phase",
    "CreateLookupTable",
    "CreateStagingTable",
    "StageRow",
    "MergeLookup",
    "TruncateStaging",
    "DropStagingTable",
    "AddForeignKey",
    "Statement",
    "ParameterBinder",
    "NamedParameterBinder",
    "LiteralBinder",
]
