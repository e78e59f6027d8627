# ============================================================================
# LOOKUP SQL HANDLER BASE
# ============================================================================
# STATUS: Core - Dialect-independent batch assembly
# PURPOSE: Turn a SynchronizationPlan into an ordered, idempotent SQL batch
# CREATED: 19 OCT 2026
# EXPORTS: LookupSqlHandler, SqlExecutor, SqlBatch
# DEPENDENCIES: psycopg
# ============================================================================
"""
Lookup SQL Handler Base.

Subclasses implement render() for one SQL dialect. Everything else
(statement order, phase separation, parameter numbering) lives here.

Two entry points share the same SQL body:
    handler.apply(plan, executor)              # parameterized, executed
    handler.generate_migration_sql(plan)       # literals inlined, returned
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from psycopg import sql

from core.config import LookupDefaults, get_defaults
from core.contracts import SynchronizationPlan
from core.logging import ComponentType, get_logger, log_context
from core.schema.ddl_utils import ConstraintBuilder, render
from core.schema.statements import (
    AddForeignKey,
    CreateLookupTable,
    CreateStagingTable,
    DropStagingTable,
    LiteralBinder,
    MergeLookup,
    NamedParameterBinder,
    ParameterBinder,
    Phase,
    StageRow,
    Statement,
    TruncateStaging,
)

logger = get_logger("schema.dialect", ComponentType.DIALECT)


@runtime_checkable
class SqlExecutor(Protocol):
    """Runs one SQL batch with named parameters."""

    def run(self, sql_text: str, parameters: Sequence[Tuple[str, Any]]) -> None:
        ...


@dataclass
class SqlBatch:
    """Rendered SQL text plus the parameters it refers to."""
    sql_text: str
    parameters: List[Tuple[str, Any]] = field(default_factory=list)
    statement_count: int = 0


class LookupSqlHandler(ABC):
    """
    Generate idempotent lookup SQL for one dialect.

    Phases are emitted in a fixed order: table creation, content
    synchronization, foreign keys. Each phase is safe to re-run on its own.
    """

    dialect_name: str = "abstract"

    def __init__(self, settings: Optional[LookupDefaults] = None):
        self.settings = settings or get_defaults()

    # =========================================================================
    # NAMING
    # =========================================================================

    def table_name(self, enum_type_name: str) -> str:
        return self.settings.table_name(enum_type_name)

    # =========================================================================
    # STATEMENT ASSEMBLY
    # =========================================================================

    def build_statements(self, plan: SynchronizationPlan) -> List[Statement]:
        """Dialect-neutral statements for a plan, in execution order."""
        s = self.settings
        statements: List[Statement] = []

        for lookup in plan.lookups:
            statements.append(CreateLookupTable(
                schema=s.schema_name,
                table=self.table_name(lookup.enum_type_name),
                numeric_storage=lookup.numeric_storage,
                name_length=s.name_field_length,
                comment=s.table_comment,
            ))

        if plan.lookups:
            statements.append(CreateStagingTable(
                table=s.staging_table_name,
                name_length=s.name_field_length,
            ))
            for lookup in plan.lookups:
                table = self.table_name(lookup.enum_type_name)
                with log_context(enum_type=lookup.enum_type_name, table=table):
                    for value in lookup.values:
                        statements.append(StageRow(
                            staging_table=s.staging_table_name,
                            id=value.id,
                            name=value.name,
                        ))
                    statements.append(MergeLookup(
                        staging_table=s.staging_table_name,
                        schema=s.schema_name,
                        table=table,
                    ))
                    statements.append(TruncateStaging(table=s.staging_table_name))
                    logger.debug(f"Staged {len(lookup.values)} rows for merge")
            statements.append(DropStagingTable(table=s.staging_table_name))

        for edge in plan.edges:
            statements.append(AddForeignKey(
                constraint_name=ConstraintBuilder.foreign_key_name(
                    edge.referencing_table, edge.referencing_field
                ),
                schema=edge.referencing_schema or s.schema_name,
                table=edge.referencing_table,
                column=edge.referencing_field,
                lookup_schema=s.schema_name,
                lookup_table=self.table_name(edge.enum_type_name),
            ))

        return statements

    @abstractmethod
    def render(self, statement: Statement, binder: ParameterBinder) -> List[sql.Composable]:
        """Render one statement as one or more SQL statements."""

    def build_sql(self, plan: SynchronizationPlan, use_parameters: bool) -> SqlBatch:
        """
        Render the whole batch.

        Args:
            plan: Synchronization plan
            use_parameters: Bind values as named parameters instead of literals

        Returns:
            SqlBatch; parameters is empty when use_parameters is False
        """
        binder: ParameterBinder = NamedParameterBinder() if use_parameters else LiteralBinder()

        chunks: List[str] = []
        current_phase: Optional[Phase] = None
        count = 0
        for statement in self.build_statements(plan):
            if current_phase is not None and statement.phase != current_phase:
                chunks.append("\n")
            current_phase = statement.phase
            for composed in self.render(statement, binder):
                chunks.append(render(composed).strip() + ";\n")
                count += 1

        return SqlBatch(
            sql_text="".join(chunks),
            parameters=binder.parameters,
            statement_count=count,
        )

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def apply(self, plan: SynchronizationPlan, executor: SqlExecutor) -> SqlBatch:
        """
        Render with parameters and run the batch through the executor.

        Executor errors propagate unchanged. The batch is idempotent, so
        running it again is the recovery path.
        """
        batch = self.build_sql(plan, use_parameters=True)
        if not batch.statement_count:
            logger.info("Nothing to synchronize")
            return batch

        logger.info(
            f"Applying {batch.statement_count} {self.dialect_name} statements "
            f"with {len(batch.parameters)} parameters"
        )
        executor.run(batch.sql_text, batch.parameters)
        return batch

    def generate_migration_sql(self, plan: SynchronizationPlan) -> str:
        """Render the batch with literal values, without running it."""
        return self.build_sql(plan, use_parameters=False).sql_text

    script = generate_migration_sql


__all__ = [
    "SqlExecutor",
    "SqlBatch",
    "LookupSqlHandler",
]
