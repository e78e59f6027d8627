# ============================================================================
# POSTGRESQL LOOKUP HANDLER
# ============================================================================
# STATUS: Core - PostgreSQL rendering of lookup statements
# PURPOSE: Idempotent CREATE / merge / FOREIGN KEY SQL for PostgreSQL
# CREATED: 19 OCT 2026
# EXPORTS: PostgreSQLLookupHandler
# DEPENDENCIES: psycopg
# ============================================================================
"""
PostgreSQL Lookup Handler.

Guards:
    - Lookup tables: DO block, CREATE TABLE only when to_regclass() is NULL,
      so existing tables (and any columns added by hand) are left alone.
    - Foreign keys: DO block, ALTER TABLE only when pg_constraint has no
      constraint of the computed name on the referencing table.

Contents are merged through a session temp table:
    DELETE rows missing from staging
    INSERT ... ON CONFLICT ("Id") DO UPDATE SET "Name" (only when changed)
PostgreSQL before 17 has no MERGE ... WHEN NOT MATCHED BY SOURCE, so the
delete is a separate statement.
"""

from typing import Callable, Dict, List, Optional, Type

from psycopg import sql

from core.config import LookupDefaults
from core.schema.ddl_utils import (
    CommentBuilder,
    ConstraintBuilder,
    get_numeric_sql_type,
    qualified,
    quote_literal,
    regclass_literal,
)
from core.schema.dialects.base import LookupSqlHandler
from core.schema.statements import (
    AddForeignKey,
    CreateLookupTable,
    CreateStagingTable,
    DropStagingTable,
    MergeLookup,
    ParameterBinder,
    StageRow,
    Statement,
    TruncateStaging,
)

ID = sql.Identifier("Id")
NAME = sql.Identifier("Name")


class PostgreSQLLookupHandler(LookupSqlHandler):
    """Render lookup statements as PostgreSQL."""

    dialect_name = "postgresql"

    def __init__(self, settings: Optional[LookupDefaults] = None):
        super().__init__(settings)
        self._renderers: Dict[Type, Callable[[Statement, ParameterBinder], List[sql.Composable]]] = {
            CreateLookupTable: self._create_lookup_table,
            CreateStagingTable: self._create_staging_table,
            StageRow: self._stage_row,
            MergeLookup: self._merge_lookup,
            TruncateStaging: self._truncate_staging,
            DropStagingTable: self._drop_staging_table,
            AddForeignKey: self._add_foreign_key,
        }

    def render(self, statement: Statement, binder: ParameterBinder) -> List[sql.Composable]:
        renderer = self._renderers.get(type(statement))
        if renderer is None:
            raise TypeError(f"No PostgreSQL renderer for {type(statement).__name__}")
        return renderer(statement, binder)

    # =========================================================================
    # PHASE 1: TABLES
    # =========================================================================

    def _create_lookup_table(self, stmt: CreateLookupTable, binder: ParameterBinder) -> List[sql.Composable]:
        create = sql.SQL(
            "CREATE TABLE {table} ({id} {id_type} PRIMARY KEY, {name} VARCHAR({length}))"
        ).format(
            table=qualified(stmt.schema, stmt.table),
            id=ID,
            id_type=sql.SQL(get_numeric_sql_type(stmt.numeric_storage)),
            name=NAME,
            length=sql.SQL(str(int(stmt.name_length))),
        )
        comment = CommentBuilder.table(stmt.schema, stmt.table, stmt.comment)

        return [sql.SQL("""
DO $$
BEGIN
    IF to_regclass({regclass}) IS NULL THEN
        {create};
        {comment};
    END IF;
END$$""").format(
            regclass=regclass_literal(stmt.schema, stmt.table),
            create=create,
            comment=comment,
        )]

    # =========================================================================
    # PHASE 2: CONTENTS
    # =========================================================================

    def _create_staging_table(self, stmt: CreateStagingTable, binder: ParameterBinder) -> List[sql.Composable]:
        return [
            sql.SQL("CREATE TEMP TABLE IF NOT EXISTS {table} ({id} INTEGER, {name} VARCHAR({length}))").format(
                table=sql.Identifier(stmt.table),
                id=ID,
                name=NAME,
                length=sql.SQL(str(int(stmt.name_length))),
            ),
            sql.SQL("TRUNCATE TABLE {}").format(sql.Identifier(stmt.table)),
        ]

    def _stage_row(self, stmt: StageRow, binder: ParameterBinder) -> List[sql.Composable]:
        return [
            sql.SQL("INSERT INTO {table} ({id}, {name}) VALUES ({id_value}, {name_value})").format(
                table=sql.Identifier(stmt.staging_table),
                id=ID,
                name=NAME,
                id_value=binder.bind("id", stmt.id),
                name_value=binder.bind("name", stmt.name),
            )
        ]

    def _merge_lookup(self, stmt: MergeLookup, binder: ParameterBinder) -> List[sql.Composable]:
        target = qualified(stmt.schema, stmt.table)
        staging = sql.Identifier(stmt.staging_table)
        return [
            sql.SQL(
                "DELETE FROM {target} AS dst "
                "WHERE NOT EXISTS (SELECT 1 FROM {staging} AS src WHERE src.{id} = dst.{id})"
            ).format(target=target, staging=staging, id=ID),
            sql.SQL(
                "INSERT INTO {target} AS dst ({id}, {name}) "
                "SELECT src.{id}, src.{name} FROM {staging} AS src "
                "ON CONFLICT ({id}) DO UPDATE SET {name} = EXCLUDED.{name} "
                "WHERE dst.{name} IS DISTINCT FROM EXCLUDED.{name}"
            ).format(target=target, staging=staging, id=ID, name=NAME),
        ]

    def _truncate_staging(self, stmt: TruncateStaging, binder: ParameterBinder) -> List[sql.Composable]:
        return [sql.SQL("TRUNCATE TABLE {}").format(sql.Identifier(stmt.table))]

    def _drop_staging_table(self, stmt: DropStagingTable, binder: ParameterBinder) -> List[sql.Composable]:
        return [sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(stmt.table))]

    # =========================================================================
    # PHASE 3: FOREIGN KEYS
    # =========================================================================

    def _add_foreign_key(self, stmt: AddForeignKey, binder: ParameterBinder) -> List[sql.Composable]:
        alter = ConstraintBuilder.foreign_key(
            schema=stmt.schema,
            table=stmt.table,
            column=stmt.column,
            ref_schema=stmt.lookup_schema,
            ref_table=stmt.lookup_table,
            name=stmt.constraint_name,
        )
        return [sql.SQL("""
DO $$
BEGIN
    IF NOT EXISTS (
        SELECT 1 FROM pg_constraint
        WHERE conname = {name}
          AND conrelid = to_regclass({regclass})
    ) THEN
        {alter};
    END IF;
END$$""").format(
            name=sql.SQL(quote_literal(stmt.constraint_name)),
            regclass=regclass_literal(stmt.schema, stmt.table),
            alter=alter,
        )]


__all__ = ["PostgreSQLLookupHandler"]
