# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - Shared helpers for lookup SQL generation
# PURPOSE: Literal quoting, type mapping, constraint naming, comment builders
# CREATED: 19 OCT 2026
# EXPORTS: quote_literal, NUMERIC_TYPE_MAP, get_numeric_sql_type,
#          ConstraintBuilder, CommentBuilder, render
# DEPENDENCIES: psycopg
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

Builders return psycopg.sql.Composed objects. Identifiers always go through
sql.Identifier. Literal values go through quote_literal, which only doubles
single quotes: it is meant for the enum names and descriptions defined in
application code, not for untrusted input.

Usage:
    from core.schema.ddl_utils import CommentBuilder, render

    stmt = CommentBuilder.table("public", "Enum_Ears", "Generated")
    print(render(stmt))
"""

import hashlib
from typing import Any, Union

from psycopg import sql

from core.contracts import NumericStorage


# PostgreSQL truncates identifiers longer than this (NAMEDATALEN - 1)
MAX_IDENTIFIER_LENGTH = 63


# ============================================================================
# LITERALS AND RENDERING
# ============================================================================

def quote_literal(value: Any) -> str:
    """
    Render a value as a SQL literal.

    Strings are wrapped in single quotes with embedded quotes doubled
    ("O'Brien" -> 'O''Brien'). Integers are rendered as-is.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    raise TypeError(f"Cannot render {type(value).__name__} as a SQL literal")


def render(stmt: Union[sql.Composable, str]) -> str:
    """Render a composed statement without a connection."""
    if isinstance(stmt, str):
        return stmt
    return stmt.as_string(None)


def qualified(schema: str, table: str) -> sql.Identifier:
    """Schema-qualified table identifier ("schema"."table")."""
    return sql.Identifier(schema, table)


def regclass_literal(schema: str, table: str) -> sql.SQL:
    """Quoted identifier wrapped as a string literal, for to_regclass()."""
    return sql.SQL(quote_literal(render(qualified(schema, table))))


# ============================================================================
# TYPE MAPPING
# ============================================================================

NUMERIC_TYPE_MAP = {
    # PostgreSQL has no unsigned types; SMALLINT is the smallest that holds 0..255
    NumericStorage.BYTE: "SMALLINT",
    NumericStorage.INT: "INTEGER",
}


def get_numeric_sql_type(storage: NumericStorage) -> str:
    """Map an enum's numeric storage to the Id column type."""
    return NUMERIC_TYPE_MAP.get(NumericStorage(storage), "INTEGER")


# ============================================================================
# CONSTRAINT BUILDER
# ============================================================================

class ConstraintBuilder:
    """
    Builder for constraint names and DDL.

    All methods are static.
    """

    @staticmethod
    def _shorten(name: str) -> str:
        """Keep names within the identifier limit, stable across runs."""
        if len(name.encode("utf-8")) <= MAX_IDENTIFIER_LENGTH:
            return name
        digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
        head = name.encode("utf-8")[:MAX_IDENTIFIER_LENGTH - len(digest) - 1]
        return f"{head.decode('utf-8', errors='ignore')}_{digest}"

    @staticmethod
    def foreign_key_name(table: str, column: str) -> str:
        """Conventional foreign key name: FK_<table>_<column>."""
        return ConstraintBuilder._shorten(f"FK_{table}_{column}")

    @staticmethod
    def foreign_key(
        schema: str,
        table: str,
        column: str,
        ref_schema: str,
        ref_table: str,
        ref_column: str = "Id",
        name: str = None,
    ) -> sql.Composed:
        """
        ALTER TABLE ... ADD CONSTRAINT ... FOREIGN KEY statement.

        Args:
            schema: Referencing table schema
            table: Referencing table
            column: Referencing column
            ref_schema: Referenced table schema
            ref_table: Referenced table
            ref_column: Referenced column
            name: Optional constraint name (default FK_<table>_<column>)

        Returns:
            sql.Composed ALTER TABLE statement
        """
        fk_name = name or ConstraintBuilder.foreign_key_name(table, column)
        return sql.SQL(
            "ALTER TABLE {table} ADD CONSTRAINT {name} "
            "FOREIGN KEY ({column}) REFERENCES {ref_table} ({ref_column})"
        ).format(
            table=qualified(schema, table),
            name=sql.Identifier(fk_name),
            column=sql.Identifier(column),
            ref_table=qualified(ref_schema, ref_table),
            ref_column=sql.Identifier(ref_column),
        )


# ============================================================================
# COMMENT BUILDER
# ============================================================================

class CommentBuilder:
    """
    Builder for PostgreSQL COMMENT statements.

    COMMENT does not accept bind parameters, so the text is always a literal.
    """

    @staticmethod
    def table(schema: str, table: str, comment: str) -> sql.Composed:
        """Add comment to table."""
        return sql.SQL("COMMENT ON TABLE {} IS {}").format(
            qualified(schema, table),
            sql.SQL(quote_literal(comment)),
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MAX_IDENTIFIER_LENGTH",
    "quote_literal",
    "render",
    "qualified",
    "regclass_literal",
    "NUMERIC_TYPE_MAP",
    "get_numeric_sql_type",
    "ConstraintBuilder",
    "CommentBuilder",
]
