# ============================================================================
# POSTGRESQL EXECUTOR
# ============================================================================
# STATUS: Infrastructure - PostgreSQL access for lookup synchronization
# PURPOSE: Run lookup batches atomically and inspect the resulting tables
# CREATED: 19 OCT 2026
# ============================================================================
"""
PostgreSQL Executor

PostgreSQLRepository is the SqlExecutor used in production:

    repo = PostgreSQLRepository()              # DATABASE_URL or POSTGRES_*
    EnumToLookup().apply(reflector, repo)      # calls repo.run(sql, params)

Lookup batches hold many statements and %(name)s placeholders. psycopg's
default cursor binds server-side, which allows only one statement per
execute(); run() therefore uses a ClientCursor, which binds client-side.

Connections are opened per call. psycopg's connection context manager
commits on success and rolls back on error, so every public method is its
own transaction.
"""

import logging
import os
from contextlib import contextmanager
from functools import cached_property
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import psycopg
from psycopg import sql
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row

logger = logging.getLogger(__name__)

ID_COLUMN = sql.Identifier("Id")
NAME_COLUMN = sql.Identifier("Name")


def connection_string_from_env() -> str:
    """
    Build a libpq connection string from the environment.

    DATABASE_URL wins; otherwise POSTGRES_HOST and POSTGRES_DB are required
    and POSTGRES_PORT / USER / PASSWORD / SSLMODE are optional.

    Raises:
        ValueError: Neither form is configured
    """
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    host = os.environ.get("POSTGRES_HOST")
    dbname = os.environ.get("POSTGRES_DB")
    if not (host and dbname):
        raise ValueError(
            "PostgreSQL is not configured: set DATABASE_URL, "
            "or POSTGRES_HOST and POSTGRES_DB"
        )
    return make_conninfo(
        host=host,
        port=os.environ.get("POSTGRES_PORT", "5432"),
        dbname=dbname,
        user=os.environ.get("POSTGRES_USER", "postgres"),
        password=os.environ.get("POSTGRES_PASSWORD", ""),
        sslmode=os.environ.get("POSTGRES_SSLMODE", "prefer"),
    )


class PostgreSQLRepository:
    """
    PostgreSQL access for lookup synchronization.

    Args:
        connection_string: libpq connection string (default: from environment,
            resolved on first use)
        schema_name: Default schema for inspection helpers
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        schema_name: Optional[str] = None,
    ):
        self._explicit_conn_string = connection_string
        self.schema_name = schema_name or os.environ.get("ENUM_LOOKUP_SCHEMA", "public")

    @cached_property
    def conn_string(self) -> str:
        return self._explicit_conn_string or connection_string_from_env()

    # ========================================================================
    # CONNECTIONS
    # ========================================================================

    @contextmanager
    def get_connection(self) -> Iterator[psycopg.Connection]:
        """Open a connection (dict rows) committed on success, rolled back on error."""
        try:
            with psycopg.connect(self.conn_string, row_factory=dict_row) as conn:
                yield conn
        except psycopg.Error as e:
            logger.error(f"PostgreSQL error: {e}")
            raise

    @contextmanager
    def get_cursor(self, conn: Optional[psycopg.Connection] = None) -> Iterator[psycopg.Cursor]:
        """Cursor on conn, or on a fresh connection when conn is None."""
        if conn is not None:
            with conn.cursor() as cur:
                yield cur
            return
        with self.get_connection() as own:
            with own.cursor() as cur:
                yield cur

    def execute(self, query, params=None) -> None:
        with self.get_cursor() as cur:
            cur.execute(query, params)

    def fetch_one(self, query, params=None) -> Optional[Dict[str, Any]]:
        with self.get_cursor() as cur:
            return cur.execute(query, params).fetchone()

    def fetch_all(self, query, params=None) -> List[Dict[str, Any]]:
        with self.get_cursor() as cur:
            return cur.execute(query, params).fetchall()

    # ========================================================================
    # SQL EXECUTOR
    # ========================================================================

    def run(self, sql_text: str, parameters: Sequence[Tuple[str, Any]]) -> None:
        """
        Execute a multi-statement batch in one transaction.

        Args:
            sql_text: Batch with %(name)s placeholders
            parameters: (name, value) pairs

        Raises:
            psycopg.Error: Propagated unchanged after rollback
        """
        params = dict(parameters) if parameters else None
        with self.get_connection() as conn:
            with conn.transaction():
                with psycopg.ClientCursor(conn) as cur:
                    cur.execute(sql_text, params)
        logger.info(f"Executed lookup batch ({len(parameters or [])} parameters)")

    # ========================================================================
    # INSPECTION
    # ========================================================================

    @staticmethod
    def _regclass(schema: str, table: str) -> str:
        return sql.Identifier(schema, table).as_string(None)

    def check_table_exists(self, schema: str, table: str) -> bool:
        row = self.fetch_one(
            "SELECT to_regclass(%s) IS NOT NULL AS table_exists",
            (self._regclass(schema, table),),
        )
        return bool(row and row["table_exists"])

    def get_lookup_rows(self, schema: str, table: str) -> List[Dict[str, Any]]:
        """Rows of a lookup table as {"id", "name"} dicts, ordered by Id."""
        query = sql.SQL("SELECT {id} AS id, {name} AS name FROM {table} ORDER BY {id}").format(
            id=ID_COLUMN,
            name=NAME_COLUMN,
            table=sql.Identifier(schema, table),
        )
        return self.fetch_all(query)

    def get_foreign_key_names(self, schema: str, table: str) -> List[str]:
        rows = self.fetch_all(
            "SELECT conname FROM pg_constraint "
            "WHERE contype = 'f' AND conrelid = to_regclass(%s) ORDER BY conname",
            (self._regclass(schema, table),),
        )
        return [row["conname"] for row in rows]


__all__ = [
    "PostgreSQLRepository",
    "connection_string_from_env",
]
