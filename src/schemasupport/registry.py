"""
Ledger of applied change files.

The ledger is a single append-only table, by default
``schemasupport.files (path, fingerprint, created)``. Rows are never updated
or deleted.
"""

import logging
import re
from typing import Any

import psycopg2
from psycopg2 import sql

from schemasupport.errors import PersistenceError
from schemasupport.models import AppliedRecord, ChangeFile, Statement
from schemasupport.utils.tracing import trace_operation

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "schemasupport"
DEFAULT_TABLE = "files"

VALID_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

NAMESPACE_EXISTS_QUERY = "select count(1) from pg_namespace where nspname = %s limit 1;"
TABLE_EXISTS_QUERY = (
    "select count(1) from pg_tables where schemaname = %s and tablename = %s limit 1;"
)


def validate_name(name: str) -> str:
    """
    Check a schema or table name before it is composed into SQL

    Raises:
        ValueError: If name is not a plain ASCII identifier
    """
    if not VALID_NAME_PATTERN.match(name):
        raise ValueError(f"Invalid identifier format: {name}")
    return name


class LedgerRegistry:
    """
    Creates, reads and appends to the ledger table

    Args:
        connection: psycopg2 connection (autocommit off)
        schema: Schema holding the ledger table
        table: Ledger table name
        echo: Optional callable receiving DDL text as it is issued
    """

    def __init__(
        self,
        connection: Any,
        schema: str = DEFAULT_SCHEMA,
        table: str = DEFAULT_TABLE,
        echo=None,
    ):
        self.connection = connection
        self.schema = validate_name(schema)
        self.table = validate_name(table)
        self.echo = echo
        self.qualified = sql.Identifier(self.schema, self.table)

    def create_schema_sql(self) -> sql.Composed:
        return sql.SQL("create schema {};").format(sql.Identifier(self.schema))

    def create_table_sql(self) -> sql.Composed:
        return sql.SQL(
            "create table {} (path text not null, fingerprint text not null, "
            "created timestamptz not null default now());"
        ).format(self.qualified)

    def _rollback(self) -> None:
        try:
            self.connection.rollback()
        except psycopg2.Error as e:
            logger.error(f"Transaction rollback error: {e}")

    def ensure(self, dry_run: bool = False) -> bool:
        """
        Create the ledger schema and table if they do not exist

        Under dry run nothing is created.

        Returns:
            True if the ledger table exists (or was just created), False if
            it is missing and only would have been created

        Raises:
            PersistenceError: If checking or creating the ledger fails
        """
        with trace_operation("ledger.ensure", schema=self.schema, table=self.table, dry_run=dry_run):
            try:
                return self._ensure(dry_run)
            except psycopg2.Error as e:
                self._rollback()
                raise PersistenceError(
                    f"Unable to prepare ledger table {self.schema}.{self.table}: {e}"
                ) from e

    def _ensure(self, dry_run: bool) -> bool:
        created = False

        with self.connection.cursor() as cursor:
            cursor.execute(NAMESPACE_EXISTS_QUERY, (self.schema,))
            if cursor.fetchone()[0] == 0:
                statement = self.create_schema_sql()
                if self.echo is not None:
                    self.echo(statement.as_string(self.connection))
                if not dry_run:
                    cursor.execute(statement)
                    created = True
                    logger.info(f"Created schema {self.schema}")

            cursor.execute(TABLE_EXISTS_QUERY, (self.schema, self.table))
            exists = cursor.fetchone()[0] > 0
            if not exists:
                statement = self.create_table_sql()
                if self.echo is not None:
                    self.echo(statement.as_string(self.connection))
                if dry_run:
                    logger.info(
                        f"Ledger table {self.schema}.{self.table} does not exist; "
                        "dry run treats it as empty"
                    )
                else:
                    cursor.execute(statement)
                    created = exists = True
                    logger.info(f"Created ledger table {self.schema}.{self.table}")

        if created:
            self.connection.commit()
        else:
            self.connection.rollback()

        return exists

    def load(self, ledger_exists: bool = True) -> list[AppliedRecord]:
        """
        Load every applied record

        Args:
            ledger_exists: Result of ensure(); when False the ledger is
                known to be empty and is not queried

        Raises:
            PersistenceError: If the ledger cannot be read
        """
        if not ledger_exists:
            return []

        query = sql.SQL("select path, fingerprint, created from {};").format(self.qualified)

        with trace_operation("ledger.load", schema=self.schema, table=self.table) as span:
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(query)
                    rows = cursor.fetchall()
            except psycopg2.Error as e:
                raise PersistenceError(
                    f"Unable to load ledger table {self.schema}.{self.table}: {e}"
                ) from e
            finally:
                # Reads only; end the implicit transaction
                self._rollback()

            span.set_attribute("records", len(rows))

        logger.debug(f"Loaded {len(rows)} ledger record(s)")
        return [AppliedRecord(path=row[0], fingerprint=row[1], applied_at=row[2]) for row in rows]

    def insert_statement(self, change: ChangeFile) -> Statement:
        """The statement recording change as applied"""
        return Statement(
            sql=sql.SQL("insert into {} (path, fingerprint) values (%s, %s);").format(self.qualified),
            params=(change.path, change.fingerprint),
        )

    def append(self, cursor, change: ChangeFile) -> None:
        """Record change as applied, inside the caller's transaction"""
        statement = self.insert_statement(change)
        cursor.execute(statement.sql, statement.params)
