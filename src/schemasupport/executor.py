"""
Transactional application of a run plan.

The whole plan runs in one transaction: every change file and its ledger
row commit together, or nothing does.
"""

import logging
from collections.abc import Callable
from typing import Any

import psycopg2

from schemasupport.errors import ExecutionError
from schemasupport.models import ChangeFile, RunPlan, Statement
from schemasupport.registry import LedgerRegistry
from schemasupport.render import render_statement
from schemasupport.translate import translate
from schemasupport.utils.tracing import add_span_event, trace_operation

logger = logging.getLogger(__name__)
sql_logger = logging.getLogger("schemasupport.sql")


def _noop(text: str) -> None:
    pass


def _execute(cursor, change: ChangeFile, statement: Statement) -> None:
    try:
        cursor.execute(statement.sql, statement.params)
    except psycopg2.Error as e:
        raise ExecutionError(change.path, e) from e


def execute_plan(
    connection: Any,
    plan: RunPlan,
    registry: LedgerRegistry,
    dry_run: bool = False,
    verbose: bool = False,
    echo: Callable[[str], None] | None = None,
) -> int:
    """
    Apply every pending change file and record it in the ledger

    Under dry run each file is still translated (so CSV problems surface)
    but the connection is never used.

    Args:
        connection: psycopg2 connection
        plan: Run plan from reconcile()
        registry: Ledger the applied files are appended to
        dry_run: Translate and count but do not execute or commit
        verbose: Pass rendered statements to echo
        echo: Receiver for verbose output (default: the schemasupport.sql logger)

    Returns:
        Number of files applied (or that would have been, under dry run)

    Raises:
        TranslationError: A change file could not be translated
        ExecutionError: A statement or the commit failed; nothing is committed
    """
    if not plan.pending:
        logger.info("No pending change files")
        return 0

    emit = (echo or sql_logger.info) if verbose else _noop
    applied = 0

    with trace_operation("execute_plan", files=len(plan), dry_run=dry_run):
        if dry_run:
            cursor = None
        else:
            # One explicit transaction even if the caller handed us an
            # autocommit connection
            restore_autocommit = connection.autocommit
            if restore_autocommit:
                connection.autocommit = False
            cursor = connection.cursor()

        emit("begin;")
        committed = False

        try:
            for change in plan:
                logger.info(f"Applying {change.path}", extra={"fingerprint": change.fingerprint})

                for statement in translate(change):
                    emit(render_statement(statement.sql, statement.params, connection))
                    if cursor is not None:
                        _execute(cursor, change, statement)

                record = registry.insert_statement(change)
                emit(render_statement(record.sql, record.params, connection))
                if cursor is not None:
                    try:
                        registry.append(cursor, change)
                    except psycopg2.Error as e:
                        raise ExecutionError(change.path, e) from e

                applied += 1
                add_span_event("change_file_applied", path=change.path)

            emit("commit;")
            if cursor is not None:
                try:
                    connection.commit()
                except psycopg2.Error as e:
                    raise ExecutionError(None, e) from e
            committed = True

        finally:
            if not committed:
                emit("rollback;")
            if cursor is not None:
                if not committed:
                    logger.warning(f"Rolling back {len(plan)} change file(s)")
                    try:
                        connection.rollback()
                    except psycopg2.Error as e:
                        logger.error(f"Transaction rollback error: {e}")
                cursor.close()
                if restore_autocommit:
                    connection.autocommit = True

    return applied
