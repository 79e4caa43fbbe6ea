"""
Entry points tying discovery, the ledger, reconciliation and execution
together.

A run has two phases:

- plan_run(): discover files, make sure the ledger exists, load it and
  reconcile. Fails with no database writes other than creating the ledger
  (which dry run skips).
- apply_plan(): execute the plan in a single transaction.

run() discovers first, then performs both phases under a PostgreSQL advisory
lock so two concurrent runs against the same database cannot apply the
same file twice.
"""

import logging
import time
from contextlib import contextmanager, nullcontext

import psycopg2

from schemasupport.discovery import discover
from schemasupport.errors import PersistenceError, SchemaSupportError
from schemasupport.executor import execute_plan, sql_logger
from schemasupport.models import Options, RunPlan, Stats
from schemasupport.reconcile import reconcile
from schemasupport.registry import LedgerRegistry
from schemasupport.utils.logging import ContextLogger
from schemasupport.utils.metrics import MigrationMetrics
from schemasupport.utils.tracing import trace_operation

logger = logging.getLogger(__name__)

# Advisory lock key shared by every schemasupport process ("schemasu")
ADVISORY_LOCK_KEY = 0x736368656D617375


@contextmanager
def advisory_lock(connection, key: int = ADVISORY_LOCK_KEY):
    """
    Hold a session-level advisory lock for the duration of the block

    Session locks survive the commits and rollbacks issued inside the block
    and are released explicitly on exit.

    Raises:
        PersistenceError: If the lock cannot be taken
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("select pg_advisory_lock(%s);", (key,))
        connection.rollback()
    except psycopg2.Error as e:
        raise PersistenceError(f"Unable to acquire advisory lock {key}: {e}") from e

    logger.debug(f"Acquired advisory lock {key}")
    try:
        yield
    finally:
        try:
            with connection.cursor() as cursor:
                cursor.execute("select pg_advisory_unlock(%s);", (key,))
            connection.rollback()
            logger.debug(f"Released advisory lock {key}")
        except psycopg2.Error as e:
            logger.error(f"Failed to release advisory lock {key}: {e}")


def _registry_for(options: Options, registry: LedgerRegistry | None) -> LedgerRegistry:
    if registry is not None:
        return registry
    echo = (options.echo or sql_logger.info) if options.verbose else None
    return LedgerRegistry(options.connection, echo=echo)


def plan_run(options: Options, registry: LedgerRegistry | None = None) -> RunPlan:
    """
    Build the run plan without applying anything

    Raises:
        DiscoveryError, PersistenceError, DriftError, DuplicateContentError
    """
    registry = _registry_for(options, registry)
    return _reconcile_with_ledger(options, registry, discover(options.search_root))


def _reconcile_with_ledger(options: Options, registry: LedgerRegistry, discovered) -> RunPlan:
    ledger_exists = registry.ensure(dry_run=options.dry_run)
    applied = registry.load(ledger_exists=ledger_exists)
    return reconcile(discovered, applied)


def apply_plan(options: Options, plan: RunPlan, registry: LedgerRegistry | None = None) -> Stats:
    """
    Execute a plan produced by plan_run()

    Raises:
        TranslationError, ExecutionError
    """
    registry = _registry_for(options, registry)

    applied = execute_plan(
        options.connection,
        plan,
        registry,
        dry_run=options.dry_run,
        verbose=options.verbose,
        echo=options.echo,
    )
    return Stats(discovered=plan.discovered, applied=applied)


def run(options: Options, metrics: MigrationMetrics | None = None) -> Stats:
    """
    Bring the database up to date with the change files under the search root

    Args:
        options: Run configuration including the open connection
        metrics: Optional metrics collector

    Returns:
        Stats with the number of discovered and applied files

    Raises:
        SchemaSupportError: Any planning or execution failure
    """
    log = ContextLogger(__name__, search_root=options.search_root, dry_run=options.dry_run)
    registry = _registry_for(options, None)
    start = time.monotonic()

    log.info("Starting schemasupport run")

    try:
        with trace_operation("schemasupport.run", search_root=options.search_root, dry_run=options.dry_run) as span:
            # Discovery first: a bad search root fails before any database access
            discovered = discover(options.search_root)

            guard = advisory_lock(options.connection) if options.lock else nullcontext()
            with guard:
                plan = _reconcile_with_ledger(options, registry, discovered)
                stats = apply_plan(options, plan, registry)

            span.set_attribute("discovered", stats.discovered)
            span.set_attribute("applied", stats.applied)

    except SchemaSupportError as e:
        log.error(f"Run failed: {e}", error_type=type(e).__name__)
        if metrics is not None:
            metrics.record_failure(e, options.dry_run, time.monotonic() - start)
        raise

    if metrics is not None:
        metrics.record_run(stats, options.dry_run, time.monotonic() - start)

    log.info(
        f"Run complete: {stats.discovered} file(s), {stats.applied} "
        f"{'new' if options.dry_run else 'applied'}",
        discovered=stats.discovered,
        applied=stats.applied,
    )
    return stats
