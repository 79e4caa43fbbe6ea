"""
CLI command implementation: connect, run, report.
"""

import argparse
import logging
import sys
import time
from pathlib import PurePath

import psycopg2

from schemasupport.errors import SchemaSupportError
from schemasupport.models import Options
from schemasupport.runner import run
from schemasupport.utils.metrics import MigrationMetrics
from schemasupport.utils.retry import retry_database_operation

from .credentials import CredentialsError, get_connection_config

logger = logging.getLogger(__name__)


@retry_database_operation(max_retries=3, base_delay=1.0)
def connect(config: dict):
    """Open a psycopg2 connection, retrying transient failures"""
    return psycopg2.connect(connect_timeout=10, **config)


def truncate_duration(seconds: float) -> float:
    """
    Drop precision that is noise at the given magnitude: whole milliseconds
    above 1ms, tenths of a second above 100ms, whole seconds above 10s and
    whole minutes above 10 minutes.
    """
    ms = int(seconds * 1000)
    for threshold, step in ((600.0, 60_000), (10.0, 1000), (0.1, 100), (0.001, 1)):
        if seconds > threshold:
            return ms // step * step / 1000
    return seconds


def format_duration(seconds: float) -> str:
    seconds = truncate_duration(seconds)
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    if seconds < 60:
        return f"{seconds:g}s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}m{rest}s"


def summary_line(stats, dry_run: bool, elapsed: float) -> str:
    if dry_run:
        msg, verb = "Schema dry run complete", "new"
    else:
        msg, verb = "Schema up to date", "executed"
    return f"{msg} ({stats.discovered} files, {stats.applied} {verb}) in {format_duration(elapsed)}"


def cmd_run(args: argparse.Namespace) -> int:
    """
    Run schemasupport against the configured database

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit status
    """
    start = time.monotonic()
    metrics = MigrationMetrics() if args.pushgateway else None

    try:
        config = get_connection_config(args)
    except CredentialsError as e:
        logger.error(str(e))
        print(e, file=sys.stderr)
        return 1

    try:
        connection = connect(config)
    except psycopg2.Error as e:
        logger.error(f"Unable to connect to PostgreSQL: {e}")
        print(f"Unable to connect to PostgreSQL: {e}", file=sys.stderr)
        return 1

    options = Options(
        connection=connection,
        search_root=str(PurePath(args.search)),
        dry_run=args.dry,
        verbose=args.verbose_sql,
        lock=not args.no_lock,
        echo=print,
    )

    try:
        stats = run(options, metrics=metrics)
    except SchemaSupportError as e:
        print(e, file=sys.stderr)
        return 1
    finally:
        connection.close()
        if metrics is not None:
            try:
                metrics.push(args.pushgateway)
            except OSError as e:
                logger.warning(f"Failed to push metrics to {args.pushgateway}: {e}")

    print(summary_line(stats, args.dry, time.monotonic() - start), file=sys.stderr)
    return 0
