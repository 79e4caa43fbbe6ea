"""
schemasupport: apply SQL and CSV change files to PostgreSQL exactly once

Change files found under a search root are fingerprinted, compared with a
ledger table of files already applied, ordered by the 10-digit sequence id
in their names and applied in a single transaction.

Components:
- discovery: find and fingerprint change files
- registry: the ledger table
- reconcile: drift/duplicate detection and ordering
- translate: SQL scripts and CSV seed data to statements
- executor: transactional application
- render: display form of parameterized statements
- runner: the run() entry point

Usage:
    from schemasupport import Options, run

    stats = run(Options(connection=conn, search_root="./sql", dry_run=True))
"""

from .errors import (
    DiscoveryError,
    DriftError,
    DuplicateContentError,
    ExecutionError,
    PersistenceError,
    SchemaSupportError,
    TranslationError,
)
from .models import AppliedRecord, ChangeFile, Options, RunPlan, Stats
from .runner import apply_plan, plan_run, run

__version__ = "1.0.0"
__all__ = [
    "run",
    "plan_run",
    "apply_plan",
    "Options",
    "Stats",
    "RunPlan",
    "ChangeFile",
    "AppliedRecord",
    "SchemaSupportError",
    "DiscoveryError",
    "DriftError",
    "DuplicateContentError",
    "TranslationError",
    "ExecutionError",
    "PersistenceError",
]
