"""
Data model shared by discovery, reconciliation and execution.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from psycopg2 import sql as pgsql


@dataclass(frozen=True)
class ChangeFile:
    """One discoverable SQL or CSV change file and its content fingerprint"""

    path: str
    fingerprint: str

    @property
    def is_csv(self) -> bool:
        return self.path.lower().endswith(".csv")


@dataclass(frozen=True)
class AppliedRecord:
    """One row of the ledger table"""

    path: str
    fingerprint: str
    applied_at: datetime | None = None


@dataclass(frozen=True)
class Statement:
    """A statement ready for cursor.execute(); params is None for raw SQL"""

    sql: str | pgsql.Composable
    params: tuple | None = None


@dataclass(frozen=True)
class RunPlan:
    """Ordered change files still to apply, plus how many were discovered"""

    discovered: int
    pending: tuple[ChangeFile, ...] = ()

    def __len__(self) -> int:
        return len(self.pending)

    def __iter__(self):
        return iter(self.pending)


@dataclass
class Stats:
    discovered: int = 0
    applied: int = 0


@dataclass
class Options:
    """
    Configuration for a single run

    Attributes:
        connection: Open psycopg2 connection to the target database
        search_root: Directory searched recursively for change files
        dry_run: Plan and validate everything but write nothing
        verbose: Echo every statement with its parameters inlined
        lock: Serialize concurrent runs with a PostgreSQL advisory lock
        echo: Receives verbose SQL text (defaults to the schemasupport.sql logger)
    """

    connection: Any
    search_root: str
    dry_run: bool = False
    verbose: bool = False
    lock: bool = True
    echo: Callable[[str], None] | None = field(default=None, repr=False)
