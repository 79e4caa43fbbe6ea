"""
Shared helpers for schemasupport tests.

FakeConnection imitates the slice of a psycopg2 connection the engine uses:
cursors, commit/rollback with real transactional visibility, the catalog
lookups done by the ledger registry, and advisory locks.
"""

import copy
from datetime import UTC, datetime
from pathlib import Path

import psycopg2
from psycopg2 import sql


def offline_quote_ident(name: str, context) -> str:
    """Double-quote an identifier the way libpq does, without a server"""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def as_text(query) -> str:
    """Plain text of a statement, whether a string or composed SQL"""
    if isinstance(query, sql.Composable):
        return query.as_string(None)
    return query


def write_change(root: Path, relative: str, content: str) -> Path:
    """Create a change file below root, creating directories as needed"""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class FakeCursor:
    def __init__(self, connection: "FakeConnection"):
        self.connection = connection
        self._rows: list[tuple] = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def close(self) -> None:
        self.closed = True

    def execute(self, query, params=None) -> None:
        conn = self.connection
        query = as_text(query)
        conn.executed.append((query, params))
        state = conn.pending
        q = query.strip().lower()

        if conn.fail_on is not None and conn.fail_on in query:
            raise psycopg2.ProgrammingError(f'syntax error at or near "{conn.fail_on}"')

        if "pg_advisory_lock" in q:
            conn.locks += 1
            self._rows = [(None,)]
        elif "pg_advisory_unlock" in q:
            conn.locks -= 1
            self._rows = [(True,)]
        elif "from pg_namespace" in q:
            self._rows = [(int(state["has_schema"]),)]
        elif "from pg_tables" in q:
            self._rows = [(int(state["has_table"]),)]
        elif q.startswith("create schema"):
            state["has_schema"] = True
        elif q.startswith('create table "schemasupport"."files"'):
            state["has_table"] = True
        elif q.startswith("select path, fingerprint, created from"):
            if not state["has_table"]:
                raise psycopg2.ProgrammingError('relation "schemasupport.files" does not exist')
            self._rows = [tuple(row) for row in state["ledger"]]
        elif q.startswith('insert into "schemasupport"."files"'):
            path, fingerprint = params
            state["ledger"].append((path, fingerprint, datetime.now(UTC)))
        else:
            state["statements"].append((query, params))

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    """In-memory stand-in for a psycopg2 connection"""

    def __init__(self, has_schema=False, has_table=False, ledger=None, fail_on=None):
        self.committed = {
            "has_schema": has_schema or has_table,
            "has_table": has_table,
            "ledger": list(ledger or []),
            "statements": [],
        }
        self.pending = copy.deepcopy(self.committed)
        self.executed: list[tuple] = []
        self.fail_on = fail_on
        self.autocommit = False
        self.closed = False
        self.commits = 0
        self.rollbacks = 0
        self.locks = 0

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.committed = copy.deepcopy(self.pending)
        self.commits += 1

    def rollback(self) -> None:
        self.pending = copy.deepcopy(self.committed)
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = True

    @property
    def ledger_paths(self) -> list[str]:
        return [row[0] for row in self.committed["ledger"]]

    @property
    def applied_statements(self) -> list[tuple]:
        return self.committed["statements"]

    @property
    def mutations(self) -> list[tuple]:
        """Executed statements other than catalog lookups, ledger reads and locks"""
        reads = ("select ", )
        return [(q, p) for q, p in self.executed if not q.strip().lower().startswith(reads)]
