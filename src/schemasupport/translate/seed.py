"""
CSV seed data change files.

The target table is the name of the directory holding the file, so
``sql/seed/countries/0000000003_initial.csv`` inserts into ``countries``.
The first row names the columns; every following row is one insert.
"""

import csv
import re

from psycopg2 import sql

from schemasupport.errors import TranslationError
from schemasupport.models import Statement

TABLE_FROM_PATH_PATTERN = re.compile(r"/([^/]+)/[^/]+$")

# ASCII-only identifiers, optionally schema-qualified
VALID_IDENTIFIER_PATTERN = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$"
)


def table_from_path(path: str) -> str:
    """
    Infer the target table from the file's parent directory

    Raises:
        TranslationError: If the path has no parent directory segment or the
            directory name is not a plain identifier
    """
    match = TABLE_FROM_PATH_PATTERN.search(path)
    if match is None:
        raise TranslationError(path, "Unable to figure out table name")

    table = match.group(1)
    if not VALID_IDENTIFIER_PATTERN.match(table):
        raise TranslationError(path, f"Invalid table name {table!r}")
    return table


def build_insert(table: str, columns: list[str]) -> sql.Composed:
    """
    Compose the insert template; a schema-qualified table becomes a
    two-part identifier
    """
    return sql.SQL("insert into {} ({}) values ({});").format(
        sql.Identifier(*table.split(".")),
        sql.SQL(", ").join(sql.Identifier(*column.split(".")) for column in columns),
        sql.SQL(", ").join(sql.Placeholder() * len(columns)),
    )


def translate_csv(path: str) -> list[Statement]:
    """
    Turn a CSV file into parameterized inserts

    Empty fields are bound as NULL. Blank lines are skipped.

    Raises:
        TranslationError: On a bad table name, an empty or invalid header, or
            a row whose width differs from the header
    """
    table = table_from_path(path)

    statements = []
    template = None
    width = 0

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        for row in reader:
            if template is None:
                columns = [c.strip() for c in row]
                if not columns or not any(columns):
                    raise TranslationError(path, "No columns found in first line")
                for column in columns:
                    if not VALID_IDENTIFIER_PATTERN.match(column):
                        raise TranslationError(path, f"Invalid column name {column!r}")
                template = build_insert(table, columns)
                width = len(columns)
                continue

            if not row:
                continue

            if len(row) != width:
                raise TranslationError(
                    path,
                    f"Line {reader.line_num} has {len(row)} fields, expected {width}",
                )

            params = tuple(None if value == "" else value for value in row)
            statements.append(Statement(sql=template, params=params))

    if template is None:
        raise TranslationError(path, "No columns found in first line")

    return statements
