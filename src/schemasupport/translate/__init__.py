"""
Translation of change files into executable statements.

SQL files run verbatim; CSV files become one parameterized insert per row.
"""

import csv

from schemasupport.errors import TranslationError
from schemasupport.models import ChangeFile, Statement

from .seed import TABLE_FROM_PATH_PATTERN, VALID_IDENTIFIER_PATTERN, translate_csv
from .script import translate_sql


def translate(change: ChangeFile) -> list[Statement]:
    """
    Produce the statements for a change file, dispatching on its extension

    Raises:
        TranslationError: If the file cannot be read or a CSV file cannot be
            mapped to an insert
    """
    try:
        if change.is_csv:
            return translate_csv(change.path)
        return translate_sql(change.path)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise TranslationError(change.path, f"Unable to read ({e})") from e


__all__ = [
    "translate",
    "translate_sql",
    "translate_csv",
    "TABLE_FROM_PATH_PATTERN",
    "VALID_IDENTIFIER_PATTERN",
]
