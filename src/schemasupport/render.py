"""
Human-readable rendering of parameterized statements.

Output is for display in verbose mode only. Statements are always executed
with bound parameters, never with this text.
"""

import itertools
import re
from collections.abc import Sequence
from typing import Any

from psycopg2 import sql

PLACEHOLDER_PATTERN = re.compile(r"%s")

# Characters shown unescaped inside a rendered literal
PLAIN_PUNCTUATION = frozenset(" /._")


def _is_plain(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in PLAIN_PUNCTUATION)


def quote_literal(value) -> str:
    """
    Quote a value as a PostgreSQL literal for display

    Anything outside letters, digits and a few punctuation characters is
    escaped, in which case the escape string form E'...' is used.
    """
    if value is None:
        return "NULL"

    out = []
    escaped = False
    for ch in str(value):
        if _is_plain(ch):
            out.append(ch)
            continue
        escaped = True
        code = ord(ch)
        if code < 128:
            out.append(f"\\x{code:02X}")
        elif code < 65535:
            out.append(f"\\u{code:04X}")
        else:
            out.append(f"\\U{code:08X}")

    body = "".join(out)
    return f"E'{body}'" if escaped else f"'{body}'"


def render_statement(
    query: str | sql.Composable,
    params: Sequence | None = None,
    context: Any = None,
) -> str:
    """
    Substitute each positional %s placeholder with a quoted literal

    Composed statements are first turned into text with context (a
    connection or cursor) quoting their identifiers. Placeholders beyond the
    number of parameters are left untouched.
    """
    if isinstance(query, sql.Composable):
        query = query.as_string(context)
    if not params:
        return query

    position = itertools.count()

    def substitute(match: re.Match) -> str:
        index = next(position)
        if index >= len(params):
            return match.group(0)
        return quote_literal(params[index])

    return PLACEHOLDER_PATTERN.sub(substitute, query)
