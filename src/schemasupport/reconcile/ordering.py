"""
Deterministic ordering of change files.

A change file may carry a 10-digit sequence id anywhere in its path, bounded
by non-digit characters (e.g. ``sql/0000000042_add_index.sql``). Files
without one run first, in path order; numbered files follow in ascending id
order, ties broken by path.
"""

import re
from collections.abc import Iterable

from schemasupport.models import ChangeFile

SEQUENCE_ID_PATTERN = re.compile(r"\D(\d{10})\D")


def sequence_id(path: str) -> int | None:
    """Return the first embedded 10-digit sequence id in path, if any"""
    match = SEQUENCE_ID_PATTERN.search(path)
    if match is None:
        return None
    return int(match.group(1))


def ordering_key(change: ChangeFile) -> tuple[bool, int, str]:
    """
    Sort key (has_id, id_value, path)

    False sorts before True, so id-less files come first; their id_value is
    0 and only the path separates them.
    """
    seq = sequence_id(change.path)
    return (seq is not None, seq or 0, change.path)


def sort_change_files(files: Iterable[ChangeFile]) -> list[ChangeFile]:
    return sorted(files, key=ordering_key)
