"""
Recursive search for SQL and CSV change files.
"""

import logging
from pathlib import Path

from schemasupport.errors import DiscoveryError
from schemasupport.models import ChangeFile
from schemasupport.utils.tracing import trace_operation

from .fingerprint import fingerprint_file

logger = logging.getLogger(__name__)

CHANGE_FILE_PATTERNS = ("*.sql", "*.csv")


def discover(search_root: str) -> list[ChangeFile]:
    """
    Find and fingerprint every change file below search_root

    Paths are reported as search_root joined with the path relative to it,
    so ledger entries stay stable as long as the tool is invoked with the
    same search root. No particular order is guaranteed.

    Args:
        search_root: Directory to search recursively

    Returns:
        List of ChangeFile

    Raises:
        DiscoveryError: If the root is not a directory, a change file cannot
            be read, or the root holds no change files
    """
    root = Path(search_root)

    with trace_operation("discover", search_root=search_root) as span:
        if not root.is_dir():
            raise DiscoveryError(f"Search path {search_root!r} is not a directory")

        files = []
        for pattern in CHANGE_FILE_PATTERNS:
            for match in root.rglob(pattern):
                if not match.is_file():
                    continue
                try:
                    fingerprint = fingerprint_file(match)
                except OSError as e:
                    raise DiscoveryError(f"Unable to read change file {match.as_posix()!r}: {e}") from e
                files.append(ChangeFile(path=match.as_posix(), fingerprint=fingerprint))

        span.set_attribute("files", len(files))

    if not files:
        raise DiscoveryError(f"No schema change files found in {search_root!r}")

    logger.debug(f"Discovered {len(files)} change file(s) under {search_root}")
    return files
