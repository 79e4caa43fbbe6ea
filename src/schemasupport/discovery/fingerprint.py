"""
Content fingerprints for change files.

MD5 is enough here: the fingerprint guards against accidental edits to an
applied file, not against tampering.
"""

import hashlib
import os

CHUNK_SIZE = 64 * 1024


def fingerprint_file(path: str | os.PathLike) -> str:
    """
    Compute the hex MD5 digest of a file's bytes

    Raises:
        OSError: If the file cannot be read
    """
    hasher = hashlib.md5(usedforsecurity=False)

    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hasher.update(chunk)

    return hasher.hexdigest()
