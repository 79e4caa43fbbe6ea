"""
Change file discovery and content fingerprinting.
"""

from .fingerprint import fingerprint_file
from .search import CHANGE_FILE_PATTERNS, discover

__all__ = ["fingerprint_file", "discover", "CHANGE_FILE_PATTERNS"]
