"""
Reconciliation of discovered change files against the ledger.

Components:
- ordering: deterministic sort key for change files
- planner: drift/duplicate detection and run plan construction
"""

from .ordering import SEQUENCE_ID_PATTERN, ordering_key, sequence_id, sort_change_files
from .planner import reconcile

__all__ = [
    "reconcile",
    "ordering_key",
    "sequence_id",
    "sort_change_files",
    "SEQUENCE_ID_PATTERN",
]
