"""
Run plan construction.

reconcile() is pure: it compares what is on disk with what the ledger says
was applied and either returns a complete plan or raises. It never touches
the database.
"""

import logging
from collections.abc import Iterable

from schemasupport.errors import DriftError, DuplicateContentError
from schemasupport.models import AppliedRecord, ChangeFile, RunPlan
from schemasupport.utils.tracing import trace_operation

from .ordering import sort_change_files

logger = logging.getLogger(__name__)


def reconcile(
    discovered: Iterable[ChangeFile],
    applied: Iterable[AppliedRecord],
) -> RunPlan:
    """
    Classify each discovered file as already applied, invalid, or pending

    Args:
        discovered: Change files found under the search root
        applied: Records loaded from the ledger

    Returns:
        RunPlan holding the pending files in execution order

    Raises:
        DriftError: An applied path now has a different fingerprint
        DuplicateContentError: A new path has the fingerprint of an applied one
    """
    by_path: dict[str, AppliedRecord] = {}
    by_fingerprint: dict[str, AppliedRecord] = {}
    for record in applied:
        by_path[record.path] = record
        by_fingerprint[record.fingerprint] = record

    ordered = sort_change_files(discovered)
    pending = []

    with trace_operation("reconcile", discovered=len(ordered), applied=len(by_path)) as span:
        for change in ordered:
            known = by_path.get(change.path)
            if known is not None:
                if known.fingerprint == change.fingerprint:
                    continue
                raise DriftError(change.path, expected=known.fingerprint, actual=change.fingerprint)

            previous = by_fingerprint.get(change.fingerprint)
            if previous is not None:
                raise DuplicateContentError(change.path, previous_path=previous.path)

            pending.append(change)

        span.set_attribute("pending", len(pending))

    logger.info(
        f"Reconciled {len(ordered)} change file(s): "
        f"{len(ordered) - len(pending)} already applied, {len(pending)} pending"
    )

    return RunPlan(discovered=len(ordered), pending=tuple(pending))
