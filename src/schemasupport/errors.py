"""
Exception hierarchy for change file reconciliation and execution.

Every failure the engine can report derives from SchemaSupportError so the
CLI can catch one type and print a single line for the operator.
"""


class SchemaSupportError(Exception):
    """Base class for all schemasupport errors"""


class DiscoveryError(SchemaSupportError):
    """Raised when no change files are found under the search root"""


class PersistenceError(SchemaSupportError):
    """Raised when the ledger schema or table cannot be created or read"""


class DriftError(SchemaSupportError):
    """Raised when an applied change file has been modified since"""

    def __init__(self, path: str, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Change file {path!r} has been modified: "
            f"fingerprint {actual!r} expected {expected!r}"
        )


class DuplicateContentError(SchemaSupportError):
    """Raised when a change file's content was already applied under another path"""

    def __init__(self, path: str, previous_path: str):
        self.path = path
        self.previous_path = previous_path
        super().__init__(
            f"Change file {path!r} has already been run from path {previous_path!r}"
        )


class TranslationError(SchemaSupportError):
    """Raised when a change file cannot be turned into statements"""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message} in change file {path!r}")


class ExecutionError(SchemaSupportError):
    """Raised when a statement or the final commit fails against the database"""

    def __init__(self, path: str | None, cause: Exception):
        self.path = path
        self.cause = cause
        if path is None:
            super().__init__(f"Commit failed: {cause}")
        else:
            super().__init__(f"Change file {path!r} failed: {cause}")
