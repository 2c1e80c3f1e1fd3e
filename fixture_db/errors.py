"""Errors raised while building the fixture database.

Every error carries the name of the operation that failed so the run summary
and the log line can point at the step to fix.
"""

from __future__ import annotations


class FixtureError(Exception):
    def __init__(self, message: str, *, operation: str = "unknown") -> None:
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        return f"[{self.operation}] {super().__str__()}"


class StorageAccessError(FixtureError):
    """The previous database file could not be checked or removed."""


class StorageConnectionError(FixtureError):
    """The database file could not be opened or created."""


class StorageOperationError(FixtureError):
    """A statement failed against an open connection."""


class SchemaCompilationError(FixtureError):
    """A table or column spec cannot be turned into DDL."""


class ArityMismatch(FixtureError):
    """Insert columns and values differ in count."""


class LookupMiss(FixtureError):
    """A fixture row references a seed row that was never inserted."""


class RandomnessUnavailable(FixtureError):
    """The OS entropy source produced no bytes."""
