"""Error kinds raised by the location, matrix and export services.

All of them derive from ``ValueError`` so API handlers can keep mapping
``ValueError`` to a client error, and pick out the specific kinds where a
different status code applies.
"""

from __future__ import annotations


class RouteBuddyError(ValueError):
    """Base class for domain errors."""


class ValidationError(RouteBuddyError):
    """A location name or coordinate failed validation."""


class InsufficientInputError(RouteBuddyError):
    """A distance computation was attempted with fewer than two locations."""


class NoDataError(RouteBuddyError):
    """Statistics or an export was requested while no matrix is available."""


class ParseError(RouteBuddyError):
    """An import file or row could not be read."""

    def __init__(self, message: str, *, skipped: int = 0) -> None:
        super().__init__(message)
        self.skipped = skipped


class StaleResultError(RouteBuddyError):
    """The location list changed while a computation was in flight."""
