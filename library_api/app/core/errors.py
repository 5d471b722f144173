"""
Error types raised by the service layer.

Services raise these exceptions and the API endpoints translate them
into HTTP responses.  All of them derive from ``ValueError`` so code
that only cares about "the request was wrong" can catch a single
type.  None of them is ever retried: each describes a deterministic
condition the caller has to correct.

There is no "already borrowed" error.  Borrowing a book that is
out on loan is an expected outcome and is reported through
``BorrowResult.success`` instead.
"""


class LibraryError(ValueError):
    """Base class for domain errors."""


class NotFoundError(LibraryError):
    """The targeted entity does not exist (or is soft‑deleted).

    For returns, also raised when the book is not currently held by
    the stated patron.
    """

    def __init__(self, kind: str, entity_id: int) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} {entity_id} not found")


class ConflictError(LibraryError):
    """The operation would break a custody or association invariant."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class ValidationError(LibraryError):
    """Malformed input, e.g. a reference to a missing author or book."""
