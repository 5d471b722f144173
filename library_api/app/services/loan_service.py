"""
Business logic for lending books to patrons.

The ``LoanService`` is the only code that changes a book's custody
fields (``holder_id``, ``borrowed_at``, ``due_back`` and
``returned_at``).  There is no separate loans table: the book row is
the single record of who holds it.

A book is either available (no holder) or borrowed (holder set).
Borrowing moves it from available to borrowed; returning moves it
back, stamps ``returned_at`` and clears the other custody fields so it
can be lent again.  Each transition is one conditional ``UPDATE``
inside a ``BEGIN IMMEDIATE`` transaction, so two concurrent borrows of
the same book cannot both succeed.
"""

import logging
import sqlite3
from datetime import timedelta
from typing import List

from library_api.app.core.cache import cache_manager
from library_api.app.core.config import settings
from library_api.app.core.db import get_cursor, transaction
from library_api.app.core.errors import NotFoundError
from library_api.app.repositories import BookRepository, PatronRepository
from library_api.app.repositories.base import utcnow
from library_api.app.schemas.book import BookRead
from library_api.app.schemas.loan import BorrowResult
from library_api.app.services.audit_service import AuditService
from library_api.app.services.converters import book_reads


logger = logging.getLogger(__name__)


class LoanService:
    """Service for borrowing and returning books."""

    @classmethod
    async def borrow(cls, patron_id: int, book_id: int) -> BorrowResult:
        """Lend a book to a patron.

        The patron and the book must both exist, otherwise
        ``NotFoundError`` is raised.  If the book is available it is
        given to the patron with ``due_back`` set ``loan_period_days``
        after ``borrowed_at`` and a result with ``success=True`` is
        returned.  If anybody (the same patron included) already holds
        the book nothing changes and ``success`` is ``False``.
        """
        with transaction() as cursor:
            if PatronRepository(cursor).get(patron_id) is None:
                raise NotFoundError("patron", patron_id)
            books = BookRepository(cursor)
            # Look the book up first: a missing book must not be
            # mistaken for one without a holder.
            book = books.get(book_id)
            if book is None:
                raise NotFoundError("book", book_id)

            borrowed_at = utcnow()
            due_back = borrowed_at + timedelta(days=settings.loan_period_days)
            if not books.claim(book_id, patron_id, borrowed_at, due_back):
                logger.info(
                    "Patron %s cannot borrow book %s: already held by patron %s",
                    patron_id,
                    book_id,
                    book["holder_id"],
                )
                return BorrowResult(success=False, patron_id=patron_id, book_id=book_id)
            AuditService.log(
                cursor,
                action="borrow",
                object_type="book",
                object_id=book_id,
                details={"patron_id": patron_id, "due_back": due_back},
            )
        cache_manager.invalidate("books:")
        logger.info("Patron %s borrowed book %s, due back %s", patron_id, book_id, due_back.isoformat())
        return BorrowResult(
            success=True,
            patron_id=patron_id,
            book_id=book_id,
            borrowed_at=borrowed_at,
            due_back=due_back,
        )

    @classmethod
    async def return_book(cls, patron_id: int, book_id: int) -> BookRead:
        """Take a book back from the patron holding it.

        Raises ``NotFoundError`` unless the book exists and is held by
        ``patron_id``; one patron can never return another patron's
        book.  Returns the updated book.
        """
        with transaction() as cursor:
            books = BookRepository(cursor)
            returned_at = utcnow()
            if not books.release(book_id, patron_id, returned_at):
                raise NotFoundError("book", book_id)
            AuditService.log(
                cursor,
                action="return",
                object_type="book",
                object_id=book_id,
                details={"patron_id": patron_id},
            )
            book = book_reads(cursor, [books.get(book_id)])[0]
        cache_manager.invalidate("books:")
        logger.info("Patron %s returned book %s", patron_id, book_id)
        return book

    @classmethod
    def check_borrowed(cls, cursor: sqlite3.Cursor, book_id: int) -> bool:
        """``is_borrowed`` against an already open cursor.

        Lets other services run the custody check inside their own
        transaction.
        """
        book = BookRepository(cursor).get(book_id)
        if book is None:
            raise NotFoundError("book", book_id)
        return book["holder_id"] is not None

    @classmethod
    async def is_borrowed(cls, book_id: int) -> bool:
        """Return ``True`` if somebody currently holds the book."""
        with get_cursor() as cursor:
            return cls.check_borrowed(cursor, book_id)

    @classmethod
    async def books_held_by(cls, patron_id: int) -> List[BookRead]:
        """List the books a patron currently holds."""
        with get_cursor() as cursor:
            if PatronRepository(cursor).get(patron_id) is None:
                raise NotFoundError("patron", patron_id)
            rows = BookRepository(cursor).held_by([patron_id])[patron_id]
            return book_reads(cursor, rows)
