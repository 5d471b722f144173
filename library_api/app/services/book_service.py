"""
Business logic for the book catalogue.

The ``BookService`` creates, updates, lists and deletes books and
maintains their author associations.  It never writes the custody
fields: ``BookUpdate`` does not carry them and the repository refuses
to update them.  Deleting consults the loan service and is refused
while the book is out on loan.
"""

import logging
import sqlite3
from typing import List

from library_api.app.core.cache import cache_manager
from library_api.app.core.db import get_cursor, transaction
from library_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from library_api.app.repositories import AuthorRepository, BookAuthorRepository, BookRepository
from library_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from library_api.app.services.audit_service import AuditService
from library_api.app.services.converters import book_reads
from library_api.app.services.loan_service import LoanService


logger = logging.getLogger(__name__)


def _require_authors(cursor: sqlite3.Cursor, author_ids: List[int]) -> None:
    if not author_ids:
        raise ValidationError("A book needs at least one author")
    missing = set(author_ids) - AuthorRepository(cursor).existing_ids(author_ids)
    if missing:
        raise ValidationError(f"Unknown author IDs: {sorted(missing)}")


def _is_isbn_clash(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed: books.isbn" in str(exc)


class BookService:
    """Service for managing books and their authors."""

    @classmethod
    async def list_books(cls, include_deleted: bool = False) -> List[BookRead]:
        """Return all books with their authors."""
        with get_cursor() as cursor:
            rows = BookRepository(cursor).list_all(include_deleted=include_deleted)
            return book_reads(cursor, rows)

    @classmethod
    async def get_book(cls, book_id: int) -> BookRead:
        """Retrieve a single book by ID.

        Raises ``NotFoundError`` if the book does not exist.
        """
        with get_cursor() as cursor:
            row = BookRepository(cursor).get(book_id)
            if row is None:
                raise NotFoundError("book", book_id)
            return book_reads(cursor, [row])[0]

    @classmethod
    async def create_book(cls, data: BookCreate) -> BookRead:
        """Insert a book and attach its authors.

        Every ID in ``data.authors`` must refer to an existing author,
        otherwise ``ValidationError`` is raised.  A duplicate ISBN
        raises ``ConflictError``.
        """
        fields = data.model_dump(exclude={"authors"})
        try:
            with transaction() as cursor:
                _require_authors(cursor, data.authors)
                books = BookRepository(cursor)
                book_id = books.insert(fields)
                BookAuthorRepository(cursor).attach_authors(book_id, data.authors)
                AuditService.log(
                    cursor,
                    action="create",
                    object_type="book",
                    object_id=book_id,
                    details={"title": data.title, "isbn": data.isbn, "authors": data.authors},
                )
                book = book_reads(cursor, [books.get(book_id)])[0]
        except sqlite3.IntegrityError as exc:
            if not _is_isbn_clash(exc):
                raise
            raise ConflictError(f"A book with ISBN {data.isbn} already exists") from exc
        cache_manager.invalidate("books:")
        logger.info("Created book %s (ISBN %s)", book.id, book.isbn)
        return book

    @classmethod
    async def update_book(cls, book_id: int, data: BookUpdate) -> BookRead:
        """Update the fields present in ``data``.

        Fields the client did not send are left alone.  When
        ``authors`` is sent it replaces the author set and must hold at
        least one valid author ID.  Custody fields are never changed.
        """
        updates = data.model_dump(exclude_unset=True)
        author_ids = updates.pop("authors", None)
        try:
            with transaction() as cursor:
                books = BookRepository(cursor)
                if books.get(book_id) is None:
                    raise NotFoundError("book", book_id)
                if "authors" in data.model_fields_set:
                    _require_authors(cursor, author_ids or [])
                books.update_fields(book_id, updates)
                if author_ids is not None:
                    BookAuthorRepository(cursor).sync_authors(book_id, author_ids)
                if updates or author_ids is not None:
                    details = dict(updates)
                    if author_ids is not None:
                        details["authors"] = author_ids
                    AuditService.log(cursor, action="update", object_type="book", object_id=book_id, details=details)
                book = book_reads(cursor, [books.get(book_id)])[0]
        except sqlite3.IntegrityError as exc:
            if not _is_isbn_clash(exc):
                raise
            raise ConflictError(f"A book with ISBN {updates['isbn']} already exists") from exc
        cache_manager.invalidate("books:")
        return book

    @classmethod
    async def delete_book(cls, book_id: int) -> None:
        """Detach a book from its authors and soft‑delete it.

        Raises ``NotFoundError`` if the book does not exist and
        ``ConflictError`` while it is borrowed.  The custody check and
        the delete run in one transaction.
        """
        with transaction() as cursor:
            if LoanService.check_borrowed(cursor, book_id):
                logger.info("Refusing to delete book %s: it is currently borrowed", book_id)
                raise ConflictError("Book is currently borrowed and cannot be deleted")
            BookAuthorRepository(cursor).detach_book(book_id)
            if not BookRepository(cursor).soft_delete_if_available(book_id):
                raise ConflictError("Book is currently borrowed and cannot be deleted")
            AuditService.log(cursor, action="delete", object_type="book", object_id=book_id)
        cache_manager.invalidate("books:")
        logger.info("Deleted book %s", book_id)
