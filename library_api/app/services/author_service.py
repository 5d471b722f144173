"""
Business logic for authors.

Authors are linked to books through ``book_author``.  Creating an
author can attach existing books; updating with ``books`` replaces
the set.  Deleting an author drops all of its links before the row is
soft‑deleted, whether or not the books are out on loan.
"""

import logging
import sqlite3
from typing import List

from library_api.app.core.cache import cache_manager
from library_api.app.core.db import get_cursor, transaction
from library_api.app.core.errors import NotFoundError, ValidationError
from library_api.app.repositories import AuthorRepository, BookAuthorRepository, BookRepository
from library_api.app.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from library_api.app.services.audit_service import AuditService
from library_api.app.services.converters import author_reads


logger = logging.getLogger(__name__)


def _require_books(cursor: sqlite3.Cursor, book_ids: List[int]) -> None:
    missing = set(book_ids) - BookRepository(cursor).existing_ids(book_ids)
    if missing:
        raise ValidationError(f"Unknown book IDs: {sorted(missing)}")


class AuthorService:
    """Service for managing authors."""

    @classmethod
    async def list_authors(cls, include_deleted: bool = False) -> List[AuthorRead]:
        with get_cursor() as cursor:
            rows = AuthorRepository(cursor).list_all(include_deleted=include_deleted)
            return author_reads(cursor, rows)

    @classmethod
    async def get_author(cls, author_id: int) -> AuthorRead:
        """Retrieve an author with their books.

        Raises ``NotFoundError`` if the author does not exist.
        """
        with get_cursor() as cursor:
            row = AuthorRepository(cursor).get(author_id)
            if row is None:
                raise NotFoundError("author", author_id)
            return author_reads(cursor, [row])[0]

    @classmethod
    async def create_author(cls, data: AuthorCreate) -> AuthorRead:
        """Insert an author and attach the given books, if any."""
        with transaction() as cursor:
            authors = AuthorRepository(cursor)
            author_id = authors.insert(data.model_dump(exclude={"books"}))
            if data.books:
                _require_books(cursor, data.books)
                BookAuthorRepository(cursor).attach_books(author_id, data.books)
            AuditService.log(
                cursor,
                action="create",
                object_type="author",
                object_id=author_id,
                details={"first_name": data.first_name, "last_name": data.last_name, "books": data.books or []},
            )
            author = author_reads(cursor, [authors.get(author_id)])[0]
        cache_manager.invalidate("books:")
        logger.info("Created author %s", author_id)
        return author

    @classmethod
    async def update_author(cls, author_id: int, data: AuthorUpdate) -> AuthorRead:
        """Update an author.

        Parameters
        ----------
        author_id: int
            ID of the author to update.
        data: AuthorUpdate
            Fields to change.  When ``books`` is sent it becomes the
            author's complete book set.

        Returns
        -------
        AuthorRead
            The updated author.
        """
        updates = data.model_dump(exclude_unset=True)
        book_ids = updates.pop("books", None)
        with transaction() as cursor:
            authors = AuthorRepository(cursor)
            if authors.get(author_id) is None:
                raise NotFoundError("author", author_id)
            if book_ids is not None:
                _require_books(cursor, book_ids)
            authors.update_fields(author_id, updates)
            if book_ids is not None:
                BookAuthorRepository(cursor).sync_books(author_id, book_ids)
            if updates or book_ids is not None:
                details = dict(updates)
                if book_ids is not None:
                    details["books"] = book_ids
                AuditService.log(cursor, action="update", object_type="author", object_id=author_id, details=details)
            author = author_reads(cursor, [authors.get(author_id)])[0]
        cache_manager.invalidate("books:")
        return author

    @classmethod
    async def delete_author(cls, author_id: int) -> None:
        """Detach an author from every book and soft‑delete it."""
        with transaction() as cursor:
            authors = AuthorRepository(cursor)
            if authors.get(author_id) is None:
                raise NotFoundError("author", author_id)
            detached = BookAuthorRepository(cursor).detach_author(author_id)
            authors.soft_delete(author_id)
            AuditService.log(
                cursor,
                action="delete",
                object_type="author",
                object_id=author_id,
                details={"detached_books": detached},
            )
        cache_manager.invalidate("books:")
        logger.info("Deleted author %s (%s book links removed)", author_id, detached)
