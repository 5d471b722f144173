"""
Business logic for library patrons.

A patron's borrowed books are read from ``books.holder_id``.  A patron
who still holds a book cannot be deleted; the holding check and the
soft delete share one write transaction.
"""

import logging
from typing import List

from library_api.app.core.db import get_cursor, transaction
from library_api.app.core.errors import ConflictError, NotFoundError
from library_api.app.repositories import BookRepository, PatronRepository
from library_api.app.schemas.patron import PatronCreate, PatronRead, PatronUpdate
from library_api.app.services.audit_service import AuditService
from library_api.app.services.converters import patron_reads


logger = logging.getLogger(__name__)


class PatronService:
    """Service for managing patrons."""

    @classmethod
    async def list_patrons(cls, include_deleted: bool = False) -> List[PatronRead]:
        """Return all patrons with the books they currently hold."""
        with get_cursor() as cursor:
            rows = PatronRepository(cursor).list_all(include_deleted=include_deleted)
            return patron_reads(cursor, rows)

    @classmethod
    async def get_patron(cls, patron_id: int) -> PatronRead:
        with get_cursor() as cursor:
            row = PatronRepository(cursor).get(patron_id)
            if row is None:
                raise NotFoundError("patron", patron_id)
            return patron_reads(cursor, [row])[0]

    @classmethod
    async def create_patron(cls, data: PatronCreate) -> PatronRead:
        with transaction() as cursor:
            patrons = PatronRepository(cursor)
            patron_id = patrons.insert(data.model_dump())
            AuditService.log(
                cursor,
                action="create",
                object_type="patron",
                object_id=patron_id,
                details={"name": data.name, "email": data.email},
            )
            patron = patron_reads(cursor, [patrons.get(patron_id)])[0]
        logger.info("Created patron %s", patron_id)
        return patron

    @classmethod
    async def update_patron(cls, patron_id: int, data: PatronUpdate) -> PatronRead:
        """Update the fields present in ``data``.

        Raises ``NotFoundError`` if the patron does not exist.
        """
        updates = data.model_dump(exclude_unset=True)
        with transaction() as cursor:
            patrons = PatronRepository(cursor)
            if not patrons.update_fields(patron_id, updates):
                raise NotFoundError("patron", patron_id)
            if updates:
                AuditService.log(cursor, action="update", object_type="patron", object_id=patron_id, details=updates)
            return patron_reads(cursor, [patrons.get(patron_id)])[0]

    @classmethod
    async def delete_patron(cls, patron_id: int) -> None:
        """Soft‑delete a patron who holds no books.

        Raises
        ------
        NotFoundError
            If the patron does not exist.
        ConflictError
            If the patron still holds at least one book.
        """
        with transaction() as cursor:
            patrons = PatronRepository(cursor)
            if patrons.get(patron_id) is None:
                raise NotFoundError("patron", patron_id)
            held = BookRepository(cursor).count_held_by(patron_id)
            if held:
                logger.info("Refusing to delete patron %s: holds %s book(s)", patron_id, held)
                raise ConflictError("Patron cannot be deleted because they have associated books")
            patrons.soft_delete(patron_id)
            AuditService.log(cursor, action="delete", object_type="patron", object_id=patron_id)
        logger.info("Deleted patron %s", patron_id)
