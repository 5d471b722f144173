"""
Patron endpoints for API v1.

Each patron is returned with the books they currently hold.  A patron
holding books cannot be deleted.
"""

from typing import List

from fastapi import APIRouter, Query, status

from library_api.app.api.v1.errors import http_error
from library_api.app.core.errors import LibraryError
from library_api.app.schemas.book import BookRead
from library_api.app.schemas.patron import PatronCreate, PatronRead, PatronUpdate
from library_api.app.services.loan_service import LoanService
from library_api.app.services.patron_service import PatronService


router = APIRouter()


@router.get("", response_model=List[PatronRead])
async def list_patrons(include_deleted: bool = Query(False)) -> List[PatronRead]:
    """List all patrons with their borrowed books."""
    return await PatronService.list_patrons(include_deleted=include_deleted)


@router.post("", response_model=PatronRead, status_code=status.HTTP_201_CREATED)
async def create_patron(data: PatronCreate) -> PatronRead:
    return await PatronService.create_patron(data)


@router.get("/{patron_id}", response_model=PatronRead)
async def get_patron(patron_id: int) -> PatronRead:
    try:
        return await PatronService.get_patron(patron_id)
    except LibraryError as e:
        raise http_error(e) from e


@router.put("/{patron_id}", response_model=PatronRead)
async def update_patron(patron_id: int, data: PatronUpdate) -> PatronRead:
    """Update the fields present in the body."""
    try:
        return await PatronService.update_patron(patron_id, data)
    except LibraryError as e:
        raise http_error(e) from e


@router.delete("/{patron_id}")
async def delete_patron(patron_id: int) -> dict:
    """Delete a patron.

    Returns 409 while the patron still holds a book.
    """
    try:
        await PatronService.delete_patron(patron_id)
    except LibraryError as e:
        raise http_error(e) from e
    return {"message": "Patron deleted successfully"}


@router.get("/{patron_id}/books", response_model=List[BookRead])
async def patron_books(patron_id: int) -> List[BookRead]:
    """List the books a patron currently holds, with their authors."""
    try:
        return await LoanService.books_held_by(patron_id)
    except LibraryError as e:
        raise http_error(e) from e
