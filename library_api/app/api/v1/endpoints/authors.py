"""
Author endpoints for API v1.
"""

from typing import List

from fastapi import APIRouter, Query, status

from library_api.app.api.v1.errors import http_error
from library_api.app.core.errors import LibraryError
from library_api.app.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from library_api.app.schemas.book import BookRead
from library_api.app.services.author_service import AuthorService
from library_api.app.services.search_service import SearchService


router = APIRouter()


@router.get("", response_model=List[AuthorRead])
async def list_authors(include_deleted: bool = Query(False)) -> List[AuthorRead]:
    """List all authors with their books."""
    return await AuthorService.list_authors(include_deleted=include_deleted)


@router.post("", response_model=AuthorRead, status_code=status.HTTP_201_CREATED)
async def create_author(data: AuthorCreate) -> AuthorRead:
    """Create an author, optionally attaching existing books."""
    try:
        return await AuthorService.create_author(data)
    except LibraryError as e:
        raise http_error(e) from e


@router.get("/{author_id}", response_model=AuthorRead)
async def get_author(author_id: int) -> AuthorRead:
    try:
        return await AuthorService.get_author(author_id)
    except LibraryError as e:
        raise http_error(e) from e


@router.put("/{author_id}", response_model=AuthorRead)
async def update_author(author_id: int, data: AuthorUpdate) -> AuthorRead:
    """Update an author.  Sending ``books`` replaces the book set."""
    try:
        return await AuthorService.update_author(author_id, data)
    except LibraryError as e:
        raise http_error(e) from e


@router.delete("/{author_id}")
async def delete_author(author_id: int) -> dict:
    """Delete an author and detach it from all of its books."""
    try:
        await AuthorService.delete_author(author_id)
    except LibraryError as e:
        raise http_error(e) from e
    return {"message": "Author deleted successfully"}


@router.get("/{author_id}/books", response_model=List[BookRead])
async def books_by_author(author_id: int) -> List[BookRead]:
    """List every book written by an author, borrowed or not."""
    try:
        return await SearchService.books_by_author(author_id)
    except LibraryError as e:
        raise http_error(e) from e
