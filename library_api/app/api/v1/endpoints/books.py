"""
Book endpoints for API v1.

CRUD over the catalogue plus the title/author search.  Custody is not
writable here; books are lent and returned through the loan routes.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from library_api.app.api.v1.errors import http_error
from library_api.app.core.errors import LibraryError
from library_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from library_api.app.services.book_service import BookService
from library_api.app.services.search_service import SearchService


router = APIRouter()


@router.get("", response_model=List[BookRead])
async def list_books(
    include_deleted: bool = Query(False, description="Include soft‑deleted books"),
) -> List[BookRead]:
    """List all books with their authors."""
    return await BookService.list_books(include_deleted=include_deleted)


@router.post("", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(data: BookCreate) -> BookRead:
    """Create a book.

    ``authors`` must list at least one existing author.  Returns 409
    if the ISBN is already taken and 422 for unknown authors.
    """
    try:
        return await BookService.create_book(data)
    except LibraryError as e:
        raise http_error(e) from e


# Declared before ``/{book_id}`` so "search" is not parsed as an ID.
@router.get("/search")
async def search_books(
    title: str = Query(..., min_length=1, description="Exact title to match"),
    authors: List[int] = Query([], description="Author IDs; a book matches if any of them wrote it"),
) -> dict:
    """Search books by exact title among the given authors.

    Responds with ``{"books": [...]}``, or 404 when nothing matches.
    """
    books = await SearchService.search_by_title_and_author(title, authors)
    if not books:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No books found for the specified title and author",
        )
    return {"books": [book.model_dump(mode="json") for book in books]}


@router.get("/{book_id}", response_model=BookRead)
async def get_book(book_id: int) -> BookRead:
    try:
        return await BookService.get_book(book_id)
    except LibraryError as e:
        raise http_error(e) from e


@router.put("/{book_id}", response_model=BookRead)
async def update_book(book_id: int, data: BookUpdate) -> BookRead:
    """Update a book.

    Only fields present in the body are changed.  Sending ``authors``
    replaces the book's author set.
    """
    try:
        return await BookService.update_book(book_id, data)
    except LibraryError as e:
        raise http_error(e) from e


@router.delete("/{book_id}")
async def delete_book(book_id: int) -> dict:
    """Delete a book.

    Refused with 409 while the book is borrowed.
    """
    try:
        await BookService.delete_book(book_id)
    except LibraryError as e:
        raise http_error(e) from e
    return {"message": "Book deleted successfully"}
