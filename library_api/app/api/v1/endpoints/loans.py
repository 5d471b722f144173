"""
Borrow and return endpoints for API v1.

A borrow of a book somebody already holds is not an error in the
service layer; it comes back as ``success=False`` and is answered here
with 400 and nothing changed.
"""

from fastapi import APIRouter, HTTPException, status

from library_api.app.api.v1.errors import http_error
from library_api.app.core.errors import LibraryError
from library_api.app.schemas.loan import ReturnResult
from library_api.app.services.loan_service import LoanService


router = APIRouter()


@router.post("/patrons/{patron_id}/books/{book_id}/borrow")
async def borrow_book(patron_id: int, book_id: int) -> dict:
    """Lend a book to a patron.

    Responds 200 with the loan dates on success, 400 if the book is
    already borrowed and 404 if the patron or the book is missing.
    """
    try:
        result = await LoanService.borrow(patron_id, book_id)
    except LibraryError as e:
        raise http_error(e) from e
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Book is already borrowed")
    return {"message": "Book borrowed successfully", "data": result.model_dump(mode="json")}


@router.post("/patrons/{patron_id}/books/{book_id}/return", response_model=ReturnResult)
async def return_book(patron_id: int, book_id: int) -> ReturnResult:
    """Return a book.

    Responds 404 unless the book exists and is held by ``patron_id``.
    """
    try:
        book = await LoanService.return_book(patron_id, book_id)
    except LibraryError as e:
        raise http_error(e) from e
    return ReturnResult(message="Book returned successfully", data=book)
