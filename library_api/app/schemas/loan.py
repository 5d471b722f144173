"""
Pydantic models for the borrow and return operations.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .book import BookRead


class BorrowResult(BaseModel):
    """Outcome of a borrow attempt.

    ``success`` is ``False`` when the book was already out on loan; in
    that case nothing was changed and the timestamps are ``None``.
    """

    success: bool
    patron_id: int
    book_id: int
    borrowed_at: Optional[datetime] = None
    due_back: Optional[datetime] = None


class ReturnResult(BaseModel):
    message: str
    data: BookRead
