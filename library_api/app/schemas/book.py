"""
Pydantic models for book data.

``BookBase`` holds the catalogue fields a client may set.  The custody
fields (``holder_id``, ``borrowed_at``, ``due_back`` and
``returned_at``) only appear on ``BookRead``: they are changed by the
borrow and return operations and never through create or update
payloads.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import AuthorSummary, RecordStatus, reject_null


class BookBase(BaseModel):
    title: str = Field(..., min_length=1, examples=["The Great Gatsby"])
    description: str = Field(..., examples=["A novel about the American dream"])
    isbn: str = Field(..., min_length=1, examples=["9780743273565"])
    publication_date: date = Field(..., examples=["1925-04-10"])


class BookCreate(BookBase):
    """Schema for creating a book.

    ``authors`` is the list of author IDs to attach; at least one is
    required.
    """

    authors: List[int] = Field(..., min_length=1, description="IDs of the book's authors")


class BookUpdate(BaseModel):
    """Schema for updating a book.

    All fields are optional; only provided fields will be updated.  When
    ``authors`` is provided it replaces the book's author set.
    """

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    isbn: Optional[str] = Field(None, min_length=1)
    publication_date: Optional[date] = None
    authors: Optional[List[int]] = Field(None, description="Replacement list of author IDs")

    @field_validator("title", "description", "isbn", "publication_date", "authors")
    @classmethod
    def reject_null_fields(cls, value, info):
        return reject_null(value, info)


class BookRead(BookBase):
    """Schema for reading a book from the API."""

    id: int
    holder_id: Optional[int] = None
    borrowed_at: Optional[datetime] = None
    due_back: Optional[datetime] = None
    returned_at: Optional[datetime] = None
    status: RecordStatus = RecordStatus.ACTIVE
    authors: List[AuthorSummary] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }
