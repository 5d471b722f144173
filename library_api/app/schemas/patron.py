"""
Pydantic models for library patrons.

``PatronRead.books`` lists the books the patron currently holds.  It
is computed from ``books.holder_id`` on every read rather than stored
on the patron.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import BookSummary, RecordStatus, reject_null


class PatronBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["John Doe"])
    email: str = Field(..., min_length=3, examples=["john.doe@example.com"])
    phone: str = Field(..., min_length=1, examples=["+1234567890"])


class PatronCreate(PatronBase):
    """Schema for creating a patron."""
    pass


class PatronUpdate(BaseModel):
    """Schema for updating a patron.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    phone: Optional[str] = Field(None, min_length=1)

    @field_validator("name", "email", "phone")
    @classmethod
    def reject_null_fields(cls, value, info):
        return reject_null(value, info)


class BorrowedBook(BookSummary):
    borrowed_at: datetime
    due_back: datetime


class PatronRead(PatronBase):
    id: int
    status: RecordStatus = RecordStatus.ACTIVE
    books: List[BorrowedBook] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }
