"""
Pydantic models for authors.

Authors link to books through the ``book_author`` association.  On
create, ``books`` attaches the listed books; on update it replaces the
whole set.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import BookSummary, RecordStatus, reject_null


class AuthorBase(BaseModel):
    first_name: str = Field(..., min_length=1, examples=["F. Scott"])
    last_name: str = Field(..., min_length=1, examples=["Fitzgerald"])


class AuthorCreate(AuthorBase):
    """Schema for creating an author."""

    books: Optional[List[int]] = Field(None, description="IDs of books to attach")


class AuthorUpdate(BaseModel):
    """Schema for updating an author.

    All fields are optional; only provided fields will be updated.
    """

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    books: Optional[List[int]] = Field(None, description="Replacement list of book IDs")

    @field_validator("first_name", "last_name", "books")
    @classmethod
    def reject_null_fields(cls, value, info):
        return reject_null(value, info)


class AuthorRead(AuthorBase):
    id: int
    status: RecordStatus = RecordStatus.ACTIVE
    books: List[BookSummary] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }
