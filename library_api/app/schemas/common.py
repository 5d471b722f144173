"""
Small schemas shared between domains.

Books embed their authors and authors embed their books; the summary
models below are the embedded forms so the two never recurse into
each other.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel


class RecordStatus(str, Enum):
    """Soft‑delete state stored on every entity row."""

    ACTIVE = "active"
    DELETED = "deleted"


class AuthorSummary(BaseModel):
    id: int
    first_name: str
    last_name: str


class BookSummary(BaseModel):
    id: int
    title: str
    isbn: str
    publication_date: date


def reject_null(value, info):
    """Field validator body for update schemas.

    An omitted field means "leave unchanged"; an explicit ``null`` for
    a column that cannot be empty is refused instead of being written.
    """
    if value is None:
        raise ValueError(f"{info.field_name} may be omitted but not null")
    return value
