"""
Catalog store.

One repository per table, each bound to the cursor of the caller's
unit of work so that several repositories can take part in the same
transaction.  Repositories return plain ``dict`` rows; services turn
them into Pydantic schemas.
"""

from .association import BookAuthorRepository
from .author_repository import AuthorRepository
from .book_repository import BookRepository
from .patron_repository import PatronRepository

__all__ = [
    "AuthorRepository",
    "BookAuthorRepository",
    "BookRepository",
    "PatronRepository",
]
