"""
Row to schema conversion shared by the services.

Each helper takes the cursor of the current unit of work so the
embedded associations are read from the same snapshot as the rows
themselves.
"""

import sqlite3
from typing import Any, Dict, List

from library_api.app.repositories import BookAuthorRepository, BookRepository
from library_api.app.schemas.author import AuthorRead
from library_api.app.schemas.book import BookRead
from library_api.app.schemas.patron import PatronRead


def book_reads(cursor: sqlite3.Cursor, rows: List[Dict[str, Any]]) -> List[BookRead]:
    authors = BookAuthorRepository(cursor).authors_by_book(row["id"] for row in rows)
    return [BookRead(**row, authors=authors[row["id"]]) for row in rows]


def author_reads(cursor: sqlite3.Cursor, rows: List[Dict[str, Any]]) -> List[AuthorRead]:
    books = BookAuthorRepository(cursor).books_by_author(row["id"] for row in rows)
    return [AuthorRead(**row, books=books[row["id"]]) for row in rows]


def patron_reads(cursor: sqlite3.Cursor, rows: List[Dict[str, Any]]) -> List[PatronRead]:
    held = BookRepository(cursor).held_by(row["id"] for row in rows)
    return [PatronRead(**row, books=held[row["id"]]) for row in rows]
