"""
Book ↔ author association table.

``book_author`` rows carry no payload beyond the two foreign keys.
Attach adds links and ignores ones that already exist; sync makes the
link set equal to the given list; detach removes every link of one
side.
"""

import sqlite3
from typing import Any, Dict, Iterable, List

from .base import active_clause, placeholders


class BookAuthorRepository:
    """Read and write links between books and authors."""

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def attach(self, book_id: int, author_id: int) -> None:
        self.cursor.execute(
            "INSERT OR IGNORE INTO book_author (book_id, author_id) VALUES (?, ?)",
            (book_id, author_id),
        )

    def attach_authors(self, book_id: int, author_ids: Iterable[int]) -> None:
        for author_id in dict.fromkeys(author_ids):
            self.attach(book_id, author_id)

    def attach_books(self, author_id: int, book_ids: Iterable[int]) -> None:
        for book_id in dict.fromkeys(book_ids):
            self.attach(book_id, author_id)

    def sync_authors(self, book_id: int, author_ids: Iterable[int]) -> None:
        """Make ``author_ids`` the complete author set of ``book_id``."""
        wanted = set(author_ids)
        current = set(self.author_ids(book_id))
        for author_id in current - wanted:
            self.cursor.execute(
                "DELETE FROM book_author WHERE book_id = ? AND author_id = ?",
                (book_id, author_id),
            )
        self.attach_authors(book_id, sorted(wanted - current))

    def sync_books(self, author_id: int, book_ids: Iterable[int]) -> None:
        """Make ``book_ids`` the complete book set of ``author_id``."""
        wanted = set(book_ids)
        current = set(self.book_ids(author_id))
        for book_id in current - wanted:
            self.cursor.execute(
                "DELETE FROM book_author WHERE book_id = ? AND author_id = ?",
                (book_id, author_id),
            )
        self.attach_books(author_id, sorted(wanted - current))

    def detach_book(self, book_id: int) -> int:
        self.cursor.execute("DELETE FROM book_author WHERE book_id = ?", (book_id,))
        return self.cursor.rowcount

    def detach_author(self, author_id: int) -> int:
        self.cursor.execute("DELETE FROM book_author WHERE author_id = ?", (author_id,))
        return self.cursor.rowcount

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def author_ids(self, book_id: int) -> List[int]:
        rows = self.cursor.execute(
            "SELECT author_id FROM book_author WHERE book_id = ? ORDER BY author_id",
            (book_id,),
        ).fetchall()
        return [row["author_id"] for row in rows]

    def book_ids(self, author_id: int) -> List[int]:
        rows = self.cursor.execute(
            "SELECT book_id FROM book_author WHERE author_id = ? ORDER BY book_id",
            (author_id,),
        ).fetchall()
        return [row["book_id"] for row in rows]

    def authors_by_book(self, book_ids: Iterable[int]) -> Dict[int, List[Dict[str, Any]]]:
        """Map each book ID to its active authors."""
        ids = list(set(book_ids))
        result: Dict[int, List[Dict[str, Any]]] = {book_id: [] for book_id in ids}
        if not ids:
            return result
        rows = self.cursor.execute(
            f"""
            SELECT ba.book_id, a.id, a.first_name, a.last_name
            FROM book_author ba
            JOIN authors a ON a.id = ba.author_id
            WHERE ba.book_id IN ({placeholders(len(ids))}) AND {active_clause('a')}
            ORDER BY a.id
            """,
            tuple(ids),
        ).fetchall()
        for row in rows:
            result[row["book_id"]].append(
                {"id": row["id"], "first_name": row["first_name"], "last_name": row["last_name"]}
            )
        return result

    def books_by_author(self, author_ids: Iterable[int]) -> Dict[int, List[Dict[str, Any]]]:
        """Map each author ID to its active books."""
        ids = list(set(author_ids))
        result: Dict[int, List[Dict[str, Any]]] = {author_id: [] for author_id in ids}
        if not ids:
            return result
        rows = self.cursor.execute(
            f"""
            SELECT ba.author_id, b.id, b.title, b.isbn, b.publication_date
            FROM book_author ba
            JOIN books b ON b.id = ba.book_id
            WHERE ba.author_id IN ({placeholders(len(ids))}) AND {active_clause('b')}
            ORDER BY b.id
            """,
            tuple(ids),
        ).fetchall()
        for row in rows:
            result[row["author_id"]].append(
                {
                    "id": row["id"],
                    "title": row["title"],
                    "isbn": row["isbn"],
                    "publication_date": row["publication_date"],
                }
            )
        return result
