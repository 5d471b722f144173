"""
Repository for the ``books`` table.

Besides the generic CRUD inherited from ``Repository`` this holds the
conditional updates the loan service relies on.  ``claim``,
``release`` and ``soft_delete_if_available`` each test and change the
custody fields in a single ``UPDATE`` statement and report through
``rowcount`` whether the row matched, so the check and the write can
never be split by another writer.

``custody`` columns are not in ``updatable``: the generic update path
cannot touch them.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List

from ..schemas.common import RecordStatus
from .base import Repository, active_clause, placeholders, to_db, utcnow


CUSTODY_COLUMNS = ("holder_id", "borrowed_at", "due_back", "returned_at")


class BookRepository(Repository):
    table = "books"
    columns = (
        "id",
        "title",
        "description",
        "isbn",
        "publication_date",
        *CUSTODY_COLUMNS,
        "status",
    )
    updatable = frozenset({"title", "description", "isbn", "publication_date"})

    # ------------------------------------------------------------------
    # Custody transitions
    # ------------------------------------------------------------------
    def claim(self, book_id: int, patron_id: int, borrowed_at: datetime, due_back: datetime) -> bool:
        """Give an available book to ``patron_id``.

        Returns ``False`` without changing anything when the book
        already has a holder.
        """
        self.cursor.execute(
            f"""
            UPDATE books
            SET holder_id = ?, borrowed_at = ?, due_back = ?, returned_at = NULL, updated_at = ?
            WHERE id = ? AND holder_id IS NULL AND {active_clause()}
            """,
            (patron_id, to_db(borrowed_at), to_db(due_back), to_db(borrowed_at), book_id),
        )
        return self.cursor.rowcount == 1

    def release(self, book_id: int, patron_id: int, returned_at: datetime) -> bool:
        """Take a book back from ``patron_id``.

        Stamps ``returned_at`` and clears the other custody fields so
        the book can be borrowed again.  Returns ``False`` when the book
        is not held by that patron.
        """
        self.cursor.execute(
            f"""
            UPDATE books
            SET holder_id = NULL, borrowed_at = NULL, due_back = NULL, returned_at = ?, updated_at = ?
            WHERE id = ? AND holder_id = ? AND {active_clause()}
            """,
            (to_db(returned_at), to_db(returned_at), book_id, patron_id),
        )
        return self.cursor.rowcount == 1

    def soft_delete_if_available(self, book_id: int) -> bool:
        """Soft‑delete a book only while nobody holds it."""
        now = to_db(utcnow())
        self.cursor.execute(
            f"""
            UPDATE books
            SET status = ?, deleted_at = ?, updated_at = ?
            WHERE id = ? AND holder_id IS NULL AND {active_clause()}
            """,
            (RecordStatus.DELETED.value, now, now, book_id),
        )
        return self.cursor.rowcount == 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def held_by(self, patron_ids: Iterable[int]) -> Dict[int, List[Dict[str, Any]]]:
        """Map each patron ID to the active books they hold."""
        ids = list(set(patron_ids))
        result: Dict[int, List[Dict[str, Any]]] = {patron_id: [] for patron_id in ids}
        if not ids:
            return result
        rows = self.cursor.execute(
            f"{self._select} WHERE holder_id IN ({placeholders(len(ids))}) AND {active_clause()} ORDER BY id",
            tuple(ids),
        ).fetchall()
        for row in rows:
            result[row["holder_id"]].append(dict(row))
        return result

    def count_held_by(self, patron_id: int) -> int:
        row = self.cursor.execute(
            f"SELECT COUNT(*) AS total FROM books WHERE holder_id = ? AND {active_clause()}",
            (patron_id,),
        ).fetchone()
        return row["total"]

    def search(self, title: str, author_ids: Iterable[int]) -> List[Dict[str, Any]]:
        """Books titled exactly ``title`` written by any of ``author_ids``."""
        ids = list(set(author_ids))
        if not ids:
            return []
        rows = self.cursor.execute(
            f"""
            SELECT {', '.join('b.' + column for column in self.columns)}
            FROM books b
            WHERE b.title = ? AND {active_clause('b')}
              AND EXISTS (
                SELECT 1 FROM book_author ba
                JOIN authors a ON a.id = ba.author_id
                WHERE ba.book_id = b.id
                  AND ba.author_id IN ({placeholders(len(ids))})
                  AND {active_clause('a')}
              )
            ORDER BY b.id
            """,
            (title, *ids),
        ).fetchall()
        return [dict(row) for row in rows]

    def by_author(self, author_id: int) -> List[Dict[str, Any]]:
        rows = self.cursor.execute(
            f"""
            SELECT {', '.join('b.' + column for column in self.columns)}
            FROM books b
            JOIN book_author ba ON ba.book_id = b.id
            WHERE ba.author_id = ? AND {active_clause('b')}
            ORDER BY b.id
            """,
            (author_id,),
        ).fetchall()
        return [dict(row) for row in rows]
