"""
Read‑only lookups over the catalogue.

``search_by_title_and_author`` finds books by exact title among a set
of authors and ``books_by_author`` projects an author onto its books.
Both go through ``cache_manager``; every write to books, authors or
custody invalidates the ``books:`` prefix their keys live under.
"""

from typing import Iterable, List

from library_api.app.core.cache import cache_manager
from library_api.app.core.config import settings
from library_api.app.core.db import get_cursor
from library_api.app.core.errors import NotFoundError
from library_api.app.repositories import AuthorRepository, BookRepository
from library_api.app.schemas.book import BookRead
from library_api.app.services.converters import book_reads


class SearchService:
    """Service for searching books."""

    @classmethod
    async def search_by_title_and_author(cls, title: str, author_ids: Iterable[int]) -> List[BookRead]:
        """Find books titled exactly ``title`` by any of ``author_ids``.

        Parameters
        ----------
        title: str
            Title to match.  The comparison is equality, not a
            substring match.
        author_ids: Iterable[int]
            A book matches if at least one of its authors is in this
            collection.  An empty collection matches nothing.

        Returns
        -------
        List[BookRead]
            Matching books, possibly empty.
        """
        ids = sorted(set(author_ids))
        if not ids:
            return []

        def compute() -> List[BookRead]:
            with get_cursor() as cursor:
                return book_reads(cursor, BookRepository(cursor).search(title, ids))

        key = f"books:search:{title}:{','.join(str(i) for i in ids)}"
        return cache_manager.get_or_compute(key, settings.cache_ttl_seconds, compute)

    @classmethod
    async def books_by_author(cls, author_id: int) -> List[BookRead]:
        """All active books of an author, borrowed or not.

        Raises ``NotFoundError`` if the author does not exist.
        """

        def compute() -> List[BookRead]:
            with get_cursor() as cursor:
                if AuthorRepository(cursor).get(author_id) is None:
                    raise NotFoundError("author", author_id)
                return book_reads(cursor, BookRepository(cursor).by_author(author_id))

        return cache_manager.get_or_compute(f"books:author:{author_id}", settings.cache_ttl_seconds, compute)
