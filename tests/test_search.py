import asyncio

import pytest

from library_api.app.core.errors import NotFoundError
from library_api.app.services.author_service import AuthorService
from library_api.app.services.book_service import BookService
from library_api.app.services.loan_service import LoanService
from library_api.app.services.search_service import SearchService


def search(title, author_ids):
    return asyncio.run(SearchService.search_by_title_and_author(title, author_ids))


def test_search_matches_exact_title_only(make_author, make_book):
    author = make_author()
    exact = make_book(title="Gatsby", authors=[author.id])
    make_book(title="The Great Gatsby", authors=[author.id])

    assert [b.id for b in search("Gatsby", [author.id])] == [exact.id]


def test_search_filters_by_any_listed_author(make_author, make_book):
    first, second, third = make_author(), make_author(), make_author()
    by_first = make_book(title="Poems", authors=[first.id])
    by_both = make_book(title="Poems", authors=[second.id, third.id])
    make_book(title="Poems", authors=[third.id])

    found = search("Poems", [first.id, second.id])

    assert [b.id for b in found] == [by_first.id, by_both.id]


def test_search_with_no_authors_is_empty(make_book):
    make_book(title="Poems")

    assert search("Poems", []) == []


def test_search_skips_deleted_books(make_author, make_book):
    author = make_author()
    book = make_book(title="Poems", authors=[author.id])
    asyncio.run(BookService.delete_book(book.id))

    assert search("Poems", [author.id]) == []


def test_books_by_author_includes_borrowed_books(make_author, make_book, make_patron):
    author = make_author()
    first = make_book(authors=[author.id])
    second = make_book(authors=[author.id])
    make_book()
    asyncio.run(LoanService.borrow(make_patron().id, first.id))

    books = asyncio.run(SearchService.books_by_author(author.id))

    assert [b.id for b in books] == [first.id, second.id]
    assert books[0].holder_id is not None


def test_books_by_missing_author():
    with pytest.raises(NotFoundError):
        asyncio.run(SearchService.books_by_author(404))


def test_books_by_deleted_author(make_author):
    author = make_author()
    asyncio.run(AuthorService.delete_author(author.id))

    with pytest.raises(NotFoundError):
        asyncio.run(SearchService.books_by_author(author.id))
