import asyncio
import sqlite3

import pytest
from pydantic import ValidationError as SchemaError

from library_api.app.core.errors import ConflictError, NotFoundError, ValidationError
from library_api.app.schemas.book import BookCreate, BookUpdate
from library_api.app.services.book_service import BookService
from library_api.app.services.loan_service import LoanService


def book_payload(**overrides):
    data = {
        "title": "Tender Is the Night",
        "description": "A novel",
        "isbn": "9780684801544",
        "publication_date": "1934-04-12",
        "authors": [],
    }
    data.update(overrides)
    return data


def test_create_book_attaches_authors(make_author):
    first, second = make_author(), make_author()

    book = asyncio.run(BookService.create_book(BookCreate(**book_payload(authors=[first.id, second.id]))))

    assert book.id > 0
    assert book.holder_id is None
    assert sorted(a.id for a in book.authors) == [first.id, second.id]


def test_create_book_requires_authors():
    with pytest.raises(SchemaError):
        BookCreate(**book_payload(authors=[]))


def test_create_book_with_unknown_author(make_author):
    author = make_author()

    with pytest.raises(ValidationError):
        asyncio.run(BookService.create_book(BookCreate(**book_payload(authors=[author.id, 999]))))

    assert asyncio.run(BookService.list_books()) == []


def test_duplicate_isbn_is_conflict(make_book, make_author):
    make_book(isbn="9780684801544")

    with pytest.raises(ConflictError):
        asyncio.run(BookService.create_book(BookCreate(**book_payload(authors=[make_author().id]))))


def test_update_changes_only_sent_fields(make_book):
    book = make_book(title="Old title")

    updated = asyncio.run(BookService.update_book(book.id, BookUpdate(title="New title")))

    assert updated.title == "New title"
    assert updated.isbn == book.isbn
    assert updated.description == book.description


def test_update_with_authors_replaces_set(make_book, make_author):
    book = make_book()
    replacement = make_author()

    updated = asyncio.run(BookService.update_book(book.id, BookUpdate(authors=[replacement.id])))

    assert [a.id for a in updated.authors] == [replacement.id]


def test_update_with_empty_authors_is_rejected(make_book):
    book = make_book()

    with pytest.raises(ValidationError):
        asyncio.run(BookService.update_book(book.id, BookUpdate(authors=[])))

    assert len(asyncio.run(BookService.get_book(book.id)).authors) == 1


def test_update_missing_book():
    with pytest.raises(NotFoundError):
        asyncio.run(BookService.update_book(123, BookUpdate(title="x")))


def test_update_to_taken_isbn_is_conflict(make_book):
    make_book(isbn="111")
    other = make_book(isbn="222")

    with pytest.raises(ConflictError):
        asyncio.run(BookService.update_book(other.id, BookUpdate(isbn="111")))


def test_delete_borrowed_book_is_conflict_until_returned(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    asyncio.run(LoanService.borrow(patron.id, book.id))

    with pytest.raises(ConflictError):
        asyncio.run(BookService.delete_book(book.id))
    assert asyncio.run(BookService.get_book(book.id)).holder_id == patron.id

    asyncio.run(LoanService.return_book(patron.id, book.id))
    asyncio.run(BookService.delete_book(book.id))

    with pytest.raises(NotFoundError):
        asyncio.run(BookService.get_book(book.id))


def test_delete_is_soft(make_book):
    book = make_book()

    asyncio.run(BookService.delete_book(book.id))

    assert asyncio.run(BookService.list_books()) == []
    deleted = asyncio.run(BookService.list_books(include_deleted=True))
    assert [b.id for b in deleted] == [book.id]
    assert deleted[0].status == "deleted"
    assert deleted[0].authors == []


def test_delete_missing_book():
    with pytest.raises(NotFoundError):
        asyncio.run(BookService.delete_book(5))


def test_deleted_book_cannot_be_borrowed(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    asyncio.run(BookService.delete_book(book.id))

    with pytest.raises(NotFoundError):
        asyncio.run(LoanService.borrow(patron.id, book.id))


@pytest.mark.parametrize("field", ["title", "description", "isbn", "publication_date", "authors"])
def test_update_schema_refuses_null(field):
    with pytest.raises(SchemaError):
        BookUpdate(**{field: None})


def test_only_isbn_clash_is_reported_as_conflict(make_book):
    book = make_book()
    # Bypasses validation so NULL reaches the NOT NULL column.
    data = BookUpdate.model_construct(_fields_set={"title"}, title=None)

    with pytest.raises(sqlite3.IntegrityError):
        asyncio.run(BookService.update_book(book.id, data))

    assert asyncio.run(BookService.get_book(book.id)).title == book.title
