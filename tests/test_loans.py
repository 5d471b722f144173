import asyncio
from datetime import timedelta

import pytest

from library_api.app.core.errors import NotFoundError
from library_api.app.schemas.book import BookUpdate
from library_api.app.services.audit_service import AuditService
from library_api.app.services.book_service import BookService
from library_api.app.services.loan_service import LoanService


def borrow(patron_id, book_id):
    return asyncio.run(LoanService.borrow(patron_id, book_id))


def give_back(patron_id, book_id):
    return asyncio.run(LoanService.return_book(patron_id, book_id))


def test_borrow_available_book(make_book, make_patron):
    book = make_book()
    patron = make_patron()

    result = borrow(patron.id, book.id)

    assert result.success is True
    assert result.patron_id == patron.id
    stored = asyncio.run(BookService.get_book(book.id))
    assert stored.holder_id == patron.id
    assert stored.borrowed_at is not None
    assert stored.returned_at is None
    assert asyncio.run(LoanService.is_borrowed(book.id)) is True


def test_due_back_is_fourteen_days_after_borrowing(make_book, make_patron):
    book = make_book()
    patron = make_patron()

    result = borrow(patron.id, book.id)

    assert result.due_back - result.borrowed_at == timedelta(days=14)
    stored = asyncio.run(BookService.get_book(book.id))
    assert stored.due_back - stored.borrowed_at == timedelta(days=14)
    assert stored.borrowed_at.utcoffset() == timedelta(0)


def test_second_borrow_by_other_patron_fails_and_keeps_holder(make_book, make_patron):
    book = make_book()
    first, second = make_patron(), make_patron()
    borrow(first.id, book.id)

    result = borrow(second.id, book.id)

    assert result.success is False
    assert result.borrowed_at is None
    assert asyncio.run(BookService.get_book(book.id)).holder_id == first.id


def test_borrowing_own_book_again_fails(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    first = borrow(patron.id, book.id)

    result = borrow(patron.id, book.id)

    assert result.success is False
    stored = asyncio.run(BookService.get_book(book.id))
    assert stored.borrowed_at == first.borrowed_at


def test_borrow_missing_book_or_patron(make_book, make_patron):
    book = make_book()
    patron = make_patron()

    with pytest.raises(NotFoundError) as excinfo:
        borrow(patron.id, 999)
    assert excinfo.value.kind == "book"

    with pytest.raises(NotFoundError) as excinfo:
        borrow(999, book.id)
    assert excinfo.value.kind == "patron"
    assert str(excinfo.value) == "Patron 999 not found"


def test_return_by_non_holder_is_not_found(make_book, make_patron):
    book = make_book()
    holder, other = make_patron(), make_patron()
    borrow(holder.id, book.id)

    with pytest.raises(NotFoundError):
        give_back(other.id, book.id)

    assert asyncio.run(BookService.get_book(book.id)).holder_id == holder.id


def test_return_of_available_book_is_not_found(make_book, make_patron):
    book = make_book()
    patron = make_patron()

    with pytest.raises(NotFoundError):
        give_back(patron.id, book.id)


def test_return_clears_custody_and_stamps_returned_at(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    borrow(patron.id, book.id)

    returned = give_back(patron.id, book.id)

    assert returned.holder_id is None
    assert returned.borrowed_at is None
    assert returned.due_back is None
    assert returned.returned_at is not None
    assert asyncio.run(LoanService.is_borrowed(book.id)) is False


def test_book_can_be_borrowed_again_after_return(make_book, make_patron):
    book = make_book()
    first, second = make_patron(), make_patron()
    borrow(first.id, book.id)
    give_back(first.id, book.id)

    result = borrow(second.id, book.id)

    assert result.success is True
    stored = asyncio.run(BookService.get_book(book.id))
    assert stored.holder_id == second.id
    assert stored.returned_at is None


def test_is_borrowed_missing_book():
    with pytest.raises(NotFoundError):
        asyncio.run(LoanService.is_borrowed(42))


def test_books_held_by_patron(make_book, make_patron):
    first, second = make_book(), make_book()
    make_book()
    patron = make_patron()
    borrow(patron.id, first.id)
    borrow(patron.id, second.id)

    held = asyncio.run(LoanService.books_held_by(patron.id))

    assert [book.id for book in held] == [first.id, second.id]
    with pytest.raises(NotFoundError):
        asyncio.run(LoanService.books_held_by(999))


def test_empty_update_leaves_custody_and_authors_alone(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    borrow(patron.id, book.id)
    before = asyncio.run(BookService.get_book(book.id))

    after = asyncio.run(BookService.update_book(book.id, BookUpdate()))

    assert after.holder_id == before.holder_id
    assert after.borrowed_at == before.borrowed_at
    assert after.due_back == before.due_back
    assert [a.id for a in after.authors] == [a.id for a in before.authors]


def test_loans_are_audited(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    borrow(patron.id, book.id)
    give_back(patron.id, book.id)

    logs = asyncio.run(AuditService.list_logs(object_type="book", object_id=book.id))

    assert [log.action for log in logs] == ["return", "borrow", "create"]
    assert logs[1].details["patron_id"] == patron.id


def test_failed_borrow_is_not_audited(make_book, make_patron):
    book = make_book()
    first, second = make_patron(), make_patron()
    borrow(first.id, book.id)
    borrow(second.id, book.id)

    logs = asyncio.run(AuditService.list_logs(action="borrow"))

    assert len(logs) == 1
