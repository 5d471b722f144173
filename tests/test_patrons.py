import asyncio

import pytest
from pydantic import ValidationError as SchemaError

from library_api.app.core.errors import ConflictError, NotFoundError
from library_api.app.schemas.patron import PatronUpdate
from library_api.app.services.loan_service import LoanService
from library_api.app.services.patron_service import PatronService


def test_patron_lists_borrowed_books(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    asyncio.run(LoanService.borrow(patron.id, book.id))

    stored = asyncio.run(PatronService.get_patron(patron.id))

    assert [b.id for b in stored.books] == [book.id]
    assert stored.books[0].due_back > stored.books[0].borrowed_at


def test_update_patron(make_patron):
    patron = make_patron()

    updated = asyncio.run(PatronService.update_patron(patron.id, PatronUpdate(phone="+4400000000")))

    assert updated.phone == "+4400000000"
    assert updated.name == patron.name


def test_update_missing_patron():
    with pytest.raises(NotFoundError):
        asyncio.run(PatronService.update_patron(10, PatronUpdate(name="Nobody")))


def test_delete_patron_holding_book_is_conflict_until_returned(make_book, make_patron):
    book = make_book()
    patron = make_patron()
    asyncio.run(LoanService.borrow(patron.id, book.id))

    with pytest.raises(ConflictError) as excinfo:
        asyncio.run(PatronService.delete_patron(patron.id))
    assert "associated books" in str(excinfo.value)

    asyncio.run(LoanService.return_book(patron.id, book.id))
    asyncio.run(PatronService.delete_patron(patron.id))

    with pytest.raises(NotFoundError):
        asyncio.run(PatronService.get_patron(patron.id))


def test_delete_missing_patron():
    with pytest.raises(NotFoundError):
        asyncio.run(PatronService.delete_patron(1))


def test_deleted_patron_is_hidden(make_patron):
    kept, removed = make_patron(), make_patron()

    asyncio.run(PatronService.delete_patron(removed.id))

    assert [p.id for p in asyncio.run(PatronService.list_patrons())] == [kept.id]
    assert len(asyncio.run(PatronService.list_patrons(include_deleted=True))) == 2


@pytest.mark.parametrize("field", ["name", "email", "phone"])
def test_update_schema_refuses_null(field):
    with pytest.raises(SchemaError):
        PatronUpdate(**{field: None})


def test_omitted_fields_are_still_optional():
    assert PatronUpdate().model_dump(exclude_unset=True) == {}
