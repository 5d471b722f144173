import requests

from library_client import LibraryAPI


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = b"" if payload is None and not text else b"x"

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_api(*responses):
    session = FakeSession(*responses)
    return LibraryAPI(base_url="http://library.test/", session=session), session


def test_list_books_success():
    api, session = make_api(FakeResponse(payload=[{"id": 1}]))

    books, error = api.list_books()

    assert books == [{"id": 1}]
    assert error is None
    assert session.calls[0]["url"] == "http://library.test/api/v1/books"


def test_borrow_conflict_returns_error_dict():
    api, session = make_api(FakeResponse(400, {"detail": "Book is already borrowed"}))

    loan, error = api.borrow_book(2, 5)

    assert loan is None
    assert error == {"status_code": 400, "message": "Book is already borrowed"}
    assert session.calls[0]["method"] == "POST"
    assert session.calls[0]["url"].endswith("/patrons/2/books/5/borrow")


def test_borrow_success_unwraps_data():
    payload = {"message": "Book borrowed successfully", "data": {"success": True, "book_id": 5}}
    api, _ = make_api(FakeResponse(payload=payload))

    loan, error = api.borrow_book(2, 5)

    assert error is None
    assert loan["book_id"] == 5


def test_search_not_found_is_empty_list():
    api, session = make_api(FakeResponse(404, {"detail": "No books found"}))

    books, error = api.search_books("Gatsby", [1, 2])

    assert books == []
    assert error is None
    assert session.calls[0]["params"] == {"title": "Gatsby", "authors": [1, 2]}


def test_non_json_error_uses_text():
    api, _ = make_api(FakeResponse(500, text="Internal Server Error"))

    book, error = api.get_book(1)

    assert book is None
    assert error == {"status_code": 500, "message": "Internal Server Error"}


def test_network_error():
    api, _ = make_api(requests.ConnectionError("connection refused"))

    deleted, error = api.delete_patron(3)

    assert deleted is False
    assert error["status_code"] is None
    assert "connection refused" in error["message"]


def test_delete_book_success_and_audit_filters():
    api, session = make_api(
        FakeResponse(payload={"message": "Book deleted successfully"}),
        FakeResponse(payload=[]),
    )

    deleted, error = api.delete_book(7)
    logs, _ = api.list_audit_logs(action="delete", object_id=None)

    assert deleted is True and error is None
    assert logs == []
    assert session.calls[1]["params"] == {"action": "delete"}


def test_patron_books():
    api, session = make_api(FakeResponse(payload=[{"id": 4}]))

    books, error = api.patron_books(2)

    assert error is None
    assert books == [{"id": 4}]
    assert session.calls[0]["url"] == "http://library.test/api/v1/patrons/2/books"
