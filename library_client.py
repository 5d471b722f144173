"""Library API client.

This module defines a thin client around the Library REST API.  It
uses the ``requests`` library internally and exposes one method per
route:

* books: :meth:`list_books`, :meth:`get_book`, :meth:`create_book`,
  :meth:`update_book`, :meth:`delete_book`, :meth:`search_books`;
* authors: :meth:`list_authors`, :meth:`get_author`,
  :meth:`create_author`, :meth:`update_author`, :meth:`delete_author`,
  :meth:`books_by_author`;
* patrons: :meth:`list_patrons`, :meth:`get_patron`,
  :meth:`create_patron`, :meth:`update_patron`, :meth:`delete_patron`,
  :meth:`patron_books`;
* loans: :meth:`borrow_book`, :meth:`return_book`;
* audit: :meth:`list_audit_logs`.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty list for
listings) and ``error`` is a dictionary with ``status_code`` and
``message`` keys.  No method raises on HTTP or network errors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Error = Dict[str, Any]


class LibraryAPI:
    """Client for interacting with the Library API."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
                The ``/api/v1`` prefix is added by the client.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/") + "/api/v1"
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/books``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", path, params=params)
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------
    def list_books(self, include_deleted: bool = False) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        params = {"include_deleted": "true"} if include_deleted else None
        return self._list("/books", params)

    def get_book(self, book_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/books/{book_id}")

    def create_book(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a book.

        Args:
            payload: ``title``, ``description``, ``isbn``,
                ``publication_date`` and a non-empty ``authors`` list.
        """
        return self._request("POST", "/books", json_body=payload)

    def update_book(self, book_id: int, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/books/{book_id}", json_body=payload)

    def delete_book(self, book_id: int) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/books/{book_id}")
        return error is None, error

    def search_books(self, title: str, author_ids: Iterable[int]) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Search books by exact title among the given authors.

        A 404 from the server means nothing matched; it is reported as
        an empty list without an error.
        """
        data, error = self._request(
            "GET", "/books/search", params={"title": title, "authors": list(author_ids)}
        )
        if error:
            if error["status_code"] == 404:
                return [], None
            return [], error
        return data.get("books", []), None

    # ------------------------------------------------------------------
    # Authors
    # ------------------------------------------------------------------
    def list_authors(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/authors")

    def get_author(self, author_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/authors/{author_id}")

    def create_author(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/authors", json_body=payload)

    def update_author(self, author_id: int, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/authors/{author_id}", json_body=payload)

    def delete_author(self, author_id: int) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/authors/{author_id}")
        return error is None, error

    def books_by_author(self, author_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list(f"/authors/{author_id}/books")

    # ------------------------------------------------------------------
    # Patrons
    # ------------------------------------------------------------------
    def list_patrons(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        return self._list("/patrons")

    def get_patron(self, patron_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("GET", f"/patrons/{patron_id}")

    def create_patron(self, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/patrons", json_body=payload)

    def update_patron(self, patron_id: int, payload: Dict[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("PUT", f"/patrons/{patron_id}", json_body=payload)

    def delete_patron(self, patron_id: int) -> Tuple[bool, Optional[Error]]:
        _, error = self._request("DELETE", f"/patrons/{patron_id}")
        return error is None, error

    def patron_books(self, patron_id: int) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Books the patron currently holds."""
        return self._list(f"/patrons/{patron_id}/books")

    # ------------------------------------------------------------------
    # Loans
    # ------------------------------------------------------------------
    def borrow_book(self, patron_id: int, book_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Borrow a book for a patron.

        Returns:
            A tuple ``(loan, error)``.  ``loan`` holds ``borrowed_at``
            and ``due_back``.  A book that is already out on loan comes
            back as an error with ``status_code`` 400.
        """
        data, error = self._request("POST", f"/patrons/{patron_id}/books/{book_id}/borrow")
        if error:
            return None, error
        return data.get("data"), None

    def return_book(self, patron_id: int, book_id: int) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Return a book.

        Returns:
            A tuple ``(book, error)`` with the updated book on success.
        """
        data, error = self._request("POST", f"/patrons/{patron_id}/books/{book_id}/return")
        if error:
            return None, error
        return data.get("data"), None

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------
    def list_audit_logs(self, **filters: Any) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve audit logs.

        Args:
            **filters: Any of ``object_type``, ``object_id``, ``action``
                and ``limit``.  ``None`` values are dropped.
        """
        params = {key: value for key, value in filters.items() if value is not None}
        return self._list("/audit", params or None)
