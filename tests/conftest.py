import asyncio

import pytest
from fastapi.testclient import TestClient

from library_api.app.core.cache import cache_manager
from library_api.app.core.config import settings
from library_api.app.core.db import init_db
from library_api.app.main import create_app
from library_api.app.schemas.author import AuthorCreate
from library_api.app.schemas.book import BookCreate
from library_api.app.schemas.patron import PatronCreate
from library_api.app.services.author_service import AuthorService
from library_api.app.services.book_service import BookService
from library_api.app.services.patron_service import PatronService


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    # Every test gets its own SQLite file
    db_file = tmp_path / "library_test.db"
    monkeypatch.setattr(settings, "database_url", str(db_file))
    monkeypatch.setattr(settings, "cache_enabled", False)
    init_db()
    cache_manager.clear()
    yield db_file
    cache_manager.clear()


@pytest.fixture
def client(database):
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def make_author():
    counter = iter(range(1, 10_000))

    def _make(first_name=None, last_name="Writer", books=None):
        data = AuthorCreate(
            first_name=first_name or f"Author{next(counter)}",
            last_name=last_name,
            books=books,
        )
        return asyncio.run(AuthorService.create_author(data))

    return _make


@pytest.fixture
def make_book(make_author):
    counter = iter(range(1, 10_000))

    def _make(title="The Great Gatsby", authors=None, isbn=None):
        if authors is None:
            authors = [make_author().id]
        n = next(counter)
        data = BookCreate(
            title=title,
            description="A novel",
            isbn=isbn or f"97800000{n:05d}",
            publication_date="1925-04-10",
            authors=authors,
        )
        return asyncio.run(BookService.create_book(data))

    return _make


@pytest.fixture
def make_patron():
    counter = iter(range(1, 10_000))

    def _make(name=None):
        n = next(counter)
        data = PatronCreate(
            name=name or f"Patron {n}",
            email=f"patron{n}@example.com",
            phone="+1234567890",
        )
        return asyncio.run(PatronService.create_patron(data))

    return _make
