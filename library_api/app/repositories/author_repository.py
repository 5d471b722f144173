"""Repository for the ``authors`` table."""

from .base import Repository


class AuthorRepository(Repository):
    table = "authors"
    columns = ("id", "first_name", "last_name", "status")
    updatable = frozenset({"first_name", "last_name"})
