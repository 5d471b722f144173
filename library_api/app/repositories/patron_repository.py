"""Repository for the ``patrons`` table."""

from .base import Repository


class PatronRepository(Repository):
    table = "patrons"
    columns = ("id", "name", "email", "phone", "status")
    updatable = frozenset({"name", "email", "phone"})
