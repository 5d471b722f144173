"""
Shared repository plumbing.

Soft delete is implemented once here: every entity table carries a
``status`` column and ``active_clause`` is the predicate all reads
apply unless ``include_deleted`` is requested.  ``Repository`` gives
subclasses get/list/insert/update/soft‑delete over a whitelisted set
of columns.
"""

import sqlite3
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from ..schemas.common import RecordStatus


def utcnow() -> datetime:
    """Current time as a timezone‑aware UTC datetime."""
    return datetime.now(timezone.utc)


def active_clause(alias: Optional[str] = None) -> str:
    """SQL predicate selecting rows that have not been soft‑deleted."""
    column = f"{alias}.status" if alias else "status"
    return f"{column} = '{RecordStatus.ACTIVE.value}'"


def to_db(value: Any) -> Any:
    """Convert Python values to what is stored in SQLite."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class Repository:
    """Base class for single‑table repositories.

    Subclasses set ``table``, ``columns`` (selected on read) and
    ``updatable`` (the columns ``insert`` and ``update_fields`` may
    write).  Columns outside ``updatable`` are silently ignored by
    those two methods.
    """

    table: str = ""
    columns: tuple[str, ...] = ()
    updatable: frozenset[str] = frozenset()

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self.cursor = cursor

    @property
    def _select(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.table}"

    def get(self, entity_id: int, include_deleted: bool = False) -> Optional[Dict[str, Any]]:
        query = f"{self._select} WHERE id = ?"
        if not include_deleted:
            query += f" AND {active_clause()}"
        row = self.cursor.execute(query, (entity_id,)).fetchone()
        return dict(row) if row else None

    def list_all(self, include_deleted: bool = False) -> List[Dict[str, Any]]:
        query = self._select
        if not include_deleted:
            query += f" WHERE {active_clause()}"
        query += " ORDER BY id ASC"
        return [dict(row) for row in self.cursor.execute(query).fetchall()]

    def existing_ids(self, ids: Iterable[int]) -> Set[int]:
        """Return the subset of ``ids`` that refer to active rows."""
        wanted = list(set(ids))
        if not wanted:
            return set()
        rows = self.cursor.execute(
            f"SELECT id FROM {self.table} WHERE id IN ({placeholders(len(wanted))}) AND {active_clause()}",
            tuple(wanted),
        ).fetchall()
        return {row["id"] for row in rows}

    def insert(self, fields: Dict[str, Any]) -> int:
        data = {key: to_db(value) for key, value in fields.items() if key in self.updatable}
        names = list(data)
        self.cursor.execute(
            f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders(len(names))})",
            tuple(data[name] for name in names),
        )
        return self.cursor.lastrowid

    def update_fields(self, entity_id: int, fields: Dict[str, Any]) -> bool:
        """Write the given columns of an active row.

        Returns ``False`` when the row does not exist.  An empty
        ``fields`` mapping leaves the row untouched.
        """
        data = {key: to_db(value) for key, value in fields.items() if key in self.updatable}
        if not data:
            return self.get(entity_id) is not None
        assignments = ", ".join(f"{name} = ?" for name in data)
        self.cursor.execute(
            f"UPDATE {self.table} SET {assignments}, updated_at = ? WHERE id = ? AND {active_clause()}",
            (*data.values(), to_db(utcnow()), entity_id),
        )
        return self.cursor.rowcount == 1

    def soft_delete(self, entity_id: int) -> bool:
        now = to_db(utcnow())
        self.cursor.execute(
            f"UPDATE {self.table} SET status = ?, deleted_at = ?, updated_at = ? WHERE id = ? AND {active_clause()}",
            (RecordStatus.DELETED.value, now, now, entity_id),
        )
        return self.cursor.rowcount == 1
