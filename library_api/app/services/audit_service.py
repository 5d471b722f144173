"""
Audit service for recording and querying catalogue and loan actions.

Every create, update, delete, borrow and return writes one row to
``audit_logs``.  The row is written with the cursor of the change it
describes, so it commits or rolls back together with that change.
Since custody is stored only on the book row, the audit trail is the
one place the history of past loans survives; nothing reads it to
decide whether an operation is allowed.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Optional

from library_api.app.core.db import get_cursor
from library_api.app.repositories.base import to_db, utcnow
from library_api.app.schemas.audit import AuditLogRead


class AuditService:
    """Service class for writing and retrieving audit logs."""

    @classmethod
    def log(
        cls,
        cursor: sqlite3.Cursor,
        action: str,
        object_type: str,
        object_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Insert a new audit record inside the caller's transaction.

        Parameters
        ----------
        cursor : sqlite3.Cursor
            Cursor of the open transaction performing the change.
        action : str
            Short description of the action (e.g. "create", "borrow").
        object_type : str
            Type of object affected ("book", "author" or "patron").
        object_id : Optional[int]
            Primary key of the affected object, if applicable.
        details : Optional[dict]
            Additional structured data about the action, stored as JSON.
        """
        details_json = json.dumps(details, default=str) if details else None
        cursor.execute(
            """
            INSERT INTO audit_logs (action, object_type, object_id, timestamp, details)
            VALUES (?, ?, ?, ?, ?)
            """,
            (action, object_type, object_id, to_db(utcnow()), details_json),
        )

    @classmethod
    async def list_logs(
        cls,
        object_type: Optional[str] = None,
        object_id: Optional[int] = None,
        action: Optional[str] = None,
        limit: int = 100,
    ) -> List[AuditLogRead]:
        """Retrieve audit records, newest first, with optional filters."""
        where_clauses: List[str] = []
        params: List[Any] = []
        if object_type:
            where_clauses.append("object_type = ?")
            params.append(object_type)
        if object_id is not None:
            where_clauses.append("object_id = ?")
            params.append(object_id)
        if action:
            where_clauses.append("action = ?")
            params.append(action)
        query = "SELECT id, action, object_type, object_id, timestamp, details FROM audit_logs"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)
        with get_cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        logs: List[AuditLogRead] = []
        for row in rows:
            details_data = None
            if row["details"]:
                try:
                    details_data = json.loads(row["details"])
                except json.JSONDecodeError:
                    details_data = row["details"]
            logs.append(
                AuditLogRead(
                    id=row["id"],
                    action=row["action"],
                    object_type=row["object_type"],
                    object_id=row["object_id"],
                    timestamp=row["timestamp"],
                    details=details_data,
                )
            )
        return logs
