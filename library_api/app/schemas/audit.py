"""
Pydantic model for audit log entries.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class AuditLogRead(BaseModel):
    id: int
    action: str
    object_type: str
    object_id: Optional[int] = None
    timestamp: datetime
    details: Optional[Any] = None
