"""
Audit log endpoints for API v1.

Exposes the trail of create, update, delete, borrow and return actions
recorded by the service layer, newest first.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from library_api.app.schemas.audit import AuditLogRead
from library_api.app.services.audit_service import AuditService

router = APIRouter()


@router.get("", response_model=List[AuditLogRead])
async def list_audit_logs(
    object_type: Optional[str] = Query(None, description="Filter by object type (book, author, patron)"),
    object_id: Optional[int] = Query(None, description="Filter by object ID"),
    action: Optional[str] = Query(None, description="Filter by action (create, update, delete, borrow, return)"),
    limit: int = Query(100, ge=1, le=500, description="Maximum number of logs to return"),
) -> List[AuditLogRead]:
    """Retrieve audit logs with optional filters."""
    return await AuditService.list_logs(
        object_type=object_type,
        object_id=object_id,
        action=action,
        limit=limit,
    )
