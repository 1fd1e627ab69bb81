# services/activity_log/controllers/activity_service.py
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder

from services.activity_log.models.activity_logs import ActivityLog
from services.activity_log.schemas.activity_logs import ActivityLogOut
from services.user_management.models.users import User
from shared.auth import require_permission
from shared.db import utcnow
from shared.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activities", tags=["Activity Log"])

# Never written to the log, whatever the caller passes in
SECRET_FIELDS = {
    "password", "confirm_password", "current_password", "new_password",
    "confirmPassword", "currentPassword", "newPassword",
}


def _scrub(details: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for key, value in details.items():
        if key in SECRET_FIELDS:
            continue
        cleaned[key] = _scrub(value) if isinstance(value, dict) else value
    return cleaned


async def record_activity(
    storage: Storage,
    *,
    actor_id: UUID,
    action: str,
    entity_type: str,
    entity_id: Optional[UUID] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ActivityLog:
    """Append one entry to the activity log. Call it inside the mutation's transaction."""
    entry = await storage.log_activity({
        "user_id": actor_id,
        "action": action,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "details": jsonable_encoder(_scrub(details or {})),
    })
    logger.debug("Activity %s on %s %s by %s", action, entity_type, entity_id, actor_id)
    return entry


def timestamp() -> str:
    return utcnow().isoformat()


# --- GET ACTIVITY LOG (admin, professor) ---
@router.get("", response_model=List[ActivityLogOut])
async def list_activities(
    user_id: Optional[UUID] = Query(None, alias="userId"),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("activities:read")),
):
    if user_id:
        return await storage.list_user_activities(user_id)
    return await storage.list_activities()
