# services/communication/controllers/notification_service.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from services.academics.controllers.references import ensure_user, not_found
from services.activity_log.controllers.activity_service import record_activity
from services.communication.schemas.notifications import NotificationCreate, NotificationOut
from services.user_management.models.users import User
from shared.auth import require_permission
from shared.schemas import MessageResponse
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


# --- MY NOTIFICATIONS ---
@router.get("", response_model=List[NotificationOut])
async def list_my_notifications(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("notifications:read")),
):
    return await storage.list_user_notifications(current_user.id)


# --- SEND NOTIFICATION ---
@router.post("", response_model=NotificationOut, status_code=status.HTTP_201_CREATED)
async def send_notification(
    payload: NotificationCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("notifications:send")),
):
    await ensure_user(storage, payload.user_id)

    async with storage.transaction():
        notification = await storage.create_notification(payload.model_dump())
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="send_notification",
            entity_type="notification",
            entity_id=notification.id,
            details={"recipientId": payload.user_id, "title": payload.title, "type": payload.type},
        )
    return notification


# --- MARK AS READ ---
@router.put("/{notification_id}/read", response_model=MessageResponse)
async def mark_as_read(
    notification_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("notifications:read")),
):
    notification = await storage.get_notification(notification_id)
    # Someone else's notification looks the same as a missing one
    if not notification or notification.user_id != current_user.id:
        raise not_found("Notification")

    async with storage.transaction():
        await storage.mark_notification_as_read(notification_id)
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="read_notification",
            entity_type="notification",
            entity_id=notification_id,
        )
    return MessageResponse(message="Notification marked as read")
