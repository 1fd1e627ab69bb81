# services/communication/schemas/notifications.py

from pydantic import Field
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel
from services.communication.models.notifications import NotificationType


class NotificationCreate(APIModel):
    user_id: UUID
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.INFO


class NotificationOut(APIModel):
    id: UUID
    user_id: UUID
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime
