# services/activity_log/schemas/activity_logs.py

from typing import Any, Optional
from datetime import datetime
from uuid import UUID

from shared.schemas import APIModel


class ActivityLogOut(APIModel):
    id: UUID
    user_id: UUID
    action: str
    entity_type: str
    entity_id: Optional[UUID]
    details: Optional[Any]
    created_at: datetime
