# services/academics/controllers/references.py
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status

from services.academics.models import Group, Subject
from services.user_management.models.users import User, UserRole
from shared.storage import Storage


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")


async def ensure_group(storage: Storage, group_id: UUID) -> Group:
    group = await storage.get_group(group_id)
    if not group:
        raise not_found("Group")
    return group


async def ensure_subject(storage: Storage, subject_id: UUID) -> Subject:
    subject = await storage.get_subject(subject_id)
    if not subject:
        raise not_found("Subject")
    return subject


async def ensure_user(storage: Storage, user_id: UUID, role: Optional[UserRole] = None, label: str = "User") -> User:
    user = await storage.get_user(user_id)
    if not user:
        raise not_found(label)
    if role is not None and user.role != role:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} must have the {role.value} role"
        )
    return user
