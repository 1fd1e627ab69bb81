# services/academics/controllers/group_service.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from services.academics.controllers.references import ensure_group, not_found
from services.academics.schemas.groups import GroupCreate, GroupOut, GroupUpdate
from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User
from shared.auth import require_permission
from shared.schemas import MessageResponse, changes_from
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/groups", tags=["Groups"])


# --- LIST GROUPS ---
@router.get("", response_model=List[GroupOut])
async def list_groups(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("groups:read")),
):
    return await storage.list_groups()


# --- GET GROUP ---
@router.get("/{group_id}", response_model=GroupOut)
async def get_group(
    group_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("groups:read")),
):
    return await ensure_group(storage, group_id)


# --- CREATE GROUP ---
@router.post("", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("groups:write")),
):
    async with storage.transaction():
        group = await storage.create_group({**payload.model_dump(), "created_by": current_user.id})
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="create_group",
            entity_type="group",
            entity_id=group.id,
            details={"name": group.name, "academicYear": group.academic_year},
        )
    return group


# --- UPDATE GROUP ---
@router.put("/{group_id}", response_model=GroupOut)
async def update_group(
    group_id: UUID,
    payload: GroupUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("groups:write")),
):
    changes = changes_from(payload, nullable=("description",))

    async with storage.transaction():
        group = await storage.update_group(group_id, changes)
        if not group:
            raise not_found("Group")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="update_group",
            entity_type="group",
            entity_id=group_id,
            details={"updates": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
    return group


# --- DELETE GROUP ---
@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("groups:write")),
):
    async with storage.transaction():
        deleted = await storage.delete_group(group_id)
        if not deleted:
            raise not_found("Group")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_group",
            entity_type="group",
            entity_id=group_id,
            details={"deletedAt": timestamp()},
        )
    return MessageResponse(message="Group deleted successfully")
