# services/academics/controllers/material_service.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from services.academics.controllers.references import ensure_group, ensure_subject, not_found
from services.academics.schemas.materials import MaterialCreate, MaterialOut, MaterialUpdate
from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User
from shared.auth import require_permission
from shared.schemas import MessageResponse, changes_from
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/materials", tags=["Materials"])


# --- LIST MATERIALS ---
@router.get("", response_model=List[MaterialOut])
async def list_materials(
    group_id: Optional[UUID] = Query(None, alias="groupId"),
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("materials:read")),
):
    if group_id:
        return await storage.list_materials_by_group(group_id)
    return await storage.list_materials()


# --- GET MATERIAL ---
@router.get("/{material_id}", response_model=MaterialOut)
async def get_material(
    material_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("materials:read")),
):
    material = await storage.get_material(material_id)
    if not material:
        raise not_found("Material")
    return material


# --- UPLOAD MATERIAL ---
@router.post("", response_model=MaterialOut, status_code=status.HTTP_201_CREATED)
async def create_material(
    payload: MaterialCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("materials:write")),
):
    """
    Register a course material. The file itself is already stored elsewhere;
    only its name, URL, MIME type and size are recorded here.
    """
    await ensure_group(storage, payload.group_id)
    await ensure_subject(storage, payload.subject_id)

    async with storage.transaction():
        material = await storage.create_material({**payload.model_dump(), "uploaded_by": current_user.id})
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="upload_material",
            entity_type="material",
            entity_id=material.id,
            details={
                "title": material.title,
                "fileType": material.file_type,
                "fileSize": material.file_size,
            },
        )
    return material


# --- UPDATE MATERIAL ---
@router.put("/{material_id}", response_model=MaterialOut)
async def update_material(
    material_id: UUID,
    payload: MaterialUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("materials:write")),
):
    changes = changes_from(payload, nullable=("description",))
    if "group_id" in changes:
        await ensure_group(storage, changes["group_id"])
    if "subject_id" in changes:
        await ensure_subject(storage, changes["subject_id"])

    async with storage.transaction():
        material = await storage.update_material(material_id, changes)
        if not material:
            raise not_found("Material")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="update_material",
            entity_type="material",
            entity_id=material_id,
            details={"updates": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
    return material


# --- DELETE MATERIAL ---
@router.delete("/{material_id}", response_model=MessageResponse)
async def delete_material(
    material_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("materials:write")),
):
    async with storage.transaction():
        deleted = await storage.delete_material(material_id)
        if not deleted:
            raise not_found("Material")
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_material",
            entity_type="material",
            entity_id=material_id,
            details={"deletedAt": timestamp()},
        )
    return MessageResponse(message="Material deleted successfully")
