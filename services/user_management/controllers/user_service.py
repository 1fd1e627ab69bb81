# services/user_management/controllers/user_service.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User, UserRole
from services.user_management.schemas.users import UserCreate, UserOut, UserUpdate
from shared.auth import PROFESSOR_MANAGED_ROLES, get_password_hash, require_permission
from shared.schemas import MessageResponse, changes_from
from shared.storage import Storage, get_storage

router = APIRouter(prefix="/api/users", tags=["Users"])


def _ensure_can_manage(current_user: User, target_role: UserRole, detail: str) -> None:
    # Professors only manage student and parent accounts
    if current_user.role == UserRole.PROFESSOR and target_role not in PROFESSOR_MANAGED_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


async def _get_user_or_404(storage: Storage, user_id: UUID) -> User:
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


# --- LIST USERS ---
@router.get("", response_model=List[UserOut])
async def list_users(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("users:list")),
):
    return await storage.list_users()


# --- GET USER ---
@router.get("/{user_id}", response_model=UserOut)
async def get_user(
    user_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("users:read")),
):
    return await _get_user_or_404(storage, user_id)


# --- CREATE USER ---
@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("users:create")),
):
    _ensure_can_manage(current_user, payload.role, "Professors can only create students and parents")

    # Check if email already exists
    if await storage.get_user_by_email(payload.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )

    data = payload.model_dump(exclude={"confirm_password"})
    data["password"] = get_password_hash(payload.password)
    data["created_by"] = current_user.id

    async with storage.transaction():
        user = await storage.create_user(data)
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="create_user",
            entity_type="user",
            entity_id=user.id,
            details={
                "email": user.email,
                "role": user.role,
                "name": f"{user.first_name} {user.last_name}",
            },
        )
    return user


# --- UPDATE USER ---
@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("users:update")),
):
    target = await _get_user_or_404(storage, user_id)
    _ensure_can_manage(current_user, target.role, "Professors can only manage students and parents")

    changes = changes_from(payload)
    if "role" in changes:
        _ensure_can_manage(current_user, changes["role"], "Professors can only assign student or parent roles")

    if "email" in changes and changes["email"] != target.email:
        if await storage.get_user_by_email(changes["email"]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User with this email already exists"
            )

    if "password" in changes:
        changes["password"] = get_password_hash(changes["password"])

    async with storage.transaction():
        user = await storage.update_user(user_id, changes)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="update_user",
            entity_type="user",
            entity_id=user_id,
            details={"updates": payload.model_dump(exclude_unset=True, by_alias=True)},
        )
    return user


# --- DELETE USER ---
@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(require_permission("users:delete")),
):
    target = await _get_user_or_404(storage, user_id)
    _ensure_can_manage(current_user, target.role, "Professors can only manage students and parents")

    async with storage.transaction():
        deleted = await storage.delete_user(user_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="delete_user",
            entity_type="user",
            entity_id=user_id,
            details={"email": target.email, "deletedAt": timestamp()},
        )
    return MessageResponse(message="User deleted successfully")
