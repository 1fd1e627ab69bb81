# services/user_management/controllers/auth_service.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from services.activity_log.controllers.activity_service import record_activity, timestamp
from services.user_management.models.users import User
from services.user_management.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse
from services.user_management.schemas.users import UserOut
from shared.auth import (
    end_session,
    get_current_user,
    get_password_hash,
    session_user_id,
    start_session,
    verify_password,
)
from shared.schemas import MessageResponse
from shared.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# --- LOGIN ---
@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    storage: Storage = Depends(get_storage),
):
    user = await storage.get_user_by_email(payload.email)

    # Same answer for unknown email, wrong password and disabled account
    if not user or not user.is_active or not verify_password(payload.password, user.password):
        logger.warning("Failed login attempt for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    start_session(request, user)

    await record_activity(
        storage,
        actor_id=user.id,
        action="login",
        entity_type="user",
        entity_id=user.id,
        details={"email": user.email, "loginTime": timestamp()},
    )

    return LoginResponse(user=UserOut.model_validate(user))


# --- LOGOUT ---
@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, storage: Storage = Depends(get_storage)):
    user_id = session_user_id(request)
    end_session(request)

    if user_id:
        await record_activity(
            storage,
            actor_id=user_id,
            action="logout",
            entity_type="user",
            entity_id=user_id,
            details={"logoutTime": timestamp()},
        )

    return MessageResponse(message="Logged out successfully")


# --- CURRENT USER ---
@router.get("/me", response_model=UserOut)
async def me(request: Request, storage: Storage = Depends(get_storage)):
    user_id = session_user_id(request)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )

    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    if not user.is_active:
        end_session(request)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return user


# --- CHANGE PASSWORD ---
@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    payload: ChangePasswordRequest,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    async with storage.transaction():
        await storage.update_user(current_user.id, {
            "password": get_password_hash(payload.new_password),
            "must_change_password": False,
        })
        await record_activity(
            storage,
            actor_id=current_user.id,
            action="change_password",
            entity_type="user",
            entity_id=current_user.id,
            details={"changedAt": timestamp()},
        )

    return MessageResponse(message="Password changed successfully")
