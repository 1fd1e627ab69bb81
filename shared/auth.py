# shared/auth.py
import logging
from typing import Callable, Dict, FrozenSet, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from passlib.context import CryptContext

from services.user_management.models.users import User, UserRole
from shared.config import get_settings
from shared.storage import Storage, get_storage

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"
BCRYPT_ROUNDS = get_settings().bcrypt_rounds

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def verify_password(plain_password, hashed_password):
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


# --- SESSION ---

def start_session(request: Request, user: User) -> None:
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)


def end_session(request: Request) -> None:
    request.session.clear()


def session_user_id(request: Request) -> Optional[UUID]:
    raw = request.session.get(SESSION_USER_KEY)
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


# --- PERMISSIONS ---

STAFF: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.PROFESSOR})
EVERYONE: FrozenSet[UserRole] = frozenset(UserRole)
CONTRIBUTORS: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.PROFESSOR, UserRole.STUDENT})

# Roles a professor may create, assign, update or delete
PROFESSOR_MANAGED_ROLES: FrozenSet[UserRole] = frozenset({UserRole.STUDENT, UserRole.PARENT})

PERMISSIONS: Dict[str, FrozenSet[UserRole]] = {
    "users:list": STAFF,
    "users:read": STAFF,
    "users:create": STAFF,
    "users:update": STAFF,
    "users:delete": STAFF,
    "groups:read": EVERYONE,
    "groups:write": STAFF,
    "subjects:read": EVERYONE,
    "subjects:write": STAFF,
    "materials:read": EVERYONE,
    "materials:write": STAFF,
    "grades:read": EVERYONE,
    "grades:write": STAFF,
    "schedules:read": EVERYONE,
    "schedules:write": STAFF,
    "activities:read": STAFF,
    "notifications:read": EVERYONE,
    "notifications:send": STAFF,
    "messages:read": EVERYONE,
    "messages:write": STAFF,
    "messages:react": CONTRIBUTORS,
}


def is_allowed(role: UserRole, operation: str) -> bool:
    return role in PERMISSIONS[operation]


async def get_current_user(request: Request, storage: Storage = Depends(get_storage)) -> User:
    user_id = session_user_id(request)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    user = await storage.get_user(user_id)
    if not user or not user.is_active:
        # Stale session: the account was removed or disabled
        end_session(request)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_permission(operation: str) -> Callable:
    if operation not in PERMISSIONS:
        raise KeyError(f"Unknown operation {operation!r}")

    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if not is_allowed(current_user.role, operation):
            logger.info("Denied %s to user %s (%s)", operation, current_user.id, current_user.role.value)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return dependency
