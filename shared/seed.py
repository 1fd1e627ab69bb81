# shared/seed.py
import logging

from services.user_management.models.users import UserRole
from shared.auth import get_password_hash
from shared.config import Settings
from shared.storage import Storage

logger = logging.getLogger(__name__)

DEFAULT_SUBJECTS = [
    {"name": "Mathématiques", "code": "MATH", "description": "Cours de mathématiques", "color": "#3b82f6"},
    {"name": "Français", "code": "FR", "description": "Cours de français", "color": "#ef4444"},
    {"name": "Histoire", "code": "HIST", "description": "Cours d'histoire", "color": "#f59e0b"},
    {"name": "Sciences", "code": "SCI", "description": "Cours de sciences", "color": "#10b981"},
    {"name": "Anglais", "code": "EN", "description": "Cours d'anglais", "color": "#8b5cf6"},
    {"name": "Éducation Physique", "code": "EP", "description": "Cours d'éducation physique", "color": "#f97316"},
]


async def seed_default_admin(storage: Storage, settings: Settings) -> None:
    if await storage.get_user_by_email(settings.default_admin_email):
        return
    await storage.create_user({
        "email": settings.default_admin_email,
        "first_name": "Admin",
        "last_name": "System",
        "password": get_password_hash(settings.default_admin_password),
        "role": UserRole.ADMIN,
        "is_active": True,
        "must_change_password": False,
    })
    logger.info("Default admin user created: %s", settings.default_admin_email)


async def seed_default_subjects(storage: Storage) -> None:
    created = 0
    for subject in DEFAULT_SUBJECTS:
        if not await storage.get_subject_by_code(subject["code"]):
            await storage.create_subject(subject)
            created += 1
    logger.info("Default subjects initialized (%d created)", created)


async def seed_defaults(storage: Storage, settings: Settings) -> None:
    """Create the default admin and subjects. Safe to run on every startup."""
    async with storage.transaction():
        await seed_default_admin(storage, settings)
        await seed_default_subjects(storage)
