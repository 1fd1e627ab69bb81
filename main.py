import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from services.user_management.controllers.auth_service import router as auth_router
from services.user_management.controllers.user_service import router as user_router
from services.academics.controllers.group_service import router as group_router
from services.academics.controllers.subject_service import router as subject_router
from services.academics.controllers.material_service import router as material_router
from services.academics.controllers.grade_service import router as grade_router
from services.academics.controllers.schedule_service import router as schedule_router
from services.communication.controllers.message_service import router as message_router
from services.communication.controllers.notification_service import router as notification_router
from services.activity_log.controllers.activity_service import router as activity_router
from shared.config import Settings, get_settings
from shared.errors import register_exception_handlers
from shared.seed import seed_defaults
from shared.storage import build_storage

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = build_storage(settings)
        await storage.init()
        logger.info("Storage backend ready: %s", settings.storage_backend)
        if settings.seed_defaults:
            await seed_defaults(storage, settings)
        app.state.storage = storage
        try:
            yield
        finally:
            await storage.close()

    app = FastAPI(title="School Management Backend", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )

    register_exception_handlers(app)

    @app.get("/")
    def health_check():
        return {"status": "School Management Backend is running ✅"}

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(group_router)
    app.include_router(message_router)
    app.include_router(subject_router)
    app.include_router(material_router)
    app.include_router(grade_router)
    app.include_router(schedule_router)
    app.include_router(notification_router)
    app.include_router(activity_router)

    return app


app = create_app()
