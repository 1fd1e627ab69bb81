# create_db.py
import asyncio

from shared.config import get_settings
from shared.db import Base, create_engine

# Import all models here so they are registered with SQLAlchemy's metadata
import services.user_management.models
import services.academics.models
import services.communication.models
import services.activity_log.models


async def init_models():
    settings = get_settings()
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    async with engine.begin() as conn:
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Tables created.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_models())
