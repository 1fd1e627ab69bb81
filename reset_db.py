# reset_db.py
import asyncio

from shared.config import get_settings
from shared.db import Base, create_engine

import services.user_management.models
import services.academics.models
import services.communication.models
import services.activity_log.models


async def reset_db():
    settings = get_settings()
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    async with engine.begin() as conn:
        print("🗑️ Dropping tables...")
        await conn.run_sync(Base.metadata.drop_all)
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Database reset.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(reset_db())
