# shared/storage/database.py
import logging
import uuid
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, Dict, List, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shared.db import Base, create_engine, create_session_factory
from shared.errors import ConstraintViolation
from shared.storage.base import OrderBy, Storage, column_keys

# Import all models here so they are registered with SQLAlchemy's metadata
import services.user_management.models
import services.academics.models
import services.communication.models
import services.activity_log.models

logger = logging.getLogger(__name__)


class DatabaseStorage(Storage):
    """Relational backend on top of an SQLAlchemy asyncio engine.

    Outside ``transaction()`` every call runs in its own session and commits
    immediately. Inside it, calls share one session bound to the current task
    and commit (or roll back) together when the block exits.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_engine(database_url, echo=echo)
        self.session_factory = create_session_factory(self.engine)
        self._current: ContextVar[Optional[AsyncSession]] = ContextVar(
            f"storage_session_{id(self)}", default=None
        )

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready on %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def transaction(self):
        if self._current.get() is not None:
            yield
            return
        async with self.session_factory() as session:
            token = self._current.set(session)
            try:
                yield
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ConstraintViolation(str(e.orig)) from e
            finally:
                self._current.reset(token)

    @asynccontextmanager
    async def _session(self):
        current = self._current.get()
        if current is not None:
            yield current
            return
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ConstraintViolation(str(e.orig)) from e

    async def _flush(self, session: AsyncSession) -> None:
        # surface constraint errors at the failing call, not at commit
        try:
            await session.flush()
        except IntegrityError as e:
            raise ConstraintViolation(str(e.orig)) from e

    async def _get(self, model: Type[Base], record_id: uuid.UUID) -> Optional[Base]:
        async with self._session() as session:
            return await session.get(model, record_id)

    async def _find(self, model: Type[Base], filters: Dict[str, Any], order_by: OrderBy) -> List[Base]:
        stmt = select(model).filter_by(**filters)
        for key, descending in order_by:
            column = getattr(model, key)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        async with self._session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _insert(self, record: Base) -> Base:
        async with self._session() as session:
            session.add(record)
            await self._flush(session)
            return record

    async def _update(self, model: Type[Base], record_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Base]:
        unknown = set(changes) - set(column_keys(model))
        if unknown:
            raise AttributeError(f"{model.__name__} has no column(s) {', '.join(sorted(unknown))}")
        async with self._session() as session:
            record = await session.get(model, record_id)
            if record is None:
                return None
            for key, value in changes.items():
                setattr(record, key, value)
            await self._flush(session)
            return record

    async def _delete(self, model: Type[Base], record_id: uuid.UUID) -> bool:
        async with self._session() as session:
            record = await session.get(model, record_id)
            if record is None:
                return False
            await session.delete(record)
            await self._flush(session)
            return True
