# shared/storage/memory.py
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Type

from shared.db import Base
from shared.errors import ConstraintViolation
from shared.storage.base import (
    OrderBy,
    Storage,
    clone_record,
    column_keys,
    dependents,
    foreign_keys,
    unique_keys,
)


class MemoryStorage(Storage):
    """Keeps every table in a dict keyed by id. Nothing survives a restart.

    Each primitive runs without awaiting, so on a single event loop it cannot
    interleave with another request. ``transaction`` does not roll back:
    writes made before a failure inside the block stay applied.
    """

    def __init__(self):
        self._tables: Dict[Type[Base], Dict[uuid.UUID, Base]] = defaultdict(dict)

    async def init(self) -> None:
        return None

    async def close(self) -> None:
        self._tables.clear()

    @asynccontextmanager
    async def transaction(self):
        yield

    # --- constraint checks, mirroring what the database enforces ---

    def _check_unique(self, record: Base, exclude_id: Optional[uuid.UUID] = None) -> None:
        model = type(record)
        for keys in unique_keys(model):
            values = tuple(getattr(record, key) for key in keys)
            if any(value is None for value in values):
                continue
            for other in self._tables[model].values():
                if other.id != exclude_id and tuple(getattr(other, key) for key in keys) == values:
                    raise ConstraintViolation(f"{model.__tablename__}: duplicate value for {', '.join(keys)}")

    def _check_references(self, record: Base) -> None:
        model = type(record)
        for key, target, target_key in foreign_keys(model):
            value = getattr(record, key)
            if value is None:
                continue
            if target_key == "id":
                exists = value in self._tables[target] or (target is model and value == record.id)
            else:
                exists = any(getattr(row, target_key) == value for row in self._tables[target].values())
            if not exists:
                raise ConstraintViolation(f"{model.__tablename__}.{key} references a missing {target.__tablename__} row")

    # --- primitives ---

    async def _get(self, model: Type[Base], record_id: uuid.UUID) -> Optional[Base]:
        record = self._tables[model].get(record_id)
        return clone_record(record) if record is not None else None

    async def _find(self, model: Type[Base], filters: Dict[str, Any], order_by: OrderBy) -> List[Base]:
        rows = [
            row for row in self._tables[model].values()
            if all(getattr(row, key) == value for key, value in filters.items())
        ]
        # stable sorts applied from the least significant key up
        for key, descending in reversed(list(order_by)):
            present = [row for row in rows if getattr(row, key) is not None]
            missing = [row for row in rows if getattr(row, key) is None]
            present.sort(key=lambda row: getattr(row, key), reverse=descending)
            rows = present + missing
        return [clone_record(row) for row in rows]

    async def _insert(self, record: Base) -> Base:
        self._check_unique(record)
        self._check_references(record)
        stored = clone_record(record)
        self._tables[type(record)][stored.id] = stored
        return clone_record(stored)

    async def _update(self, model: Type[Base], record_id: uuid.UUID, changes: Dict[str, Any]) -> Optional[Base]:
        current = self._tables[model].get(record_id)
        if current is None:
            return None
        unknown = set(changes) - set(column_keys(model))
        if unknown:
            raise AttributeError(f"{model.__name__} has no column(s) {', '.join(sorted(unknown))}")
        candidate = clone_record(current)
        for key, value in changes.items():
            setattr(candidate, key, value)
        self._check_unique(candidate, exclude_id=record_id)
        self._check_references(candidate)
        self._tables[model][record_id] = candidate
        return clone_record(candidate)

    async def _delete(self, model: Type[Base], record_id: uuid.UUID) -> bool:
        if record_id not in self._tables[model]:
            return False
        self._remove(model, record_id)
        return True

    def _remove(self, model: Type[Base], record_id: uuid.UUID) -> None:
        rules = [(dependent, key, (ondelete or "").upper()) for dependent, key, ondelete in dependents(model)]
        for dependent, key, rule in rules:
            if rule in ("CASCADE", "SET NULL"):
                continue
            if any(getattr(row, key) == record_id for row in self._tables[dependent].values()):
                raise ConstraintViolation(
                    f"{dependent.__tablename__}.{key} still references {model.__tablename__} {record_id}"
                )

        self._tables[model].pop(record_id, None)
        for dependent, key, rule in rules:
            for row in list(self._tables[dependent].values()):
                if getattr(row, key) != record_id:
                    continue
                if rule == "SET NULL":
                    setattr(row, key, None)
                elif row.id in self._tables[dependent]:
                    self._remove(dependent, row.id)
