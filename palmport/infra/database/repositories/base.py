"""Shared async repository: primary-key CRUD plus a dialect-aware upsert insert."""
from __future__ import annotations

from typing import Any, ClassVar, Generic, Optional, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """Flush-only: callers (services or the request dependency) own the commit."""

    model: ClassVar[type]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[ModelT]:
        return await self.session.get(self.model, id)  # type: ignore[return-value]

    async def count(self) -> int:
        total = await self.session.scalar(select(func.count()).select_from(self.model))
        return int(total or 0)

    async def create(self, data: dict[str, Any]) -> ModelT:
        row = self.model(**data)
        self.session.add(row)
        await self.session.flush()
        # server defaults (created_at, updated_at)
        await self.session.refresh(row)
        return row  # type: ignore[return-value]

    async def update(self, id: UUID, data: dict[str, Any]) -> Optional[ModelT]:
        row = await self.get_by_id(id)
        if row is None:
            return None
        for column, value in data.items():
            setattr(row, column, value)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def delete(self, id: UUID) -> bool:
        row = await self.get_by_id(id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    def _upsert_insert(self):
        """INSERT construct supporting ``on_conflict_do_*`` on the bound dialect."""
        if self.session.get_bind().dialect.name == "sqlite":
            return sqlite.insert(self.model)
        return postgresql.insert(self.model)
