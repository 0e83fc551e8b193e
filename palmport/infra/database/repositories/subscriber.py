"""Subscriber repository."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select

from palmport.infra.database.models.subscriber import Subscriber
from palmport.infra.database.repositories.base import BaseRepository


class SubscriberRepository(BaseRepository[Subscriber]):
    model = Subscriber

    async def add_if_absent(self, email: str) -> Optional[Subscriber]:
        """INSERT ... ON CONFLICT (email) DO NOTHING. Returns the new row, or None if it existed."""
        stmt = (
            self._upsert_insert()
            .values(email=email)
            .on_conflict_do_nothing(index_elements=["email"])
            .returning(Subscriber)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_all(self) -> List[Subscriber]:
        result = await self.session.execute(select(Subscriber).order_by(Subscriber.created_at.desc()))
        return list(result.scalars().all())

    async def all_emails(self) -> List[str]:
        result = await self.session.execute(select(Subscriber.email))
        return list(result.scalars().all())
