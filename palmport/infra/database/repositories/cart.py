"""Cart repository."""
from __future__ import annotations

from typing import List
from uuid import UUID

from sqlalchemy import delete, select

from palmport.infra.database.models.cart import CartItem
from palmport.infra.database.repositories.base import BaseRepository


class CartRepository(BaseRepository[CartItem]):
    model = CartItem

    async def list_for_user(self, user_id: UUID) -> List[CartItem]:
        stmt = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, user_id: UUID, product_id: UUID, quantity: int) -> bool:
        """Insert the line or add *quantity* to the existing one.

        Returns True when a new line was created.
        """
        existing = await self.session.execute(
            select(CartItem.id).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        )
        created = existing.scalar_one_or_none() is None
        insert = self._upsert_insert().values(user_id=user_id, product_id=product_id, quantity=quantity)
        stmt = insert.on_conflict_do_update(
            index_elements=["user_id", "product_id"],
            set_={"quantity": CartItem.quantity + insert.excluded.quantity},
        )
        await self.session.execute(stmt)
        return created

    async def remove(self, user_id: UUID, product_id: UUID) -> int:
        stmt = delete(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    async def clear_for_user(self, user_id: UUID) -> int:
        result = await self.session.execute(delete(CartItem).where(CartItem.user_id == user_id))
        return result.rowcount or 0
