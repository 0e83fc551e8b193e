"""CartService: per-user cart lines."""
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from palmport.core.exceptions import NotFoundError, ValidationError
from palmport.infra.database.models.cart import CartItem
from palmport.infra.database.repositories.cart import CartRepository
from palmport.infra.database.repositories.catalog import ProductRepository

logger = logging.getLogger(__name__)


class CartService:
    def __init__(self, session: AsyncSession) -> None:
        self._repo = CartRepository(session)
        self._products = ProductRepository(session)

    async def list_items(self, user_id: UUID) -> List[CartItem]:
        return await self._repo.list_for_user(user_id)

    async def add_item(self, user_id: UUID, product_id: UUID, quantity: int = 1) -> str:
        """Add *quantity* of a product; repeated adds accumulate. Returns the user-facing message."""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", details={"quantity": quantity})
        if await self._products.get_by_id(product_id) is None:
            raise NotFoundError("Product not found", details={"product_id": str(product_id)})
        created = await self._repo.add(user_id, product_id, quantity)
        logger.debug("CartService: user %s +%d x %s", user_id, quantity, product_id)
        return "Item added to cart" if created else "Cart updated successfully"

    async def remove_item(self, user_id: UUID, product_id: UUID) -> int:
        return await self._repo.remove(user_id, product_id)
