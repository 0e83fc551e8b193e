"""Order repository."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from palmport.core.exceptions import ConflictError
from palmport.infra.database.models.base import utcnow
from palmport.infra.database.models.order import Order
from palmport.infra.database.models.user import User
from palmport.infra.database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class OrderRepository(BaseRepository[Order]):
    model = Order

    async def create_with_unique_number(
        self,
        data: dict[str, Any],
        next_number: Callable[[], str],
        *,
        attempts: int = 5,
    ) -> Order:
        """Insert *data* under a fresh order number, retrying on a number collision.

        Each attempt runs in a SAVEPOINT so a unique-index violation only
        rolls back that attempt, not the caller's transaction.
        """
        for attempt in range(1, attempts + 1):
            order = Order(**data, order_number=next_number())
            try:
                async with self.session.begin_nested():
                    self.session.add(order)
                    await self.session.flush()
            except IntegrityError as exc:
                if "order_number" not in str(exc.orig):
                    raise
                logger.warning(
                    "OrderRepository: order number %s collided (attempt %d/%d)",
                    order.order_number, attempt, attempts,
                )
                continue
            await self.session.refresh(order)
            return order
        raise ConflictError(
            "Could not allocate a unique order number",
            details={"attempts": attempts},
        )

    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        stmt = select(Order).where(Order.order_number == order_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: UUID) -> List[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_recent(self, *, skip: int = 0, limit: int = 100) -> List[Order]:
        stmt = select(Order).order_by(Order.created_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_with_users(
        self, *, skip: int = 0, limit: int = 500
    ) -> List[Tuple[Order, Optional[str], Optional[str]]]:
        """All orders newest first, each with the owning account's name and email."""
        stmt = (
            select(Order, User.name, User.email)
            .outerjoin(User, Order.user_id == User.id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def count_by_delivery_status(self, delivery_status: str) -> int:
        stmt = select(func.count()).select_from(Order).where(Order.delivery_status == delivery_status)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def apply_status(
        self,
        order: Order,
        *,
        delivery_status: Optional[str] = None,
        payment_status: Optional[str] = None,
        payment_reference: Optional[str] = None,
    ) -> Order:
        """Coalesce update: ``None`` keeps the stored value. ``updated_at`` always moves."""
        if delivery_status is not None:
            order.delivery_status = delivery_status
        if payment_status is not None:
            order.payment_status = payment_status
        if payment_reference is not None:
            order.payment_reference = payment_reference
        order.updated_at = utcnow()
        await self.session.flush()
        await self.session.refresh(order)
        return order
