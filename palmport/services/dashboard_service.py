"""DashboardService: admin overview counters."""
from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from palmport.infra.database.repositories.catalog import BatchRepository
from palmport.infra.database.repositories.order import OrderRepository
from palmport.infra.database.repositories.subscriber import SubscriberRepository


class DashboardService:
    def __init__(self, session: AsyncSession) -> None:
        self._orders = OrderRepository(session)
        self._batches = BatchRepository(session)
        self._subscribers = SubscriberRepository(session)

    async def summary(self, *, recent: int = 5) -> Dict[str, Any]:
        return {
            "total_orders": await self._orders.count(),
            "pending_orders": await self._orders.count_by_delivery_status("pending"),
            "total_batches": await self._batches.count(),
            "total_subscribers": await self._subscribers.count(),
            "recent_orders": await self._orders.list_recent(limit=recent),
        }

    async def orders_page(self, *, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        page = max(page, 1)
        limit = min(max(limit, 1), 100)
        total = await self._orders.count()
        orders = await self._orders.list_recent(skip=(page - 1) * limit, limit=limit)
        return {
            "orders": orders,
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit,
        }
