"""ShippingService: the store-wide shipping fee and free-shipping threshold."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from palmport.core.exceptions import ValidationError
from palmport.infra.database.models.shipping import DEFAULT_FREE_SHIPPING_THRESHOLD, DEFAULT_SHIPPING_FEE
from palmport.infra.database.repositories.shipping import ShippingSettingsRepository

logger = logging.getLogger(__name__)


class ShippingService:
    def __init__(self, session: AsyncSession) -> None:
        self._repo = ShippingSettingsRepository(session)

    async def get_settings(self) -> Dict[str, Any]:
        """Stored settings, or the defaults when none were saved yet."""
        settings = await self._repo.get_current()
        if settings is None:
            return {
                "shipping_fee": DEFAULT_SHIPPING_FEE,
                "free_shipping_threshold": DEFAULT_FREE_SHIPPING_THRESHOLD,
                "updated_at": None,
            }
        return {
            "shipping_fee": settings.shipping_fee,
            "free_shipping_threshold": settings.free_shipping_threshold,
            "updated_at": settings.updated_at.isoformat() if settings.updated_at else None,
        }

    async def update_settings(
        self, shipping_fee: Optional[float], free_shipping_threshold: Optional[float]
    ) -> Dict[str, Any]:
        if shipping_fee is None or free_shipping_threshold is None:
            raise ValidationError("Shipping fee and free shipping threshold are required")
        if shipping_fee < 0 or free_shipping_threshold < 0:
            raise ValidationError("Shipping values cannot be negative")
        await self._repo.save(shipping_fee, free_shipping_threshold)
        logger.info(
            "ShippingService: fee=%s threshold=%s", shipping_fee, free_shipping_threshold,
        )
        return await self.get_settings()

