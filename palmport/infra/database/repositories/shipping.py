"""Shipping settings repository (single row, id=1)."""
from __future__ import annotations

from typing import Optional

from palmport.infra.database.models.base import utcnow
from palmport.infra.database.models.shipping import SETTINGS_ROW_ID, ShippingSettings
from palmport.infra.database.repositories.base import BaseRepository


class ShippingSettingsRepository(BaseRepository[ShippingSettings]):
    model = ShippingSettings

    async def get_current(self) -> Optional[ShippingSettings]:
        return await self.session.get(ShippingSettings, SETTINGS_ROW_ID)

    async def save(self, shipping_fee: float, free_shipping_threshold: float) -> ShippingSettings:
        now = utcnow()
        insert = self._upsert_insert().values(
            id=SETTINGS_ROW_ID,
            shipping_fee=shipping_fee,
            free_shipping_threshold=free_shipping_threshold,
            updated_at=now,
        )
        stmt = insert.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "shipping_fee": insert.excluded.shipping_fee,
                "free_shipping_threshold": insert.excluded.free_shipping_threshold,
                "updated_at": now,
            },
        )
        await self.session.execute(stmt)
        settings = await self.session.get(ShippingSettings, SETTINGS_ROW_ID, populate_existing=True)
        assert settings is not None
        return settings
