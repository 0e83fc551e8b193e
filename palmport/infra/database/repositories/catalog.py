"""Product and batch repositories."""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import select

from palmport.infra.database.models.catalog import Batch, Product
from palmport.infra.database.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    model = Product

    async def list_all(self) -> List[Product]:
        result = await self.session.execute(select(Product).order_by(Product.created_at.desc()))
        return list(result.scalars().all())


class BatchRepository(BaseRepository[Batch]):
    model = Batch

    def _with_product(self):
        return select(Batch, Product).outerjoin(Product, Batch.product_id == Product.id)

    async def list_with_products(self) -> List[Tuple[Batch, Optional[Product]]]:
        result = await self.session.execute(self._with_product().order_by(Batch.created_at.desc()))
        return [(row[0], row[1]) for row in result.all()]

    async def get_by_batch_id(self, batch_id: str) -> Optional[Tuple[Batch, Optional[Product]]]:
        result = await self.session.execute(self._with_product().where(Batch.batch_id == batch_id))
        row = result.first()
        return (row[0], row[1]) if row else None
