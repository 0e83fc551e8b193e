"""CatalogService: products and traceable batches."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from palmport.core.exceptions import ConflictError, NotFoundError, ValidationError
from palmport.infra.database.models.catalog import Batch, Product
from palmport.infra.database.repositories.catalog import BatchRepository, ProductRepository
from palmport.integrations.qr import qr_data_uri, trace_url_for

logger = logging.getLogger(__name__)

_PRODUCT_FIELDS = ("name", "description", "price", "original_price", "size", "features", "in_stock")
_BATCH_FIELDS = ("title", "state", "manufacturer", "quality", "notes", "manufacture_date", "product_id")


class ImageUploader(Protocol):
    async def upload(self, image_base64: str) -> str:
        ...


class CatalogService:
    def __init__(
        self,
        session: AsyncSession,
        *,
        uploader: Optional[ImageUploader] = None,
        client_url: str = "http://localhost:3000",
        qr_encoder: Callable[[str], str] = qr_data_uri,
    ) -> None:
        self._products = ProductRepository(session)
        self._batches = BatchRepository(session)
        self._uploader = uploader
        self._client_url = client_url
        self._qr_encoder = qr_encoder

    async def _upload(self, image_base64: Optional[str]) -> Optional[str]:
        if not image_base64:
            return None
        if self._uploader is None:
            raise ValidationError("Image uploads are not configured")
        return await self._uploader.upload(image_base64)

    # ── Products ────────────────────────────────────────────────────────────

    async def list_products(self) -> List[Product]:
        return await self._products.list_all()

    async def create_product(self, data: Dict[str, Any], image_base64: Optional[str] = None) -> Product:
        if not (data.get("name") or "").strip():
            raise ValidationError("Product name is required")
        values = {k: data[k] for k in _PRODUCT_FIELDS if data.get(k) is not None}
        values["image_url"] = await self._upload(image_base64)
        product = await self._products.create(values)
        logger.info("CatalogService: created product %s (%s)", product.id, product.name)
        return product

    async def update_product(self, id: UUID, data: Dict[str, Any], image_base64: Optional[str] = None) -> Product:
        if await self._products.get_by_id(id) is None:
            raise NotFoundError("Product not found", details={"id": str(id)})
        values = {k: data[k] for k in _PRODUCT_FIELDS if k in data}
        image_url = await self._upload(image_base64)
        if image_url:
            values["image_url"] = image_url
        product = await self._products.update(id, values)
        return product  # type: ignore[return-value]

    async def delete_product(self, id: UUID) -> None:
        if not await self._products.delete(id):
            raise NotFoundError("Product not found", details={"id": str(id)})

    # ── Batches ─────────────────────────────────────────────────────────────

    async def list_batches(self) -> List[Tuple[Batch, Optional[Product]]]:
        return await self._batches.list_with_products()

    async def get_batch(self, batch_id: str) -> Tuple[Batch, Optional[Product]]:
        found = await self._batches.get_by_batch_id(batch_id)
        if found is None:
            raise NotFoundError("Batch not found", details={"batch_id": batch_id})
        return found

    async def create_batch(self, data: Dict[str, Any], image_base64: Optional[str] = None) -> Batch:
        """Create a batch with its public trace URL and QR label."""
        batch_id = (data.get("batch_id") or "").strip()
        if not batch_id:
            raise ValidationError("batch_id is required")
        if await self._batches.get_by_batch_id(batch_id) is not None:
            raise ConflictError("Batch already exists", details={"batch_id": batch_id})
        await self._ensure_product(data.get("product_id"))

        trace_url = trace_url_for(self._client_url, batch_id)
        values = {k: data[k] for k in _BATCH_FIELDS if data.get(k) is not None}
        values.update(
            batch_id=batch_id,
            trace_url=trace_url,
            qr_code_url=self._qr_encoder(trace_url),
            image_url=await self._upload(image_base64),
        )
        batch = await self._batches.create(values)
        logger.info("CatalogService: created batch %s → %s", batch_id, trace_url)
        return batch

    async def update_batch(self, id: UUID, data: Dict[str, Any], image_base64: Optional[str] = None) -> Batch:
        if await self._batches.get_by_id(id) is None:
            raise NotFoundError("Batch not found", details={"id": str(id)})
        if "product_id" in data:
            await self._ensure_product(data.get("product_id"))
        values = {k: data[k] for k in _BATCH_FIELDS if k in data}
        image_url = await self._upload(image_base64)
        if image_url:
            values["image_url"] = image_url
        batch = await self._batches.update(id, values)
        return batch  # type: ignore[return-value]

    async def delete_batch(self, id: UUID) -> None:
        if not await self._batches.delete(id):
            raise NotFoundError("Batch not found", details={"id": str(id)})

    async def _ensure_product(self, product_id: Optional[UUID]) -> None:
        if product_id is not None and await self._products.get_by_id(product_id) is None:
            raise ValidationError("Unknown product_id", details={"product_id": str(product_id)})
