"""Batches API: public traceability lookup plus admin management."""
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends

from palmport.api.dependencies import get_catalog_service, require_admin
from palmport.api.schemas.catalog import BatchCreateRequest, BatchResponse, BatchUpdateRequest
from palmport.api.schemas.shop import MessageResponse
from palmport.infra.database.models.catalog import Batch, Product
from palmport.services.auth_service import TokenClaims
from palmport.services.catalog_service import CatalogService

router = APIRouter(prefix="/batches", tags=["batches"])


def _to_schema(batch: Batch, product: Optional[Product] = None) -> BatchResponse:
    resp = BatchResponse.model_validate(batch)
    if product is not None:
        resp = resp.model_copy(
            update={
                "product_name": product.name,
                "product_size": product.size,
                "product_description": product.description,
            }
        )
    return resp


@router.get("", response_model=List[BatchResponse])
async def list_batches(svc: CatalogService = Depends(get_catalog_service)):
    return [_to_schema(b, p) for b, p in await svc.list_batches()]


@router.get("/{batch_id}", response_model=BatchResponse)
async def get_batch(batch_id: str, svc: CatalogService = Depends(get_catalog_service)):
    """Traceability lookup by the public batch code printed on the QR label."""
    batch, product = await svc.get_batch(batch_id)
    return _to_schema(batch, product)


@router.post("", response_model=BatchResponse, status_code=201)
async def create_batch(
    body: BatchCreateRequest,
    _admin: TokenClaims = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    batch = await svc.create_batch(body.model_dump(exclude={"imageBase64"}), body.imageBase64)
    return _to_schema(batch)


@router.put("/{id}", response_model=BatchResponse)
async def update_batch(
    id: uuid.UUID,
    body: BatchUpdateRequest,
    _admin: TokenClaims = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    data = body.model_dump(exclude={"imageBase64"}, exclude_unset=True)
    batch = await svc.update_batch(id, data, body.imageBase64)
    return _to_schema(batch)


@router.delete("/{id}", response_model=MessageResponse)
async def delete_batch(
    id: uuid.UUID,
    _admin: TokenClaims = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    await svc.delete_batch(id)
    return MessageResponse(message="Batch deleted successfully")
