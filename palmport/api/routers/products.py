"""Products API: public catalog, admin create/update/delete."""
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends

from palmport.api.dependencies import get_catalog_service, require_admin
from palmport.api.schemas.catalog import ProductCreateRequest, ProductResponse, ProductUpdateRequest
from palmport.api.schemas.shop import MessageResponse
from palmport.services.auth_service import TokenClaims
from palmport.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductResponse])
async def list_products(svc: CatalogService = Depends(get_catalog_service)):
    return [ProductResponse.model_validate(p) for p in await svc.list_products()]


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    body: ProductCreateRequest,
    _admin: TokenClaims = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    data = body.model_dump(exclude={"imageBase64"})
    product = await svc.create_product(data, body.imageBase64)
    return ProductResponse.model_validate(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: uuid.UUID,
    body: ProductUpdateRequest,
    _admin: TokenClaims = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    """Partial update; the stored image is kept unless a new one is uploaded."""
    data = body.model_dump(exclude={"imageBase64"}, exclude_unset=True)
    product = await svc.update_product(product_id, data, body.imageBase64)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: uuid.UUID,
    _admin: TokenClaims = Depends(require_admin),
    svc: CatalogService = Depends(get_catalog_service),
):
    await svc.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")
