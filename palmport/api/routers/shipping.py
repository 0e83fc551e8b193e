"""Shipping API: public fee settings and the admin editor."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from palmport.api.dependencies import get_session, require_admin
from palmport.api.schemas.shop import ShippingSettingsResponse, ShippingSettingsUpdate
from palmport.services.auth_service import TokenClaims
from palmport.services.shipping_service import ShippingService

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.get("/settings", response_model=ShippingSettingsResponse)
async def get_settings(session: AsyncSession = Depends(get_session)):
    return await ShippingService(session).get_settings()


@router.get("/admin/settings", response_model=ShippingSettingsResponse)
async def get_admin_settings(
    _admin: TokenClaims = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    return await ShippingService(session).get_settings()


@router.put("/settings")
async def update_settings(
    body: ShippingSettingsUpdate,
    _admin: TokenClaims = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    settings = await ShippingService(session).update_settings(body.shipping_fee, body.free_shipping_threshold)
    return {"message": "Shipping settings updated successfully", "settings": settings}
