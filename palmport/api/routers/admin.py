"""Admin API: login, dashboard, paginated orders and order status."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from palmport.api.dependencies import get_auth_config, get_order_lifecycle, get_session, require_admin
from palmport.api.schemas.orders import OrderPage, OrderResponse, OrderStatusUpdate
from palmport.api.schemas.shop import AuthResponse, DashboardResponse, LoginRequest, UserResponse
from palmport.config import AuthConfig
from palmport.services.auth_service import AuthService, TokenClaims, user_payload
from palmport.services.dashboard_service import DashboardService
from palmport.services.order_lifecycle import OrderLifecycle

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login", response_model=AuthResponse)
async def admin_login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
    config: AuthConfig = Depends(get_auth_config),
):
    user, token = await AuthService(session, config).login(body.email, body.password, admin_only=True)
    return AuthResponse(token=token, user=UserResponse(**user_payload(user)))


@router.get("/verify")
async def admin_verify(admin: TokenClaims = Depends(require_admin)):
    return {"valid": True, "email": admin.email, "role": admin.role}


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    _admin: TokenClaims = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    summary = await DashboardService(session).summary()
    summary["recent_orders"] = [OrderResponse.model_validate(o) for o in summary["recent_orders"]]
    return DashboardResponse(**summary)


@router.get("/orders", response_model=OrderPage)
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    _admin: TokenClaims = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    result = await DashboardService(session).orders_page(page=page, limit=limit)
    result["orders"] = [OrderResponse.model_validate(o) for o in result["orders"]]
    return OrderPage(**result)


@router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    body: OrderStatusUpdate,
    _admin: TokenClaims = Depends(require_admin),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    order = await lifecycle.update_status(
        order_id,
        delivery_status=body.delivery_status,
        payment_status=body.payment_status,
    )
    return OrderResponse.model_validate(order)
