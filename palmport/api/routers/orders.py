"""Orders API: create (online / assisted), my orders, admin list and status updates."""
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends

from palmport.api.dependencies import get_current_user, get_order_lifecycle, require_admin
from palmport.api.schemas.orders import (
    AdminOrderResponse,
    OrderCreateRequest,
    OrderResponse,
    OrderStatusUpdate,
)
from palmport.services.auth_service import TokenClaims
from palmport.services.order_lifecycle import CustomerDetails, OrderAmounts, OrderLifecycle
from palmport.services.order_status import Channel

router = APIRouter(prefix="/orders", tags=["orders"])


async def _create(channel: Channel, body: OrderCreateRequest, user: TokenClaims, lifecycle: OrderLifecycle):
    order = await lifecycle.create(
        channel,
        CustomerDetails(
            customer_name=body.customer_name,
            email=body.email,
            phone=body.phone,
            address=body.address,
            city=body.city,
            state=body.state,
        ),
        body.items,
        OrderAmounts(subtotal=body.subtotal, shipping=body.shipping, total=body.total),
        user.user_id,
        notes=body.notes,
        payment_reference=body.payment_reference,
    )
    return OrderResponse.model_validate(order)


@router.post("", response_model=OrderResponse, status_code=201)
async def create_online_order(
    body: OrderCreateRequest,
    user: TokenClaims = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Create an order to be paid through Paystack; its order number is the payment reference."""
    return await _create(Channel.ONLINE, body, user, lifecycle)


@router.post("/whatsapp-order", response_model=OrderResponse, status_code=201)
async def create_assisted_order(
    body: OrderCreateRequest,
    user: TokenClaims = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Create an order settled over WhatsApp; starts in ``awaiting_contact``."""
    return await _create(Channel.ASSISTED, body, user, lifecycle)


@router.get("/my-orders", response_model=List[OrderResponse])
async def my_orders(
    user: TokenClaims = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    orders = await lifecycle.orders_for_user(user.user_id)
    return [OrderResponse.model_validate(o) for o in orders]


@router.get("", response_model=List[AdminOrderResponse])
async def list_orders(
    _admin: TokenClaims = Depends(require_admin),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    rows = await lifecycle.all_orders_with_users()
    return [
        AdminOrderResponse.model_validate(order).model_copy(update={"user_name": name, "user_email": email})
        for order, name, email in rows
    ]


@router.put("/{order_id}/status", response_model=OrderResponse)
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
