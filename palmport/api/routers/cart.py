"""Cart API: the signed-in user's cart lines."""
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from palmport.api.dependencies import get_current_user, get_session
from palmport.api.schemas.shop import CartAddRequest, CartItemResponse, MessageResponse
from palmport.services.auth_service import TokenClaims
from palmport.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=List[CartItemResponse])
async def get_cart(
    user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    items = await CartService(session).list_items(user.user_id)
    return [CartItemResponse.model_validate(i) for i in items]


@router.post("/add", response_model=MessageResponse)
async def add_to_cart(
    body: CartAddRequest,
    user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    message = await CartService(session).add_item(user.user_id, body.productId, body.quantity)
    return MessageResponse(message=message)


@router.delete("/remove/{product_id}", response_model=MessageResponse)
async def remove_from_cart(
    product_id: uuid.UUID,
    user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    await CartService(session).remove_item(user.user_id, product_id)
    return MessageResponse(message="Item removed from cart")
