"""Pydantic v2 schemas for cart, shipping, subscribers and auth."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from palmport.api.schemas.orders import OrderResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class CartItemResponse(BaseModel):
    id: UUID
    user_id: UUID
    product_id: UUID
    quantity: int
    created_at: datetime

    model_config = {"from_attributes": True}


class CartAddRequest(BaseModel):
    productId: UUID
    quantity: int = Field(default=1, ge=1)


class ShippingSettingsResponse(BaseModel):
    shipping_fee: float
    free_shipping_threshold: float
    updated_at: Optional[str] = None


class ShippingSettingsUpdate(BaseModel):
    shipping_fee: Optional[float] = None
    free_shipping_threshold: Optional[float] = None


class SubscribeRequest(BaseModel):
    email: Optional[str] = None


class SubscriberResponse(BaseModel):
    id: UUID
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BroadcastRequest(BaseModel):
    subject: Optional[str] = None
    message: Optional[str] = None


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class DashboardResponse(BaseModel):
    total_orders: int
    pending_orders: int
    total_batches: int
    total_subscribers: int
    recent_orders: List[OrderResponse] = Field(default_factory=list)
