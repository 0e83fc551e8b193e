"""Pydantic v2 schemas for the Orders and Payments APIs."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class OrderResponse(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    order_number: str
    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    subtotal: float
    shipping: float
    total: float
    notes: str = ""
    order_type: str
    payment_status: str
    delivery_status: str
    payment_reference: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AdminOrderResponse(OrderResponse):
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class OrderPage(BaseModel):
    orders: List[OrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class OrderCreateRequest(BaseModel):
    """Body shared by both channels; required fields are checked per channel."""

    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    # [{name, size, quantity, total}, ...]; extra keys are kept as sent
    items: Optional[List[Dict[str, Any]]] = None
    subtotal: float = Field(default=0, ge=0)
    shipping: float = Field(default=0, ge=0)
    total: float = Field(default=0, ge=0)
    notes: Optional[str] = None
    payment_reference: Optional[str] = Field(default=None, max_length=100)


class OrderStatusUpdate(BaseModel):
    delivery_status: Optional[str] = None
    payment_status: Optional[str] = None


class PaymentInitializeRequest(BaseModel):
    email: Optional[str] = None
    amount: Optional[float] = None
    reference: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PaymentVerifyResponse(BaseModel):
    success: bool
    message: str
    order: OrderResponse
    payment: Dict[str, Any] = Field(default_factory=dict)
