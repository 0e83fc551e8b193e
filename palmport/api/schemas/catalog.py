"""Pydantic v2 schemas for products and batches."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProductResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    price: float
    original_price: Optional[float] = None
    size: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    in_stock: bool
    image_url: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    size: Optional[str] = Field(default=None, max_length=64)
    features: List[str] = Field(default_factory=list)
    in_stock: bool = True
    imageBase64: Optional[str] = None


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    original_price: Optional[float] = Field(default=None, ge=0)
    size: Optional[str] = Field(default=None, max_length=64)
    features: Optional[List[str]] = None
    in_stock: Optional[bool] = None
    imageBase64: Optional[str] = None


class BatchResponse(BaseModel):
    id: UUID
    batch_id: str
    title: Optional[str] = None
    state: Optional[str] = None
    manufacturer: Optional[str] = None
    quality: Optional[str] = None
    notes: Optional[str] = None
    manufacture_date: Optional[str] = None
    product_id: Optional[UUID] = None
    trace_url: Optional[str] = None
    qr_code_url: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    product_name: Optional[str] = None
    product_size: Optional[str] = None
    product_description: Optional[str] = None

    model_config = {"from_attributes": True}


class BatchCreateRequest(BaseModel):
    batch_id: str = Field(..., min_length=1, max_length=64)
    title: Optional[str] = None
    state: Optional[str] = None
    manufacturer: Optional[str] = None
    quality: Optional[str] = None
    notes: Optional[str] = None
    manufacture_date: Optional[str] = Field(default=None, max_length=32)
    product_id: Optional[UUID] = None
    imageBase64: Optional[str] = None


class BatchUpdateRequest(BaseModel):
    title: Optional[str] = None
    state: Optional[str] = None
    manufacturer: Optional[str] = None
    quality: Optional[str] = None
    notes: Optional[str] = None
    manufacture_date: Optional[str] = Field(default=None, max_length=32)
    product_id: Optional[UUID] = None
    imageBase64: Optional[str] = None
