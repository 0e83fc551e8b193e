"""Payments API: Paystack initialize and verify."""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from palmport.api.dependencies import get_current_user, get_order_lifecycle
from palmport.api.schemas.orders import OrderResponse, PaymentInitializeRequest, PaymentVerifyResponse
from palmport.core.exceptions import ValidationError
from palmport.services.auth_service import TokenClaims
from palmport.services.order_lifecycle import OrderLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/initialize")
async def initialize_payment(body: PaymentInitializeRequest, request: Request) -> Dict[str, Any]:
    """Start a Paystack transaction and return the gateway response unchanged."""
    if not body.email or not body.amount or not body.reference:
        raise ValidationError("Missing required fields: email, amount, and reference are required")
    state = request.app.state
    return await state.payments.initialize_transaction(
        body.email,
        body.amount,
        body.reference,
        body.metadata,
        callback_url=f"{state.app_config.app_base_url}/payment/verify",
    )


@router.get("/verify/{reference}", response_model=PaymentVerifyResponse)
async def verify_payment(
    reference: str,
    user: TokenClaims = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    result = await lifecycle.verify_payment(reference, user.user_id)
    return PaymentVerifyResponse(
        success=True,
        message="Payment already verified" if result.already_paid else "Payment verified successfully",
        order=OrderResponse.model_validate(result.order),
        payment=result.payment,
    )
