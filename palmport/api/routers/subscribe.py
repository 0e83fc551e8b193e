"""Subscribers API: public sign-up plus admin list, broadcast and delete."""
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends

from palmport.api.dependencies import get_subscriber_service, require_admin
from palmport.api.schemas.shop import BroadcastRequest, MessageResponse, SubscribeRequest, SubscriberResponse
from palmport.services.auth_service import TokenClaims
from palmport.services.subscriber_service import SubscriberService

router = APIRouter(prefix="/subscribe", tags=["subscribers"])


@router.post("", response_model=MessageResponse)
async def subscribe(body: SubscribeRequest, svc: SubscriberService = Depends(get_subscriber_service)):
    created = await svc.subscribe(body.email)
    return MessageResponse(message="Subscribed successfully" if created else "Already subscribed")


@router.get("", response_model=List[SubscriberResponse])
async def list_subscribers(
    _admin: TokenClaims = Depends(require_admin),
    svc: SubscriberService = Depends(get_subscriber_service),
):
    return [SubscriberResponse.model_validate(s) for s in await svc.list_subscribers()]


@router.post("/send", response_model=MessageResponse)
async def send_broadcast(
    body: BroadcastRequest,
    _admin: TokenClaims = Depends(require_admin),
    svc: SubscriberService = Depends(get_subscriber_service),
):
    count = await svc.broadcast(body.subject or "", body.message or "")
    return MessageResponse(message=f"Emails sent to {count} subscribers.")


@router.delete("/{subscriber_id}", response_model=MessageResponse)
async def delete_subscriber(
    subscriber_id: uuid.UUID,
    _admin: TokenClaims = Depends(require_admin),
    svc: SubscriberService = Depends(get_subscriber_service),
):
    await svc.delete_subscriber(subscriber_id)
    return MessageResponse(message="Subscriber deleted")
