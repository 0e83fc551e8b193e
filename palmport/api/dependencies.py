"""FastAPI dependency providers."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from palmport.config import AuthConfig
from palmport.core.exceptions import ForbiddenError, UnauthorizedError
from palmport.services.auth_service import TokenClaims, decode_access_token
from palmport.services.catalog_service import CatalogService
from palmport.services.order_lifecycle import OrderLifecycle
from palmport.services.order_status import TransitionPolicy
from palmport.services.subscriber_service import SubscriberService


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a transactional AsyncSession from the app-level session factory."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth_config


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
    config: AuthConfig = Depends(get_auth_config),
) -> TokenClaims:
    """Claims of the bearer token. Missing token → 401, bad or expired token → 403."""
    if not authorization:
        raise UnauthorizedError("Access denied. No token provided.")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Access denied. No token provided.")
    return decode_access_token(token.strip(), config)


async def require_admin(user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def get_order_lifecycle(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> OrderLifecycle:
    state = request.app.state
    return OrderLifecycle(
        session,
        notifications=state.notifications,
        dispatcher=state.dispatcher,
        payments=state.payments,
        session_factory=state.session_factory,
        policy=TransitionPolicy(strict=state.app_config.strict_transitions),
    )


def get_subscriber_service(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> SubscriberService:
    state = request.app.state
    return SubscriberService(session, state.notifications, dispatcher=state.dispatcher)


def get_catalog_service(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> CatalogService:
    return CatalogService(
        session,
        uploader=request.app.state.image_uploader,
        client_url=request.app.state.app_config.client_url,
    )
