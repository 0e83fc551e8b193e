"""Auth API: customer registration, login and token check."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from palmport.api.dependencies import get_auth_config, get_current_user, get_session
from palmport.api.schemas.shop import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from palmport.config import AuthConfig
from palmport.core.exceptions import UnauthorizedError
from palmport.services.auth_service import AuthService, TokenClaims, user_payload

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_session),
    config: AuthConfig = Depends(get_auth_config),
):
    user, token = await AuthService(session, config).register(body.name, body.email, body.password)
    return AuthResponse(token=token, user=UserResponse(**user_payload(user)))


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
    config: AuthConfig = Depends(get_auth_config),
):
    user, token = await AuthService(session, config).login(body.email, body.password)
    return AuthResponse(token=token, user=UserResponse(**user_payload(user)))


@router.get("/verify", response_model=UserResponse)
async def verify(
    claims: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    config: AuthConfig = Depends(get_auth_config),
):
    user = await AuthService(session, config).get_user(claims.user_id)
    if user is None:
        raise UnauthorizedError("Account no longer exists")
    return UserResponse(**user_payload(user))
