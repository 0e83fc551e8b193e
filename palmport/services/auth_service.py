"""AuthService: password hashing, token issuance and the seeded admin account."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from palmport.config import AuthConfig
from palmport.core.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from palmport.infra.database.models.user import ROLE_ADMIN, ROLE_USER, User
from palmport.infra.database.repositories.user import UserRepository

logger = logging.getLogger(__name__)

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def create_access_token(user: User, config: AuthConfig) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.token_expire_minutes)
    claims = {"sub": str(user.id), "email": user.email, "role": user.role, "exp": expire}
    return jwt.encode(claims, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: AuthConfig) -> TokenClaims:
    """Decode and validate *token*; a bad or expired token is a ForbiddenError."""
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
        return TokenClaims(
            user_id=UUID(str(payload["sub"])),
            email=str(payload.get("email") or ""),
            role=str(payload.get("role") or ROLE_USER),
        )
    except ExpiredSignatureError as exc:
        raise ForbiddenError("Token expired", cause=exc) from exc
    except (JWTError, KeyError, ValueError) as exc:
        raise ForbiddenError("Invalid token", cause=exc) from exc


def user_payload(user: User) -> Dict[str, Any]:
    return {"id": str(user.id), "name": user.name, "email": user.email, "role": user.role}


class AuthService:
    def __init__(self, session: AsyncSession, config: AuthConfig) -> None:
        self._repo = UserRepository(session)
        self._config = config

    async def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> tuple[User, str]:
        if not (name or "").strip() or not (email or "").strip() or not password:
            raise ValidationError("All fields are required")
        address = email.strip().lower()
        if await self._repo.get_by_email(address) is not None:
            raise ValidationError("User already exists")
        user = await self._repo.create(
            {"name": name.strip(), "email": address, "password_hash": hash_password(password), "role": ROLE_USER}
        )
        logger.info("AuthService: registered %s", address)
        return user, create_access_token(user, self._config)

    async def login(self, email: Optional[str], password: Optional[str], *, admin_only: bool = False) -> tuple[User, str]:
        if not (email or "").strip() or not password:
            raise ValidationError("Email and password required")
        user = await self._repo.get_by_email(email.strip().lower())
        if user is None:
            if admin_only:
                raise UnauthorizedError("Invalid admin credentials")
            raise ValidationError("User not found")
        if not verify_password(user.password_hash, password):
            logger.info("AuthService: failed login for %s", user.email)
            raise UnauthorizedError("Invalid admin credentials" if admin_only else "Invalid credentials")
        if admin_only and not user.is_admin:
            raise UnauthorizedError("Invalid admin credentials")
        return user, create_access_token(user, self._config)

    async def get_user(self, user_id: UUID) -> Optional[User]:
        return await self._repo.get_by_id(user_id)

    async def ensure_admin_exists(self) -> Optional[User]:
        """Seed the admin account from config when it is missing. Never overwrites an existing row."""
        if not self._config.admin_email or not self._config.admin_password:
            logger.warning("AuthService: ADMIN_EMAIL/ADMIN_PASSWORD not set; no admin account seeded")
            return None
        existing = await self._repo.get_by_email(self._config.admin_email)
        if existing is not None:
            if not existing.is_admin:
                logger.warning("AuthService: %s exists without the admin role", existing.email)
            return existing
        admin = await self._repo.create(
            {
                "name": "Administrator",
                "email": self._config.admin_email,
                "password_hash": hash_password(self._config.admin_password),
                "role": ROLE_ADMIN,
            }
        )
        logger.info("AuthService: seeded admin account %s", admin.email)
        return admin
