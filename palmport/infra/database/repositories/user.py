"""User repository."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from palmport.infra.database.models.user import User
from palmport.infra.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
