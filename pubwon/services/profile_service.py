"""ProfileService — the signed-in user's own profile."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.user_dao import UserDAO
from pubwon.models.user import User
from pubwon.services import NotFoundError

_EDITABLE_FIELDS = frozenset({"full_name", "github_username"})


class ProfileService:
    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    async def update(self, session: AsyncSession, user: User, **fields: str | None) -> User:
        """Update editable profile fields; unknown keys are ignored."""
        values = {k: v for k, v in fields.items() if k in _EDITABLE_FIELDS}
        if not values:
            return user
        updated = await self._user_dao.update(session, user.id, **values)
        if updated is None:
            raise NotFoundError("user not found")
        return updated

    async def delete(self, session: AsyncSession, user: User) -> None:
        """Delete the account row; repositories and their data cascade."""
        if not await self._user_dao.delete(session, user.id):
            raise NotFoundError("user not found")
