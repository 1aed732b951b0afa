"""AuthService — verifies bearer tokens issued by the hosted identity provider.

Sign-in, sign-up and token issuance live with the provider; this service
only checks the signature, expiry and subject of an access token and maps
it to a local ``users`` row.
"""

import os
import uuid

from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from pubwon.dao.user_dao import UserDAO
from pubwon.models.user import User
from pubwon.services import AuthenticationError

_ALGORITHM = "HS256"
_ENV_JWT_SECRET = "PUBWON_JWT_SECRET"
_ENV_JWT_AUDIENCE = "PUBWON_JWT_AUDIENCE"


def _get_secret() -> str:
    secret = os.environ.get(_ENV_JWT_SECRET)
    if not secret:
        raise RuntimeError(f"{_ENV_JWT_SECRET} environment variable is required")
    return secret


class AuthService:
    """Stateless access-token verification."""

    def __init__(self, user_dao: UserDAO) -> None:
        self._user_dao = user_dao

    def decode_subject(self, token: str) -> uuid.UUID:
        """Return the user id carried by a valid access token.

        Raises :class:`AuthenticationError` on bad signature, expiry or payload.
        """
        audience = os.environ.get(_ENV_JWT_AUDIENCE) or None
        try:
            payload = jwt.decode(
                token,
                _get_secret(),
                algorithms=[_ALGORITHM],
                audience=audience,
                options={"verify_aud": audience is not None},
            )
        except JWTError:
            raise AuthenticationError("invalid access token")

        try:
            return uuid.UUID(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("invalid token payload")

    async def get_current_user(self, session: AsyncSession, token: str) -> User:
        """Decode *token* and load the matching user.

        Raises :class:`AuthenticationError` on invalid token or unknown user.
        """
        user = await self._user_dao.get_by_id(session, self.decode_subject(token))
        if user is None:
            raise AuthenticationError("user not found")
        return user
