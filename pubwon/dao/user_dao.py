"""UserDAO — users table operations."""

from pubwon.dao.base import BaseDAO
from pubwon.models.user import User


class UserDAO(BaseDAO[User]):
    model = User
