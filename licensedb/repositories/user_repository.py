"""Repository for user data access operations."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from licensedb.database.models import User
from licensedb.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username.

        Args:
            username: Username carried by the access token

        Returns:
            User instance or None if not found
        """
        return await self.find_one(username=username)
