"""Repository for license lookups."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from licensedb.database.models import License
from licensedb.repositories.base_repository import BaseRepository


class LicenseRepository(BaseRepository[License]):
    """Licenses are read-only here; they are only resolved to link obligations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, License)

    async def get_by_shortname(self, shortname: str) -> Optional[License]:
        return await self.find_one(shortname=shortname)
