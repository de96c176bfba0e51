"""Repository for obligation data access operations."""

from enum import Enum
from typing import Any, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from licensedb.database.models import Obligation, ObligationLicense
from licensedb.repositories.base_repository import BaseRepository
from licensedb.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ObligationField(str, Enum):
    """Obligation columns a partial update may write."""

    TYPE = "type"
    TEXT = "text"
    MD5 = "md5"
    CLASSIFICATION = "classification"
    MODIFICATIONS = "modifications"
    COMMENT = "comment"
    ACTIVE = "active"
    TEXT_UPDATABLE = "text_updatable"


FieldUpdate = tuple[ObligationField, Any]


class ObligationRepository(BaseRepository[Obligation]):
    """Repository for Obligation entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Obligation)

    async def get_by_topic(self, topic: str) -> Optional[Obligation]:
        """Get obligation by its unique topic.

        Args:
            topic: Obligation topic

        Returns:
            Obligation instance or None if not found
        """
        return await self.find_one(topic=topic)

    async def get_by_topic_or_md5(self, topic: str, md5: str) -> Optional[Obligation]:
        """Get an obligation sharing either the topic or the text digest."""
        stmt = (
            select(Obligation)
            .where(or_(Obligation.topic == topic, Obligation.md5 == md5))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_active(
        self, active: bool, skip: int, limit: int
    ) -> tuple[list[Obligation], int]:
        """Get one page of obligations with the given active flag, oldest first.

        Returns:
            The page of obligations and the total number of matches
        """
        return await self.page({"active": active}, skip=skip, limit=limit)

    async def apply_updates(
        self, obligation: Obligation, updates: list[FieldUpdate]
    ) -> Obligation:
        """Write the given fields onto an obligation as one UPDATE.

        Args:
            obligation: Persistent obligation to modify
            updates: (field, value) pairs; fields not listed are untouched

        Returns:
            The same obligation, flushed
        """
        if not updates:
            return obligation

        for field, value in updates:
            setattr(obligation, field.value, value)

        await self.session.flush()
        LOGGER.debug(
            f"Updated obligation {obligation.id}: {[field.value for field, _ in updates]}"
        )
        return obligation

    async def link_license(self, obligation_id: int, license_id: int) -> ObligationLicense:
        """Attach an obligation to a license."""
        link = ObligationLicense(obligation_id=obligation_id, license_id=license_id)
        self.session.add(link)
        await self.session.flush()
        return link
