"""Repository for the audit trail."""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from licensedb.database.models import Audit, ChangeLog
from licensedb.repositories.base_repository import BaseRepository
from licensedb.services.change_tracker import ChangeLogEntry
from licensedb.utils.logging import get_logger

LOGGER = get_logger(__name__)


class AuditRepository(BaseRepository[Audit]):
    """Repository for Audit and ChangeLog rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Audit)

    async def create_audit(
        self,
        user_id: int,
        type_id: int,
        type: str,
        changes: list[ChangeLogEntry],
    ) -> Audit:
        """Persist one audit together with its change logs.

        Args:
            user_id: Internal id of the acting user
            type_id: Id of the changed entity
            type: Kind of the changed entity
            changes: Field changes, stored in the given order

        Returns:
            The flushed Audit
        """
        audit = Audit(
            user_id=user_id,
            type_id=type_id,
            type=type,
            timestamp=datetime.now(timezone.utc),
            change_logs=[
                ChangeLog(
                    field=change.field,
                    old_value=change.old_value,
                    updated_value=change.updated_value,
                )
                for change in changes
            ],
        )
        self.session.add(audit)
        await self.session.flush()

        LOGGER.info(f"Recorded audit {audit.id} for {type} {type_id} with {len(changes)} change(s)")
        return audit

    async def list_for_entity(
        self, type_id: int, type: str, skip: int, limit: int
    ) -> tuple[list[Audit], int]:
        """Get one page of audits of an entity, newest first.

        Returns:
            The page of audits with change logs loaded, and the total count
        """
        condition = (Audit.type_id == type_id) & (Audit.type == type)

        total_result = await self.session.execute(
            select(func.count()).select_from(Audit).where(condition)
        )
        total = total_result.scalar_one()

        stmt = (
            select(Audit)
            .where(condition)
            .options(selectinload(Audit.change_logs))
            .order_by(Audit.timestamp.desc(), Audit.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
