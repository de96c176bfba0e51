from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from licensedb.utils.logging import get_logger

ModelType = TypeVar("ModelType")

LOGGER = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """Data access shared by the obligation, license, user and audit repositories.

    Repositories only flush; committing or rolling back is left to the
    service that owns the transaction.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        self.session = session
        self.model = model
        self.logger = LOGGER

    def _where(self, query, criteria: dict[str, Any]):
        for column, value in criteria.items():
            query = query.where(getattr(self.model, column) == value)
        return query

    async def find_one(self, **criteria: Any) -> Optional[ModelType]:
        """Get the single row whose columns equal ``criteria``, or None.

        Only meant for lookups on unique columns such as a topic or username.
        """
        result = await self.session.execute(self._where(select(self.model), criteria))
        return result.scalar_one_or_none()

    async def page(
        self,
        criteria: dict[str, Any],
        skip: int,
        limit: int,
        order_by: Any = None,
    ) -> tuple[list[ModelType], int]:
        """Get one page of matching rows and the total number of matches.

        Args:
            criteria: column name to required value
            skip: Rows to skip
            limit: Maximum rows to return
            order_by: Ordering expression, primary key when omitted
        """
        name = self.model.__name__
        try:
            count_query = self._where(select(func.count()).select_from(self.model), criteria)
            total = (await self.session.execute(count_query)).scalar_one()

            query = self._where(select(self.model), criteria)
            query = query.order_by(order_by if order_by is not None else self.model.id)
            result = await self.session.execute(query.offset(skip).limit(limit))
        except SQLAlchemyError as e:
            self.logger.error(f"Error paging {name} rows {criteria}: {str(e)}", exc_info=True)
            raise

        return list(result.scalars().all()), total

    async def create(self, **values: Any) -> ModelType:
        """Add a row and flush it so generated keys are populated."""
        instance = self.model(**values)
        self.session.add(instance)
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting {self.model.__name__}: {str(e)}", exc_info=True)
            raise
        return instance
