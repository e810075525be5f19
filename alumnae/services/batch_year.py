"""BatchYear service - graduating class year management."""

import builtins
import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.models.alumna import Alumna
from alumnae.models.batch_year import BatchYear

logger = logging.getLogger(__name__)


class BatchYearExistsError(Exception):
    """A batch year with the same year is already recorded."""


class BatchYearInUseError(Exception):
    """The batch year still has alumni assigned to it."""


class BatchYearService:
    """Service for managing batch years."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> builtins.list[BatchYear]:
        """List all batch years, newest first."""
        result = await self.db.execute(select(BatchYear).order_by(BatchYear.year.desc()))
        return list(result.scalars().all())

    async def list_between(self, year_from: int, year_to: int) -> builtins.list[BatchYear]:
        """List batch years in an inclusive range, oldest first."""
        result = await self.db.execute(
            select(BatchYear)
            .where(BatchYear.year >= year_from, BatchYear.year <= year_to)
            .order_by(BatchYear.year)
        )
        return list(result.scalars().all())

    async def get(self, batch_year_id: UUID) -> BatchYear | None:
        result = await self.db.execute(select(BatchYear).where(BatchYear.id == batch_year_id))
        return result.scalar_one_or_none()

    async def get_by_year(self, year: int) -> BatchYear | None:
        result = await self.db.execute(select(BatchYear).where(BatchYear.year == year))
        return result.scalar_one_or_none()

    async def create(self, year: int) -> BatchYear:
        """Create a batch year.

        Raises BatchYearExistsError when the year is taken, including when a
        concurrent insert wins the race past the lookup.
        """
        if await self.get_by_year(year):
            raise BatchYearExistsError(year)

        batch_year = BatchYear(year=year)
        self.db.add(batch_year)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise BatchYearExistsError(year) from e
        await self.db.refresh(batch_year)
        logger.info(f"Created batch year {year}")
        return batch_year

    async def delete(self, batch_year_id: UUID) -> bool:
        """Delete a batch year. Returns False if it did not exist.

        Raises BatchYearInUseError while alumni still reference it.
        """
        batch_year = await self.get(batch_year_id)
        if not batch_year:
            return False

        alumni_count = await self.db.scalar(
            select(func.count(Alumna.id)).where(Alumna.batch_year_id == batch_year_id)
        )
        if alumni_count:
            raise BatchYearInUseError(batch_year.year)

        await self.db.delete(batch_year)
        await self.db.flush()
        logger.info(f"Deleted batch year {batch_year.year}")
        return True
