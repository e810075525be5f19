"""Alumna service - profile management and directory search."""

import builtins
import logging
from collections import defaultdict
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from alumnae.models.alumna import Alumna
from alumnae.models.batch_year import BatchYear
from alumnae.schemas.alumna import AlumnaCreate, AlumnaUpdate

logger = logging.getLogger(__name__)

# Upper bound on rows returned by the search endpoints
SEARCH_LIMIT = 50


class AlumnaEmailExistsError(Exception):
    """Another alumna already uses this email."""


class UnknownBatchYearError(Exception):
    """The referenced batch year does not exist."""


def group_by_year(alumni: builtins.list[Alumna]) -> dict[int, builtins.list[Alumna]]:
    """Group alumni by graduating year, keeping their order within each year."""
    grouped: dict[int, builtins.list[Alumna]] = defaultdict(list)
    for alumna in alumni:
        grouped[alumna.batch_year.year].append(alumna)
    return dict(grouped)


def _name_matches(term: str) -> Any:
    """Case-insensitive partial match on any name part or the full name."""
    full_name = Alumna.first_name + " " + Alumna.last_name
    full_name_with_middle = (
        Alumna.first_name + " " + func.coalesce(Alumna.middle_name, "") + " " + Alumna.last_name
    )
    return or_(
        Alumna.first_name.icontains(term, autoescape=True),
        Alumna.middle_name.icontains(term, autoescape=True),
        Alumna.last_name.icontains(term, autoescape=True),
        full_name.icontains(term, autoescape=True),
        full_name_with_middle.icontains(term, autoescape=True),
    )


class AlumnaService:
    """Service for managing alumna profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _select() -> Select[tuple[Alumna]]:
        return (
            select(Alumna)
            .options(selectinload(Alumna.batch_year))
            .execution_options(populate_existing=True)
        )

    async def _all(self, query: Select[tuple[Alumna]]) -> builtins.list[Alumna]:
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list(self) -> builtins.list[Alumna]:
        """List all alumni, newest batch first, then by surname."""
        return await self._all(
            self._select()
            .join(Alumna.batch_year)
            .order_by(BatchYear.year.desc(), Alumna.last_name, Alumna.first_name)
        )

    async def get(self, alumna_id: UUID) -> Alumna | None:
        """Get an alumna with her batch year loaded."""
        result = await self.db.execute(self._select().where(Alumna.id == alumna_id))
        return result.scalar_one_or_none()

    async def list_by_batch_year(self, batch_year_id: UUID) -> builtins.list[Alumna]:
        return await self._all(
            self._select()
            .where(Alumna.batch_year_id == batch_year_id)
            .order_by(Alumna.last_name, Alumna.first_name)
        )

    async def list_by_year_range(self, year_from: int, year_to: int) -> builtins.list[Alumna]:
        """List alumni whose batch year falls in an inclusive range, oldest first."""
        return await self._all(
            self._select()
            .join(Alumna.batch_year)
            .where(BatchYear.year >= year_from, BatchYear.year <= year_to)
            .order_by(BatchYear.year, Alumna.last_name, Alumna.first_name)
        )

    async def search_by_name(self, term: str) -> builtins.list[Alumna]:
        """Search by first, middle, last or full name."""
        return await self._all(
            self._select()
            .where(_name_matches(term))
            .order_by(Alumna.last_name, Alumna.first_name)
            .limit(SEARCH_LIMIT)
        )

    async def advanced_search(
        self,
        name: str | None = None,
        year_from: int | None = None,
        year_to: int | None = None,
        email: str | None = None,
        contact_number: str | None = None,
        prefix: str | None = None,
    ) -> builtins.list[Alumna]:
        """Search with any combination of filters. Every given filter must match."""
        query = self._select().join(Alumna.batch_year)
        if name:
            query = query.where(
                or_(
                    Alumna.first_name.icontains(name, autoescape=True),
                    Alumna.middle_name.icontains(name, autoescape=True),
                    Alumna.last_name.icontains(name, autoescape=True),
                )
            )
        if year_from is not None:
            query = query.where(BatchYear.year >= year_from)
        if year_to is not None:
            query = query.where(BatchYear.year <= year_to)
        if email:
            query = query.where(Alumna.email.icontains(email, autoescape=True))
        if contact_number:
            query = query.where(Alumna.contact_number.contains(contact_number, autoescape=True))
        if prefix:
            query = query.where(Alumna.prefix.icontains(prefix, autoescape=True))

        return await self._all(
            query.order_by(Alumna.last_name, Alumna.first_name).limit(SEARCH_LIMIT)
        )

    async def grouped(self, search: str | None = None) -> dict[int, builtins.list[Alumna]]:
        """All alumni grouped by batch year, optionally filtered by name."""
        query = self._select()
        if search:
            query = query.where(
                or_(
                    Alumna.first_name.icontains(search, autoescape=True),
                    Alumna.middle_name.icontains(search, autoescape=True),
                    Alumna.last_name.icontains(search, autoescape=True),
                )
            )
        alumni = await self._all(query.order_by(Alumna.last_name, Alumna.first_name))
        return group_by_year(alumni)

    async def _check_batch_year(self, batch_year_id: UUID) -> None:
        if await self.db.get(BatchYear, batch_year_id) is None:
            raise UnknownBatchYearError(batch_year_id)

    async def _check_email_free(self, email: str, exclude_id: UUID | None = None) -> None:
        query = select(Alumna.id).where(Alumna.email == email)
        if exclude_id is not None:
            query = query.where(Alumna.id != exclude_id)
        if (await self.db.execute(query)).first() is not None:
            raise AlumnaEmailExistsError(email)

    async def _flush(self, email: str | None) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent write of the same email
            await self.db.rollback()
            raise AlumnaEmailExistsError(email) from e

    async def create(self, data: AlumnaCreate) -> Alumna:
        """Create an alumna under an existing batch year."""
        await self._check_batch_year(data.batch_year_id)
        if data.email:
            await self._check_email_free(data.email)

        alumna = Alumna(**data.model_dump())
        self.db.add(alumna)
        await self._flush(data.email)

        logger.info(f"Created alumna {alumna.first_name} {alumna.last_name}")
        result = await self.get(alumna.id)
        assert result is not None, f"Alumna {alumna.id} not found after creation"
        return result

    async def update(self, alumna_id: UUID, data: AlumnaUpdate) -> Alumna | None:
        """Apply the fields present in ``data``. Returns None if not found."""
        alumna = await self.get(alumna_id)
        if not alumna:
            return None

        update_data = data.model_dump(exclude_unset=True)
        if "batch_year_id" in update_data:
            await self._check_batch_year(update_data["batch_year_id"])
        if update_data.get("email"):
            await self._check_email_free(update_data["email"], exclude_id=alumna_id)

        for field, value in update_data.items():
            setattr(alumna, field, value)
        await self._flush(update_data.get("email"))

        logger.info(f"Updated alumna {alumna_id}")
        return await self.get(alumna_id)

    async def delete(self, alumna_id: UUID) -> bool:
        """Delete an alumna. Returns False if she did not exist."""
        alumna = await self.get(alumna_id)
        if not alumna:
            return False

        await self.db.delete(alumna)
        await self.db.flush()
        logger.info(f"Deleted alumna {alumna_id}")
        return True
