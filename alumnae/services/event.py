"""Event service - scheduling and discovery of association events."""

import builtins
import logging
from datetime import date
from uuid import UUID

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from alumnae.models.event import Event
from alumnae.models.user import User
from alumnae.schemas.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)


class EventService:
    """Service for managing events."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _select() -> Select[tuple[Event]]:
        return (
            select(Event)
            .options(selectinload(Event.created_by))
            .execution_options(populate_existing=True)
        )

    async def _all(self, query: Select[tuple[Event]]) -> builtins.list[Event]:
        result = await self.db.execute(query.order_by(Event.event_date, Event.time))
        return list(result.scalars().all())

    async def list(self) -> builtins.list[Event]:
        """List all events, soonest first."""
        return await self._all(self._select())

    async def search(
        self,
        today: date,
        keyword: str | None = None,
        year: int | None = None,
        location: str | None = None,
        batch_year: int | None = None,
    ) -> builtins.list[Event]:
        """Search events, soonest first.

        Without ``year`` only events from ``today`` onward are returned;
        with it, every event in that calendar year.
        """
        query = self._select()
        if keyword:
            query = query.where(
                or_(
                    Event.title.icontains(keyword, autoescape=True),
                    Event.description.icontains(keyword, autoescape=True),
                    Event.location.icontains(keyword, autoescape=True),
                    Event.organizer_name.icontains(keyword, autoescape=True),
                )
            )
        if year is not None:
            query = query.where(
                Event.event_date >= date(year, 1, 1), Event.event_date <= date(year, 12, 31)
            )
        else:
            query = query.where(Event.event_date >= today)
        if location:
            query = query.where(Event.location.icontains(location, autoescape=True))
        if batch_year is not None:
            query = query.where(Event.audience == "batch", Event.batch_year == batch_year)
        return await self._all(query)

    async def get(self, event_id: UUID) -> Event | None:
        """Get an event with its creator loaded."""
        result = await self.db.execute(self._select().where(Event.id == event_id))
        return result.scalar_one_or_none()

    async def create(self, data: EventCreate, created_by: User) -> Event:
        """Create an event recorded as created by ``created_by``."""
        event = Event(**data.model_dump(), created_by_id=created_by.id)
        self.db.add(event)
        await self.db.flush()

        logger.info(f"Created event {event.title!r} on {event.event_date}")
        result = await self.get(event.id)
        assert result is not None, f"Event {event.id} not found after creation"
        return result

    async def update(self, event_id: UUID, data: EventUpdate) -> Event | None:
        """Replace every editable field of an event. Returns None if not found."""
        event = await self.get(event_id)
        if not event:
            return None

        for field, value in data.model_dump().items():
            setattr(event, field, value)
        await self.db.flush()

        logger.info(f"Updated event {event_id}")
        return await self.get(event_id)

    async def delete(self, event_id: UUID) -> bool:
        """Delete an event. Returns False if it did not exist."""
        event = await self.get(event_id)
        if not event:
            return False

        await self.db.delete(event)
        await self.db.flush()
        logger.info(f"Deleted event {event_id}")
        return True
