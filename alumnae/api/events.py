"""Event API endpoints. Anyone can browse; only admins can change events."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.api.auth import get_clock, get_current_admin
from alumnae.core import get_db
from alumnae.core.clock import Clock
from alumnae.models.user import User
from alumnae.schemas.auth import MessageResponse
from alumnae.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventListResponse,
    EventMutationResponse,
    EventResponse,
    EventUpdate,
)
from alumnae.services.event import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    """Dependency to get event service."""
    return EventService(db)


def _event_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")


@router.get("", response_model=EventListResponse)
async def list_events(
    service: EventService = Depends(get_event_service),
) -> EventListResponse:
    """List all events, soonest first."""
    events = await service.list()
    return EventListResponse(
        count=len(events), data=[EventResponse.model_validate(e) for e in events]
    )


@router.get("/search", response_model=EventListResponse)
async def search_events(
    keyword: str | None = None,
    year: int | None = None,
    location: str | None = None,
    batch_year: int | None = Query(None, alias="batchYear"),
    clock: Clock = Depends(get_clock),
    service: EventService = Depends(get_event_service),
) -> EventListResponse:
    """Search upcoming events.

    ``keyword`` matches title, description, location or organizer. ``year``
    widens the search to that whole year and must not be in the past.
    """
    today = clock().date()
    if year is not None and year < today.year:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Year must be the current year or a future year",
        )

    events = await service.search(
        today=today,
        keyword=keyword.strip() if keyword else None,
        year=year,
        location=location.strip() if location else None,
        batch_year=batch_year,
    )
    return EventListResponse(
        count=len(events), data=[EventResponse.model_validate(e) for e in events]
    )


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: UUID,
    service: EventService = Depends(get_event_service),
) -> EventDetailResponse:
    """Get one event."""
    event = await service.get(event_id)
    if not event:
        raise _event_not_found()
    return EventDetailResponse(data=EventResponse.model_validate(event))


@router.post("", response_model=EventMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    admin: User = Depends(get_current_admin),
    service: EventService = Depends(get_event_service),
) -> EventMutationResponse:
    """Create an event (admin only)."""
    event = await service.create(data, created_by=admin)
    logger.info(f"Event {event.id} created by {admin.username}")
    return EventMutationResponse(
        data=EventResponse.model_validate(event), message="Event created successfully"
    )


@router.put("/{event_id}", response_model=EventMutationResponse)
async def update_event(
    event_id: UUID,
    data: EventUpdate,
    admin: User = Depends(get_current_admin),
    service: EventService = Depends(get_event_service),
) -> EventMutationResponse:
    """Replace an event's details (admin only)."""
    event = await service.update(event_id, data)
    if not event:
        raise _event_not_found()
    logger.info(f"Event {event_id} updated by {admin.username}")
    return EventMutationResponse(
        data=EventResponse.model_validate(event), message="Event updated successfully"
    )


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: UUID,
    admin: User = Depends(get_current_admin),
    service: EventService = Depends(get_event_service),
) -> MessageResponse:
    """Delete an event (admin only)."""
    if not await service.delete(event_id):
        raise _event_not_found()
    logger.info(f"Event {event_id} deleted by {admin.username}")
    return MessageResponse(message="Event removed successfully")
