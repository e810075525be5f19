"""Pydantic schemas for events."""

from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from alumnae.core.clock import utcnow
from alumnae.schemas.auth import EMAIL_PATTERN

TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"
URL_PATTERN = r"^https?://.+"
PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"

# Batch-targeted events may be planned a few years ahead
MAX_BATCH_YEARS_AHEAD = 5


class EventCreate(BaseModel):
    """Schema for creating an event.

    ``batchYear`` is kept only for batch events and ``groupName`` only for
    group events; the other is dropped.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    event_date: date = Field(..., alias="date")
    time: str = Field(..., pattern=TIME_PATTERN, description="24-hour HH:MM")
    location: str = Field(..., min_length=1, max_length=300)
    details_url: str | None = Field(None, max_length=500, pattern=URL_PATTERN, alias="detailsUrl")
    organizer_name: str = Field(..., min_length=1, max_length=100, alias="organizerName")
    organizer_email: str = Field(
        ..., max_length=255, pattern=EMAIL_PATTERN, alias="organizerEmail"
    )
    organizer_phone: str | None = Field(None, pattern=PHONE_PATTERN, alias="organizerPhone")
    audience: Literal["batch", "group", "alumnae"] = "alumnae"
    batch_year: int | None = Field(None, ge=1900, alias="batchYear")
    group_name: str | None = Field(None, max_length=100, alias="groupName")

    @field_validator(
        "title", "description", "location", "details_url", "organizer_name",
        "organizer_phone", "group_name",
        mode="before",
    )
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator("organizer_email", mode="before")
    @classmethod
    def lowercase_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("time")
    @classmethod
    def zero_pad_time(cls, v: str) -> str:
        hours, minutes = v.split(":")
        return f"{int(hours):02d}:{minutes}"

    @field_validator("batch_year")
    @classmethod
    def batch_year_not_too_far_ahead(cls, v: int | None) -> int | None:
        if v is not None and v > utcnow().year + MAX_BATCH_YEARS_AHEAD:
            raise ValueError(
                f"Batch year cannot be more than {MAX_BATCH_YEARS_AHEAD} years in the future"
            )
        return v

    @model_validator(mode="after")
    def audience_target(self) -> "EventCreate":
        if self.audience == "batch" and self.batch_year is None:
            raise ValueError("Batch year is required when audience is batch")
        if self.audience == "group" and not self.group_name:
            raise ValueError("Group name is required when audience is group")
        if self.audience != "batch":
            self.batch_year = None
        if self.audience != "group":
            self.group_name = None
        return self


class EventUpdate(EventCreate):
    """Schema for updating an event. Every field is replaced."""


class EventCreator(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None
    event_date: date = Field(serialization_alias="date")
    time: str
    location: str
    details_url: str | None = Field(serialization_alias="detailsUrl")
    organizer_name: str = Field(serialization_alias="organizerName")
    organizer_email: str = Field(serialization_alias="organizerEmail")
    organizer_phone: str | None = Field(serialization_alias="organizerPhone")
    audience: str
    batch_year: int | None = Field(serialization_alias="batchYear")
    group_name: str | None = Field(serialization_alias="groupName")
    created_by: EventCreator | None = Field(serialization_alias="createdBy")
    created_at: datetime = Field(serialization_alias="dateCreated")
    updated_at: datetime = Field(serialization_alias="dateUpdated")


class EventListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[EventResponse]


class EventDetailResponse(BaseModel):
    success: bool = True
    data: EventResponse


class EventMutationResponse(BaseModel):
    """Response after an event is created or updated."""

    success: bool = True
    data: EventResponse
    message: str
