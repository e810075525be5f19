"""Event model - association gatherings announced to alumnae."""

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumnae.models.base import BaseModel
from alumnae.models.user import User

AUDIENCES = ("batch", "group", "alumnae")


class Event(BaseModel):
    """A scheduled event.

    ``audience`` decides who the event is for: one batch (``batch_year``
    set), a named group (``group_name`` set), or all alumnae.
    """

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_date_time", "event_date", "time"),)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Zero-padded "HH:MM" so that string order is chronological
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    details_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    organizer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    organizer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    organizer_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    audience: Mapped[str] = mapped_column(String(10), default="alumnae", nullable=False)
    batch_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    group_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by: Mapped[User | None] = relationship("User")

    def __repr__(self) -> str:
        return f"<Event {self.title} on {self.event_date}>"
