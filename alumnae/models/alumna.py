"""Alumna model - a member profile grouped under a batch year."""

import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from alumnae.models.base import BaseModel
from alumnae.models.batch_year import BatchYear

PREFIXES = ("Ms.", "Mrs.", "Mr.", "Dr.", "Prof.", "Atty.", "Eng.", "Sr.")


class Alumna(BaseModel):
    """A graduate of the school.

    Pictures are stored as URLs or paths to files hosted elsewhere; an empty
    string means no picture.
    """

    __tablename__ = "alumni"

    prefix: Mapped[str] = mapped_column(String(10), default="Ms.", nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    # Optional, but unique when present
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    contact_number: Mapped[str | None] = mapped_column(String(30), nullable=True)

    batch_year_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("batch_years.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    student_picture: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    current_picture: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    batch_year: Mapped[BatchYear] = relationship("BatchYear")

    def __repr__(self) -> str:
        return f"<Alumna {self.first_name} {self.last_name}>"
