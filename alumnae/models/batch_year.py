"""Batch year model - graduating class groupings."""

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from alumnae.models.base import BaseModel


class BatchYear(BaseModel):
    """A graduating class year that alumnae are grouped under."""

    __tablename__ = "batch_years"

    year: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<BatchYear {self.year}>"
