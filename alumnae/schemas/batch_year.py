"""Pydantic schemas for batch years."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BatchYearCreate(BaseModel):
    """Schema for creating a batch year."""

    year: int = Field(..., ge=1900, le=2100)


class BatchYearResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    year: int
    created_at: datetime = Field(serialization_alias="dateCreated")


class BatchYearListResponse(BaseModel):
    """All batch years, newest first."""

    success: bool = True
    count: int
    data: list[BatchYearResponse]


class BatchYearCreatedResponse(BaseModel):
    success: bool = True
    data: BatchYearResponse
