"""Batch year API endpoints. Reads are public; writes require an admin."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.api.auth import get_current_admin
from alumnae.core import get_db
from alumnae.models.user import User
from alumnae.schemas.auth import MessageResponse
from alumnae.schemas.batch_year import (
    BatchYearCreate,
    BatchYearCreatedResponse,
    BatchYearListResponse,
    BatchYearResponse,
)
from alumnae.services.batch_year import (
    BatchYearExistsError,
    BatchYearInUseError,
    BatchYearService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/batch-years", tags=["batch-years"])


def get_batch_year_service(db: AsyncSession = Depends(get_db)) -> BatchYearService:
    return BatchYearService(db)


@router.get("", response_model=BatchYearListResponse)
async def list_batch_years(
    service: BatchYearService = Depends(get_batch_year_service),
) -> BatchYearListResponse:
    """List all batch years, newest first."""
    batch_years = await service.list()
    return BatchYearListResponse(
        count=len(batch_years),
        data=[BatchYearResponse.model_validate(b) for b in batch_years],
    )


@router.post("", response_model=BatchYearCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_batch_year(
    data: BatchYearCreate,
    admin: User = Depends(get_current_admin),
    service: BatchYearService = Depends(get_batch_year_service),
) -> BatchYearCreatedResponse:
    """Create a batch year (admin only)."""
    try:
        batch_year = await service.create(data.year)
    except BatchYearExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Batch year already exists",
        ) from e

    logger.info(f"Batch year {data.year} created by {admin.username}")
    return BatchYearCreatedResponse(data=BatchYearResponse.model_validate(batch_year))


@router.delete("/{batch_year_id}", response_model=MessageResponse)
async def delete_batch_year(
    batch_year_id: UUID,
    admin: User = Depends(get_current_admin),
    service: BatchYearService = Depends(get_batch_year_service),
) -> MessageResponse:
    """Delete a batch year (admin only). Years with alumni cannot be deleted."""
    try:
        deleted = await service.delete(batch_year_id)
    except BatchYearInUseError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete a batch year that still has alumni",
        ) from e
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Batch year not found",
        )
    logger.info(f"Batch year {batch_year_id} deleted by {admin.username}")
    return MessageResponse(message="Batch year deleted successfully")
