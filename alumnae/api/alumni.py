"""Alumni API endpoints.

The directory and its searches are public; creating, editing and
removing profiles requires an admin.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumnae.api.auth import get_clock, get_current_admin
from alumnae.api.batch_years import get_batch_year_service
from alumnae.core import get_db
from alumnae.core.clock import Clock
from alumnae.models.alumna import Alumna
from alumnae.models.user import User
from alumnae.schemas.alumna import (
    AlumnaBatchResponse,
    AlumnaCreate,
    AlumnaDetailResponse,
    AlumnaFilterResponse,
    AlumnaGroupedResponse,
    AlumnaListResponse,
    AlumnaResponse,
    AlumnaSearchResponse,
    AlumnaUpdate,
    AlumnaYearRangeResponse,
    AlumnaYearResponse,
    YearRange,
)
from alumnae.schemas.auth import MessageResponse
from alumnae.schemas.batch_year import BatchYearResponse
from alumnae.services.alumna import (
    AlumnaEmailExistsError,
    AlumnaService,
    UnknownBatchYearError,
    group_by_year,
)
from alumnae.services.batch_year import BatchYearService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alumni", tags=["alumni"])

# The school's first graduating class
EARLIEST_BATCH_YEAR = 1923
MIN_SEARCH_LENGTH = 2


def get_alumna_service(db: AsyncSession = Depends(get_db)) -> AlumnaService:
    """Dependency to get alumna service."""
    return AlumnaService(db)


def _alumni(rows: list[Alumna]) -> list[AlumnaResponse]:
    return [AlumnaResponse.model_validate(a) for a in rows]


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.get("", response_model=AlumnaListResponse)
async def list_alumni(
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaListResponse:
    """List all alumni, newest batch first."""
    alumni = await service.list()
    return AlumnaListResponse(count=len(alumni), data=_alumni(alumni))


@router.get("/advanced-search", response_model=AlumnaFilterResponse)
async def advanced_search_alumni(
    name: str | None = None,
    year_from: int | None = Query(None, alias="yearFrom"),
    year_to: int | None = Query(None, alias="yearTo"),
    email: str | None = None,
    contact_number: str | None = Query(None, alias="contactNumber"),
    prefix: str | None = None,
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaFilterResponse:
    """Search alumni by any combination of name, year range, email, phone and prefix."""
    alumni = await service.advanced_search(
        name=name.strip() if name else None,
        year_from=year_from,
        year_to=year_to,
        email=email,
        contact_number=contact_number,
        prefix=prefix,
    )
    if not alumni:
        raise _not_found("No alumni found matching the search criteria")
    return AlumnaFilterResponse(count=len(alumni), alumni=_alumni(alumni))


@router.get("/search", response_model=AlumnaSearchResponse)
async def search_alumni(
    q: str | None = None,
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaSearchResponse:
    """Search alumni by first, middle, last or full name."""
    term = (q or "").strip()
    if not term:
        raise _bad_request("Search query is required. Use ?q=searchTerm")
    if len(term) < MIN_SEARCH_LENGTH:
        raise _bad_request(f"Search term must be at least {MIN_SEARCH_LENGTH} characters long")

    alumni = await service.search_by_name(term)
    if not alumni:
        raise _not_found(f'No alumni found matching "{term}"')
    return AlumnaSearchResponse(search_term=term, count=len(alumni), alumni=_alumni(alumni))


@router.get("/grouped", response_model=AlumnaGroupedResponse)
async def list_alumni_grouped(
    search: str | None = None,
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaGroupedResponse:
    """Alumni grouped by batch year, optionally filtered by name."""
    grouped = await service.grouped(search.strip() if search else None)
    return AlumnaGroupedResponse(data={year: _alumni(rows) for year, rows in grouped.items()})


@router.get("/years", response_model=AlumnaYearRangeResponse)
async def list_alumni_by_year_range(
    year_from: int | None = Query(None, alias="from"),
    year_to: int | None = Query(None, alias="to"),
    service: AlumnaService = Depends(get_alumna_service),
    batch_year_service: BatchYearService = Depends(get_batch_year_service),
) -> AlumnaYearRangeResponse:
    """Alumni of every batch year between ``from`` and ``to`` inclusive."""
    if year_from is None or year_to is None:
        raise _bad_request(
            'Both "from" and "to" year parameters are required (e.g., ?from=1920&to=1930)'
        )
    if year_from > year_to:
        raise _bad_request("From year cannot be greater than to year")

    batch_years = await batch_year_service.list_between(year_from, year_to)
    if not batch_years:
        raise _not_found(f"No batch years found between {year_from} and {year_to}")

    alumni = await service.list_by_year_range(year_from, year_to)
    if not alumni:
        raise _not_found(f"No alumni found between years {year_from} and {year_to}")

    return AlumnaYearRangeResponse(
        year_range=YearRange(year_from=year_from, year_to=year_to),
        total_count=len(alumni),
        batch_years=[BatchYearResponse.model_validate(b) for b in batch_years],
        alumni_by_year={
            year: _alumni(rows) for year, rows in group_by_year(alumni).items()
        },
        alumni=_alumni(alumni),
    )


@router.get("/batch/{batch_year_id}", response_model=AlumnaBatchResponse)
async def list_alumni_by_batch_year(
    batch_year_id: UUID,
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaBatchResponse:
    """Alumni of one batch year, by surname."""
    alumni = await service.list_by_batch_year(batch_year_id)
    if not alumni:
        raise _not_found("No alumni found for this batch year")
    return AlumnaBatchResponse(
        count=len(alumni),
        batch_year=BatchYearResponse.model_validate(alumni[0].batch_year),
        alumni=_alumni(alumni),
    )


@router.get("/year/{year}", response_model=AlumnaYearResponse)
async def list_alumni_by_year(
    year: int,
    clock: Clock = Depends(get_clock),
    service: AlumnaService = Depends(get_alumna_service),
    batch_year_service: BatchYearService = Depends(get_batch_year_service),
) -> AlumnaYearResponse:
    """Alumni of the batch graduating in ``year``."""
    if year < EARLIEST_BATCH_YEAR or year > clock().year + 10:
        raise _bad_request("Invalid year format. Please provide a valid year (e.g., 1925)")

    batch_year = await batch_year_service.get_by_year(year)
    if not batch_year:
        raise _not_found(f"No batch year found for {year}")

    alumni = await service.list_by_batch_year(batch_year.id)
    if not alumni:
        raise _not_found(f"No alumni found for year {year}")

    return AlumnaYearResponse(
        year=year,
        count=len(alumni),
        batch_year=BatchYearResponse.model_validate(batch_year),
        alumni=_alumni(alumni),
    )


@router.get("/{alumna_id}", response_model=AlumnaDetailResponse)
async def get_alumna(
    alumna_id: UUID,
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaDetailResponse:
    """Get one alumna."""
    alumna = await service.get(alumna_id)
    if not alumna:
        raise _not_found("Alumna not found")
    return AlumnaDetailResponse(data=AlumnaResponse.model_validate(alumna))


@router.post("", response_model=AlumnaDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_alumna(
    data: AlumnaCreate,
    admin: User = Depends(get_current_admin),
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaDetailResponse:
    """Create an alumna (admin only)."""
    try:
        alumna = await service.create(data)
    except UnknownBatchYearError as e:
        raise _bad_request("Batch year not found") from e
    except AlumnaEmailExistsError as e:
        raise _bad_request("Alumna already exists with this email") from e

    logger.info(f"Alumna {alumna.id} created by {admin.username}")
    return AlumnaDetailResponse(data=AlumnaResponse.model_validate(alumna))


@router.put("/{alumna_id}", response_model=AlumnaDetailResponse)
async def update_alumna(
    alumna_id: UUID,
    data: AlumnaUpdate,
    admin: User = Depends(get_current_admin),
    service: AlumnaService = Depends(get_alumna_service),
) -> AlumnaDetailResponse:
    """Update the given fields of an alumna (admin only)."""
    try:
        alumna = await service.update(alumna_id, data)
    except UnknownBatchYearError as e:
        raise _bad_request("Batch year not found") from e
    except AlumnaEmailExistsError as e:
        raise _bad_request("Alumna already exists with this email") from e
    if not alumna:
        raise _not_found("Alumna not found")

    logger.info(f"Alumna {alumna_id} updated by {admin.username}")
    return AlumnaDetailResponse(data=AlumnaResponse.model_validate(alumna))


@router.delete("/{alumna_id}", response_model=MessageResponse)
async def delete_alumna(
    alumna_id: UUID,
    admin: User = Depends(get_current_admin),
    service: AlumnaService = Depends(get_alumna_service),
) -> MessageResponse:
    """Remove an alumna (admin only)."""
    if not await service.delete(alumna_id):
        raise _not_found("Alumna not found")
    logger.info(f"Alumna {alumna_id} removed by {admin.username}")
    return MessageResponse(message="Alumna removed")
