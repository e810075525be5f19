"""Pydantic schemas for alumna profiles."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from alumnae.schemas.auth import EMAIL_PATTERN
from alumnae.schemas.batch_year import BatchYearResponse

Prefix = Literal["Ms.", "Mrs.", "Mr.", "Dr.", "Prof.", "Atty.", "Eng.", "Sr."]


class AlumnaInput(BaseModel):
    """Shared input normalization for create and update requests."""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator(
        "first_name", "middle_name", "last_name", "contact_number",
        mode="before", check_fields=False,
    )
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class AlumnaCreate(AlumnaInput):
    """Schema for creating an alumna. ``batchYear`` is the batch year's id."""

    prefix: Prefix = "Ms."
    first_name: str = Field(..., min_length=1, max_length=100, alias="firstName")
    middle_name: str | None = Field(None, max_length=100, alias="middleName")
    last_name: str = Field(..., min_length=1, max_length=100, alias="lastName")
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    contact_number: str | None = Field(None, max_length=30, alias="contactNumber")
    batch_year_id: UUID = Field(..., alias="batchYear")
    student_picture: str = Field("", max_length=500, alias="studentPicture")
    current_picture: str = Field("", max_length=500, alias="currentPicture")


class AlumnaUpdate(AlumnaInput):
    """Schema for a partial alumna update. Omitted fields are left unchanged."""

    prefix: Prefix | None = None
    first_name: str | None = Field(None, min_length=1, max_length=100, alias="firstName")
    middle_name: str | None = Field(None, max_length=100, alias="middleName")
    last_name: str | None = Field(None, min_length=1, max_length=100, alias="lastName")
    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    contact_number: str | None = Field(None, max_length=30, alias="contactNumber")
    batch_year_id: UUID | None = Field(None, alias="batchYear")
    student_picture: str | None = Field(None, max_length=500, alias="studentPicture")
    current_picture: str | None = Field(None, max_length=500, alias="currentPicture")

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "AlumnaUpdate":
        for name in (
            "prefix", "first_name", "last_name", "batch_year_id",
            "student_picture", "current_picture",
        ):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class AlumnaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    prefix: str
    first_name: str = Field(serialization_alias="firstName")
    middle_name: str | None = Field(serialization_alias="middleName")
    last_name: str = Field(serialization_alias="lastName")
    email: str | None
    contact_number: str | None = Field(serialization_alias="contactNumber")
    batch_year: BatchYearResponse = Field(serialization_alias="batchYear")
    student_picture: str = Field(serialization_alias="studentPicture")
    current_picture: str = Field(serialization_alias="currentPicture")
    created_at: datetime = Field(serialization_alias="dateCreated")


class AlumnaListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[AlumnaResponse]


class AlumnaDetailResponse(BaseModel):
    success: bool = True
    data: AlumnaResponse


class AlumnaGroupedResponse(BaseModel):
    """Alumni keyed by graduating year."""

    success: bool = True
    data: dict[int, list[AlumnaResponse]]


class AlumnaFilterResponse(BaseModel):
    success: bool = True
    count: int
    alumni: list[AlumnaResponse]


class AlumnaSearchResponse(AlumnaFilterResponse):
    search_term: str = Field(serialization_alias="searchTerm")


class AlumnaBatchResponse(AlumnaFilterResponse):
    batch_year: BatchYearResponse = Field(serialization_alias="batchYear")


class AlumnaYearResponse(AlumnaBatchResponse):
    year: int


class YearRange(BaseModel):
    year_from: int = Field(serialization_alias="from")
    year_to: int = Field(serialization_alias="to")


class AlumnaYearRangeResponse(BaseModel):
    """Alumni of every batch year in a range, flat and grouped by year."""

    success: bool = True
    year_range: YearRange = Field(serialization_alias="yearRange")
    total_count: int = Field(serialization_alias="totalCount")
    batch_years: list[BatchYearResponse] = Field(serialization_alias="batchYears")
    alumni_by_year: dict[int, list[AlumnaResponse]] = Field(serialization_alias="alumniByYear")
    alumni: list[AlumnaResponse]
