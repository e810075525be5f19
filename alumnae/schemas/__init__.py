# Alumnae Pydantic Schemas
from alumnae.schemas.alumna import (
    AlumnaCreate,
    AlumnaDetailResponse,
    AlumnaListResponse,
    AlumnaResponse,
    AlumnaUpdate,
)
from alumnae.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileResponse,
    RegisterRequest,
    SessionUser,
    UserProfile,
)
from alumnae.schemas.batch_year import (
    BatchYearCreate,
    BatchYearCreatedResponse,
    BatchYearListResponse,
    BatchYearResponse,
)
from alumnae.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventListResponse,
    EventResponse,
    EventUpdate,
)

__all__ = [
    "AlumnaCreate",
    "AlumnaDetailResponse",
    "AlumnaListResponse",
    "AlumnaResponse",
    "AlumnaUpdate",
    "AuthResponse",
    "BatchYearCreate",
    "BatchYearCreatedResponse",
    "BatchYearListResponse",
    "BatchYearResponse",
    "ChangePasswordRequest",
    "EventCreate",
    "EventDetailResponse",
    "EventListResponse",
    "EventResponse",
    "EventUpdate",
    "LoginRequest",
    "MessageResponse",
    "ProfileResponse",
    "RegisterRequest",
    "SessionUser",
    "UserProfile",
]
