# Alumnae Services
from alumnae.services.alumna import AlumnaService
from alumnae.services.auth import AuthService, TokenIssuer
from alumnae.services.batch_year import BatchYearService
from alumnae.services.event import EventService
from alumnae.services.lockout import LockoutPolicy
from alumnae.services.session_guard import SessionGuard
from alumnae.services.token_blacklist import TokenBlacklistService

__all__ = [
    "AlumnaService",
    "AuthService",
    "BatchYearService",
    "EventService",
    "LockoutPolicy",
    "SessionGuard",
    "TokenBlacklistService",
    "TokenIssuer",
]
