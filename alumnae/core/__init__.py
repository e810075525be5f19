# Alumnae Core Module
from .config import get_settings, settings
from .database import (
    Base,
    UTCDateTime,
    async_session_maker,
    check_db_connection,
    engine,
    get_db,
    init_db,
)
from .logging import setup_logging

__all__ = [
    "settings",
    "get_settings",
    "setup_logging",
    "Base",
    "UTCDateTime",
    "engine",
    "async_session_maker",
    "get_db",
    "init_db",
    "check_db_connection",
]
