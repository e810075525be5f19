# Alumnae Models
from alumnae.models.alumna import Alumna
from alumnae.models.base import BaseModel
from alumnae.models.batch_year import BatchYear
from alumnae.models.event import Event
from alumnae.models.token_blacklist import TokenBlacklist
from alumnae.models.user import User

__all__ = [
    "Alumna",
    "BaseModel",
    "BatchYear",
    "Event",
    "TokenBlacklist",
    "User",
]
