# Alumnae API
from alumnae.api.router import api_router

__all__ = ["api_router"]
