"""Alumnae API Router - aggregates all API routes."""

from fastapi import APIRouter

from alumnae.api import alumni, auth, batch_years, events

# Main API router - all routes will be prefixed with /api
api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router)
api_router.include_router(batch_years.router)
api_router.include_router(alumni.router)
api_router.include_router(events.router)
