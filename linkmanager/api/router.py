"""API router aggregation."""

from fastapi import APIRouter

from linkmanager.api import site_data, upload

api_router = APIRouter()

api_router.include_router(site_data.router, prefix="/data", tags=["Site data"])
api_router.include_router(upload.router, prefix="/upload", tags=["Upload"])
