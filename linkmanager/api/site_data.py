"""API endpoints for the site configuration record."""

from typing import Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from linkmanager.dependencies import SiteConfigServiceDep
from linkmanager.schemas.site_config import ResultResponse

router = APIRouter()


@router.get("")
def get_site_data(service: SiteConfigServiceDep) -> dict[str, Any]:
    """Return the site configuration, with defaults filled in for missing fields."""
    return service.get_config()


@router.post(
    "",
    response_model=ResultResponse,
    responses={500: {"model": ResultResponse}},
)
def save_site_data(
    service: SiteConfigServiceDep,
    record: dict[str, Any] = Body(...),
):
    """
    Replace the stored site configuration with the request body.

    The body is stored as-is; fields it omits fall back to their defaults on
    the next read.
    """
    if service.save_config(record):
        return ResultResponse(success=True, message="Data saved")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ResultResponse(success=False, message="Failed to save data").model_dump(),
    )
