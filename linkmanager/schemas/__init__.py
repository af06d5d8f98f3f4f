"""Pydantic schemas package."""
from linkmanager.schemas.site_config import HealthResponse, ResultResponse, UploadResponse

__all__ = [
    "HealthResponse",
    "ResultResponse",
    "UploadResponse",
]
