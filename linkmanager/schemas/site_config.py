"""Pydantic schemas for API responses."""

from pydantic import BaseModel


class ResultResponse(BaseModel):
    """Outcome of a write-style request."""

    success: bool
    message: str


class UploadResponse(ResultResponse):
    """Response schema for a stored image."""

    imageUrl: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
