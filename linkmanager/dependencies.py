"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends, Request

from linkmanager.config import Settings
from linkmanager.repositories.site_config_repository import JsonFileSiteConfigRepository
from linkmanager.repositories.upload_storage import LocalUploadStorage
from linkmanager.services.site_config_service import SiteConfigService
from linkmanager.services.upload_service import UploadService

# ---------------------------------------------------------------------------
# Factories: build the stores kept on app.state
# ---------------------------------------------------------------------------


def create_site_config_repository(settings: Settings) -> JsonFileSiteConfigRepository:
    """Create the JSON-file backed site config store."""
    return JsonFileSiteConfigRepository(settings.data_file)


def create_upload_storage(settings: Settings) -> LocalUploadStorage:
    """Create the upload store and make sure its directory exists."""
    storage = LocalUploadStorage(settings.upload_dir)
    storage.ensure_dir()
    return storage


# ---------------------------------------------------------------------------
# FastAPI dependencies: pull stores from app.state
# ---------------------------------------------------------------------------


def get_site_config_service(request: Request) -> SiteConfigService:
    return SiteConfigService(request.app.state.site_config_repository)


def get_upload_service(request: Request) -> UploadService:
    settings: Settings = request.app.state.settings
    return UploadService(request.app.state.upload_storage, settings.max_upload_bytes)


# ---------------------------------------------------------------------------
# Type aliases for cleaner dependency injection
# ---------------------------------------------------------------------------
SiteConfigServiceDep = Annotated[SiteConfigService, Depends(get_site_config_service)]
UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
