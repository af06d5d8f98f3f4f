"""Filesystem-backed storage."""
from linkmanager.repositories.site_config_repository import (
    JsonFileSiteConfigRepository,
    StorageReadFault,
    StorageWriteFault,
)
from linkmanager.repositories.upload_storage import LocalUploadStorage

__all__ = [
    "JsonFileSiteConfigRepository",
    "LocalUploadStorage",
    "StorageReadFault",
    "StorageWriteFault",
]
