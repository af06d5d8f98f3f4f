"""Service layer for the site configuration record."""

import logging
from typing import Any

from linkmanager.models.site_config import SITE_CONFIG_DEFAULTS
from linkmanager.repositories.protocols import SiteConfigRepositoryProtocol
from linkmanager.repositories.site_config_repository import (
    StorageReadFault,
    StorageWriteFault,
)

logger = logging.getLogger(__name__)


class SiteConfigService:
    """Read/merge/write cycle for the singleton site configuration."""

    def __init__(self, repo: SiteConfigRepositoryProtocol):
        self._repo = repo

    def get_config(self) -> dict[str, Any]:
        """Return the stored record merged over the built-in defaults.

        Each stored field overrides its default; stored fields unknown to the
        defaults pass through. A missing or unreadable record yields the
        defaults.
        """
        try:
            stored = self._repo.read()
        except StorageReadFault:
            logger.warning("Failed to read site config, using defaults", exc_info=True)
            stored = None

        if stored is None:
            return dict(SITE_CONFIG_DEFAULTS)
        return {**SITE_CONFIG_DEFAULTS, **stored}

    def save_config(self, record: dict[str, Any]) -> bool:
        """Replace the stored record with *record*. Returns False on a storage fault."""
        try:
            self._repo.write(record)
        except StorageWriteFault:
            logger.exception("Failed to save site config")
            return False
        logger.info("Site config saved (%d fields)", len(record))
        return True
