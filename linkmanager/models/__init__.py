"""Site configuration model package."""

from linkmanager.models.site_config import SITE_CONFIG_DEFAULTS

__all__ = [
    "SITE_CONFIG_DEFAULTS",
]
