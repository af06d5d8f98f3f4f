"""Image link manager: site configuration and image upload service."""

__version__ = "1.0.0"
