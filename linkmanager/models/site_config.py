"""Built-in values for the site configuration record."""

from typing import Any

SITE_CONFIG_DEFAULTS: dict[str, Any] = {
    "text": (
        "Welcome to our image link platform! Click the image below to visit the "
        "linked site. Administrators can edit this text, upload an image and set "
        "the link."
    ),
    "fontSize": "20px",
    "fontColor": "#333",
    "imageUrl": (
        "https://images.unsplash.com/photo-1506905925346-21bda4d32df4"
        "?ixlib=rb-4.0.3&ixid=M3wxMjA3fDB8MHxwaG90by1wYWdlfHx8fGVufDB8fHx8fA%3D%3D"
        "&auto=format&fit=crop&w=1000&q=80"
    ),
    "linkUrl": "https://example.com",
    "adminPassword": "admin123",
}
