"""Repository for the site configuration JSON file."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StorageReadFault(Exception):
    """Raised when the stored record cannot be read or parsed."""


class StorageWriteFault(Exception):
    """Raised when a record cannot be written to storage."""


class JsonFileSiteConfigRepository:
    """Stores the site configuration as a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> dict[str, Any] | None:
        """Return the stored record, or None if nothing has been saved yet.

        Raises:
            StorageReadFault: If the file is unreadable, is not valid JSON,
                or does not hold a JSON object.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageReadFault(f"Cannot read {self.path}: {exc}") from exc

        try:
            record = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageReadFault(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(record, dict):
            raise StorageReadFault(
                f"Expected a JSON object in {self.path}, got {type(record).__name__}"
            )
        return record

    def write(self, record: dict[str, Any]) -> None:
        """Replace the stored record with *record*, verbatim.

        Raises:
            StorageWriteFault: If the record holds NaN or Infinity, which
                standard JSON cannot represent, or the file cannot be written.
                The previous content is left untouched either way.
        """
        try:
            payload = json.dumps(record, indent=2, ensure_ascii=False, allow_nan=False)
        except ValueError as exc:
            raise StorageWriteFault(f"Record is not valid JSON: {exc}") from exc
        try:
            self.path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise StorageWriteFault(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Wrote site config to %s (%d bytes)", self.path, len(payload))
