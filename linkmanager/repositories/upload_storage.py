"""Local-directory storage for uploaded assets."""

import logging
from collections.abc import Iterable
from pathlib import Path

from linkmanager.repositories.site_config_repository import StorageWriteFault

logger = logging.getLogger(__name__)


class LocalUploadStorage:
    """Writes uploaded files into a single flat directory."""

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def ensure_dir(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def save(self, name: str, chunks: Iterable[bytes]) -> int:
        """Write *chunks* to ``<base_dir>/<name>`` and return the byte count.

        An existing file of the same name is overwritten. If anything fails
        part-way (including an exception raised by *chunks* itself) the
        partial file is removed before the error propagates.

        Raises:
            StorageWriteFault: On filesystem errors.
        """
        path = self.base_dir / name
        written = 0
        try:
            with path.open("wb") as fh:
                for chunk in chunks:
                    fh.write(chunk)
                    written += len(chunk)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise StorageWriteFault(f"Cannot write upload {path}: {exc}") from exc
        except Exception:
            path.unlink(missing_ok=True)
            raise
        return written
