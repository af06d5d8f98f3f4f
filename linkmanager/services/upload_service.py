"""Service layer for image uploads."""

import os
import random
import time
from collections.abc import Callable, Iterator
from typing import BinaryIO

from linkmanager.config import MAX_UPLOAD_BYTES
from linkmanager.repositories.protocols import UploadStorageProtocol

UPLOAD_URL_PREFIX = "/uploads"
CHUNK_SIZE = 64 * 1024


class UploadError(Exception):
    """Base class for rejected uploads."""

    status_code = 400
    message = "Upload rejected"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NoFileProvided(UploadError):
    message = "No file uploaded"


class UploadValidationError(UploadError):
    message = "Only image files are allowed"


class SizeLimitExceeded(UploadError):
    status_code = 413

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"File exceeds the upload limit of {limit} bytes")


class UploadService:
    """Accepts image uploads and stores them under generated names."""

    def __init__(
        self,
        storage: UploadStorageProtocol,
        max_bytes: int = MAX_UPLOAD_BYTES,
        *,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ):
        self._storage = storage
        self._max_bytes = max_bytes
        self._clock = clock
        self._rng = rng or random.Random()

    def generate_filename(self, field_name: str, original_name: str) -> str:
        """Build ``<field>-<epoch ms>-<random 0..1e9><ext>``."""
        ext = os.path.splitext(os.path.basename(original_name))[1]
        timestamp_ms = int(self._clock() * 1000)
        suffix = self._rng.randint(0, 10**9)
        return f"{field_name}-{timestamp_ms}-{suffix}{ext}"

    def _limited_chunks(self, stream: BinaryIO) -> Iterator[bytes]:
        total = 0
        while chunk := stream.read(CHUNK_SIZE):
            total += len(chunk)
            if total > self._max_bytes:
                raise SizeLimitExceeded(self._max_bytes)
            yield chunk

    def accept_upload(
        self,
        stream: BinaryIO | None,
        content_type: str | None,
        filename: str | None,
        field_name: str = "image",
    ) -> str:
        """Store an uploaded image and return its ``/uploads/<name>`` path.

        Raises:
            NoFileProvided: If no file accompanies the request.
            UploadValidationError: If the declared type is not ``image/*``.
            SizeLimitExceeded: If the body is larger than the ceiling.
            StorageWriteFault: If the file cannot be written.
        """
        if stream is None or not filename:
            raise NoFileProvided()
        if not (content_type or "").startswith("image/"):
            raise UploadValidationError()

        name = self.generate_filename(field_name, filename)
        self._storage.save(name, self._limited_chunks(stream))
        return f"{UPLOAD_URL_PREFIX}/{name}"
