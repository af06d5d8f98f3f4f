"""Protocol definitions for storage interfaces.

These protocols enable in-memory fakes in tests and decouple the service
layer from the concrete filesystem implementations.
"""

from collections.abc import Iterable
from typing import Any, Protocol


class SiteConfigRepositoryProtocol(Protocol):
    """Interface for the persisted site configuration record."""

    def read(self) -> dict[str, Any] | None: ...

    def write(self, record: dict[str, Any]) -> None: ...


class UploadStorageProtocol(Protocol):
    """Interface for uploaded asset storage."""

    def save(self, name: str, chunks: Iterable[bytes]) -> int: ...
