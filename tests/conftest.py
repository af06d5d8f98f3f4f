"""Shared test fixtures for the image link manager."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from linkmanager.config import Settings
from linkmanager.main import create_application
from tests.helpers.fakes import InMemorySiteConfigRepository, InMemoryUploadStorage

# Smallest valid PNG: 1x1 transparent pixel
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000001e221bc330000000049454e44ae426082"
)


def make_settings(root: Path, **overrides) -> Settings:
    """Settings rooted in *root*, ignoring any .env file in the working directory."""
    values = {
        "data_file": root / "siteData.json",
        "public_dir": root / "public",
        "rate_limit_enabled": False,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


# ---------------------------------------------------------------------------
# Settings / application
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every store at a temporary directory."""
    return make_settings(tmp_path)


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    return create_application(settings)


@pytest_asyncio.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the FastAPI app (real filesystem stores)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# In-memory stores
# ---------------------------------------------------------------------------


@pytest.fixture()
def config_repo() -> InMemorySiteConfigRepository:
    return InMemorySiteConfigRepository()


@pytest.fixture()
def upload_storage() -> InMemoryUploadStorage:
    return InMemoryUploadStorage()
