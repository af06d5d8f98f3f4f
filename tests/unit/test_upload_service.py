"""Unit tests for UploadService and LocalUploadStorage."""

import io
import re

import pytest

from linkmanager.config import MAX_UPLOAD_BYTES
from linkmanager.repositories.site_config_repository import StorageWriteFault
from linkmanager.repositories.upload_storage import LocalUploadStorage
from linkmanager.services.upload_service import (
    NoFileProvided,
    SizeLimitExceeded,
    UploadService,
    UploadValidationError,
)
from tests.conftest import PNG_BYTES

FILENAME_RE = re.compile(r"^image-(\d+)-(\d+)\.png$")


class _FixedRandom:
    """Stands in for random.Random, always drawing the same number."""

    def __init__(self, value: int):
        self.value = value

    def randint(self, a: int, b: int) -> int:
        return self.value


@pytest.fixture()
def service(upload_storage):
    return UploadService(upload_storage)


# ======================================================================
# Filename generation
# ======================================================================


class TestGenerateFilename:
    def test_format(self):
        service = UploadService(
            LocalUploadStorage("unused"),
            clock=lambda: 1700000000.5,
            rng=_FixedRandom(123456789),
        )
        assert service.generate_filename("image", "cat.png") == "image-1700000000500-123456789.png"

    def test_random_part_within_range(self, service):
        for _ in range(50):
            match = FILENAME_RE.match(service.generate_filename("image", "a.png"))
            assert match is not None
            assert 0 <= int(match.group(2)) <= 10**9

    @pytest.mark.parametrize(
        ("original", "suffix"),
        [
            ("photo.JPG", ".JPG"),
            ("archive.tar.gz", ".gz"),
            ("noext", ""),
            ("../../etc/evil.png", ".png"),
        ],
    )
    def test_keeps_original_extension_only(self, service, original, suffix):
        name = service.generate_filename("image", original)
        assert name.endswith(suffix)
        assert "/" not in name
        assert name.startswith("image-")

    def test_uses_field_name(self, service):
        assert service.generate_filename("logo", "a.png").startswith("logo-")


# ======================================================================
# accept_upload
# ======================================================================


class TestAcceptUpload:
    def test_stores_file_and_returns_upload_path(self, service, upload_storage):
        url = service.accept_upload(io.BytesIO(PNG_BYTES), "image/png", "cat.png")

        assert url.startswith("/uploads/")
        name = url.removeprefix("/uploads/")
        assert FILENAME_RE.match(name)
        assert upload_storage.files == {name: PNG_BYTES}

    @pytest.mark.parametrize(
        "content_type",
        ["text/plain", "application/octet-stream", "application/pdf", "", None, "Image/png"],
    )
    def test_rejects_non_image_types_regardless_of_content(
        self, service, upload_storage, content_type
    ):
        with pytest.raises(UploadValidationError):
            service.accept_upload(io.BytesIO(PNG_BYTES), content_type, "cat.png")
        assert upload_storage.files == {}

    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/svg+xml", "image/webp"])
    def test_accepts_any_image_subtype(self, service, content_type):
        assert service.accept_upload(io.BytesIO(b"x"), content_type, "a.img")

    def test_rejects_missing_stream(self, service):
        with pytest.raises(NoFileProvided):
            service.accept_upload(None, "image/png", "cat.png")

    def test_rejects_missing_filename(self, service):
        with pytest.raises(NoFileProvided):
            service.accept_upload(io.BytesIO(PNG_BYTES), "image/png", "")

    def test_missing_file_checked_before_type(self, service):
        with pytest.raises(NoFileProvided):
            service.accept_upload(None, "text/plain", None)

    def test_accepts_exactly_the_limit(self, service, upload_storage):
        service.accept_upload(io.BytesIO(b"\0" * MAX_UPLOAD_BYTES), "image/jpeg", "big.jpg")
        assert [len(v) for v in upload_storage.files.values()] == [MAX_UPLOAD_BYTES]

    def test_rejects_over_the_limit(self, service, upload_storage):
        with pytest.raises(SizeLimitExceeded) as exc_info:
            service.accept_upload(
                io.BytesIO(b"\0" * (MAX_UPLOAD_BYTES + 1)), "image/jpeg", "big.jpg"
            )
        assert exc_info.value.status_code == 413
        assert upload_storage.files == {}

    def test_custom_limit(self, upload_storage):
        service = UploadService(upload_storage, max_bytes=10)
        with pytest.raises(SizeLimitExceeded):
            service.accept_upload(io.BytesIO(b"x" * 11), "image/png", "a.png")

    def test_uploads_a_millisecond_apart_get_distinct_names(self, upload_storage):
        times = iter([1700000000.25, 1700000000.5])
        service = UploadService(upload_storage, clock=lambda: next(times), rng=_FixedRandom(7))

        first = service.accept_upload(io.BytesIO(b"one"), "image/png", "same.png")
        second = service.accept_upload(io.BytesIO(b"two"), "image/png", "same.png")

        assert first != second
        assert sorted(upload_storage.files.values()) == [b"one", b"two"]


# ======================================================================
# LocalUploadStorage
# ======================================================================


class TestLocalUploadStorage:
    def test_writes_file(self, tmp_path):
        storage = LocalUploadStorage(tmp_path)
        assert storage.save("a.png", [b"ab", b"cd"]) == 4
        assert (tmp_path / "a.png").read_bytes() == b"abcd"

    def test_ensure_dir_creates_nested_directory(self, tmp_path):
        storage = LocalUploadStorage(tmp_path / "public" / "uploads")
        storage.ensure_dir()
        assert storage.base_dir.is_dir()

    def test_oversize_upload_leaves_no_partial_file(self, tmp_path):
        service = UploadService(LocalUploadStorage(tmp_path), max_bytes=100 * 1024)
        with pytest.raises(SizeLimitExceeded):
            service.accept_upload(io.BytesIO(b"\0" * (300 * 1024)), "image/jpeg", "big.jpg")
        assert list(tmp_path.iterdir()) == []

    def test_missing_directory_raises_write_fault(self, tmp_path):
        storage = LocalUploadStorage(tmp_path / "missing")
        with pytest.raises(StorageWriteFault):
            storage.save("a.png", [b"data"])
