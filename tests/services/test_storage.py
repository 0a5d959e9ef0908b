# tests/services/test_storage.py
"""Tests for storage services."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from cloudinary.exceptions import Error as CloudinaryError

from app.errors.upload import StorageError
from app.services.storage import (
    CloudinaryStorage,
    LocalStorage,
    get_storage_service,
)


class TestLocalStorage:
    """Tests for LocalStorage service."""

    @pytest.fixture
    def temp_uploads_dir(self) -> Generator[Path]:
        """Create a temporary uploads directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def local_storage(self, temp_uploads_dir: Path) -> LocalStorage:
        """Create a LocalStorage instance with temp directory."""
        with patch("app.services.storage.local.settings") as mock_settings:
            mock_settings.UPLOADS_DIR = temp_uploads_dir
            return LocalStorage()

    @pytest.mark.asyncio
    async def test_upload_writes_file(
        self,
        local_storage: LocalStorage,
        temp_uploads_dir: Path,
        valid_png_bytes: bytes,
    ) -> None:
        image = await local_storage.upload_image(valid_png_bytes, "image/png")

        assert image.public_id.startswith("images/")
        assert image.public_id.endswith(".png")
        assert image.url == f"/uploads/{image.public_id}"
        stored = temp_uploads_dir / image.public_id
        assert stored.read_bytes() == valid_png_bytes

    @pytest.mark.asyncio
    async def test_unknown_content_type_defaults_to_jpg(
        self,
        local_storage: LocalStorage,
        valid_jpeg_bytes: bytes,
    ) -> None:
        image = await local_storage.upload_image(valid_jpeg_bytes, "image/unknown")

        assert image.public_id.endswith(".jpg")

    @pytest.mark.asyncio
    async def test_destroy_existing(
        self,
        local_storage: LocalStorage,
        temp_uploads_dir: Path,
        valid_jpeg_bytes: bytes,
    ) -> None:
        image = await local_storage.upload_image(valid_jpeg_bytes, "image/jpeg")

        assert await local_storage.destroy_image(image.public_id) is True
        assert not (temp_uploads_dir / image.public_id).exists()

    @pytest.mark.asyncio
    async def test_destroy_missing_returns_false(self, local_storage: LocalStorage) -> None:
        assert await local_storage.destroy_image("images/nope.jpg") is False

    @pytest.mark.asyncio
    async def test_destroy_cannot_escape_uploads_dir(
        self,
        local_storage: LocalStorage,
        temp_uploads_dir: Path,
    ) -> None:
        outside = temp_uploads_dir / "keep.txt"
        outside.write_text("keep")

        assert await local_storage.destroy_image("../keep.txt") is False
        assert outside.exists()


class TestCloudinaryStorage:
    """Tests for CloudinaryStorage with the SDK patched out."""

    @pytest.fixture
    def storage(self) -> CloudinaryStorage:
        with patch("app.services.storage.cloudinary_storage.config"):
            return CloudinaryStorage()

    @pytest.mark.asyncio
    async def test_upload_returns_secure_url_and_public_id(
        self,
        storage: CloudinaryStorage,
        valid_jpeg_bytes: bytes,
    ) -> None:
        result = {"secure_url": "https://res.cloudinary.com/x.jpg", "public_id": "blog/thumbnails/x"}
        with patch(
            "app.services.storage.cloudinary_storage.upload",
            return_value=result,
        ) as mock_upload:
            image = await storage.upload_image(valid_jpeg_bytes, "image/jpeg")

        assert image.url == "https://res.cloudinary.com/x.jpg"
        assert image.public_id == "blog/thumbnails/x"
        args, kwargs = mock_upload.call_args
        assert args[0] == valid_jpeg_bytes
        assert kwargs["public_id"].startswith(f"{storage.folder}/")
        assert kwargs["resource_type"] == "image"

    @pytest.mark.asyncio
    async def test_upload_failure_raises_storage_error(
        self,
        storage: CloudinaryStorage,
        valid_jpeg_bytes: bytes,
    ) -> None:
        with (
            patch(
                "app.services.storage.cloudinary_storage.upload",
                side_effect=CloudinaryError("boom"),
            ),
            pytest.raises(StorageError),
        ):
            await storage.upload_image(valid_jpeg_bytes, "image/jpeg")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("response", "expected"),
        [({"result": "ok"}, True), ({"result": "not found"}, False), ({}, False)],
    )
    async def test_destroy_reports_confirmation(
        self,
        storage: CloudinaryStorage,
        response: dict,
        expected: bool,
    ) -> None:
        with patch(
            "app.services.storage.cloudinary_storage.destroy",
            return_value=response,
        ) as mock_destroy:
            assert await storage.destroy_image("blog/thumbnails/x") is expected

        mock_destroy.assert_called_once_with("blog/thumbnails/x", resource_type="image")

    @pytest.mark.asyncio
    async def test_destroy_sdk_error_returns_false(self, storage: CloudinaryStorage) -> None:
        with patch(
            "app.services.storage.cloudinary_storage.destroy",
            side_effect=CloudinaryError("boom"),
        ):
            assert await storage.destroy_image("blog/thumbnails/x") is False


class TestGetStorageService:
    def test_local_provider(self) -> None:
        with patch("app.services.storage.settings") as mock_settings:
            mock_settings.STORAGE_PROVIDER = "local"
            assert isinstance(get_storage_service(), LocalStorage)

    def test_cloudinary_provider(self) -> None:
        with (
            patch("app.services.storage.settings") as mock_settings,
            patch("app.services.storage.cloudinary_storage.config"),
        ):
            mock_settings.STORAGE_PROVIDER = "cloudinary"
            assert isinstance(get_storage_service(), CloudinaryStorage)
