"""
Media upload service.

This module validates uploaded images (thumbnails and inline post images)
and hands them to the configured image store.
"""

from io import BytesIO

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from app.configs.settings import settings
from app.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    UnsupportedImageTypeError,
)
from app.schemas.post import UploadedImage
from app.services.storage import StorageService, get_storage_service


class MediaService:
    """
    Service for managing post image uploads.

    Handles image validation and storage operations.
    """

    def __init__(self, storage: StorageService | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional storage service instance. If not provided,
                    the default storage service will be used.
        """
        self.storage = storage or get_storage_service()

        self.image_max_size_bytes = settings.MEDIA_IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.image_allowed_types = settings.MEDIA_IMAGE_ALLOWED_TYPES

    def _validate_image_type(self, content_type: str | None) -> None:
        """Validate image content type."""
        if not content_type or content_type not in self.image_allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.image_allowed_types,
            )

    def _validate_image_size(self, file_data: bytes) -> None:
        """Validate image file size."""
        actual_size = len(file_data)
        if actual_size > self.image_max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MEDIA_IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def _validate_image_content(self, file_data: bytes) -> None:
        """Validate that the file is a decodable image."""
        try:
            with Image.open(BytesIO(file_data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e

    async def validate_image(self, file: UploadFile) -> tuple[bytes, str]:
        """
        Read and validate an uploaded image.

        Args:
            file: Uploaded file

        Returns:
            tuple[bytes, str]: Raw image bytes and their content type

        Raises:
            UnsupportedImageTypeError: If the MIME type is not accepted
            ImageTooLargeError: If the file exceeds the size limit
            InvalidImageError: If the bytes do not decode as an image
        """
        self._validate_image_type(file.content_type)
        file_data = await file.read()
        self._validate_image_size(file_data)
        self._validate_image_content(file_data)
        return file_data, file.content_type

    async def upload_image(self, file: UploadFile) -> UploadedImage:
        """
        Validate an uploaded image and store it.

        Args:
            file: Uploaded file

        Returns:
            UploadedImage: URL and deletion handle issued by the store
        """
        file_data, content_type = await self.validate_image(file)
        return await self.store_image(file_data, content_type)

    async def store_image(self, file_data: bytes, content_type: str) -> UploadedImage:
        """Store already validated image bytes."""
        return await self.storage.upload_image(file_data, content_type)

    async def destroy_image(self, public_id: str) -> bool:
        """
        Delete a previously stored image.

        Args:
            public_id: Handle issued when the image was stored

        Returns:
            bool: True if the store confirmed the deletion
        """
        return await self.storage.destroy_image(public_id)
