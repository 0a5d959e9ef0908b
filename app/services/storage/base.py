"""
Base storage protocol for image hosting.

This module defines the interface for image store backends, allowing for
different implementations (cloudinary, local filesystem, ...).
"""

from abc import abstractmethod
from typing import Protocol

from app.schemas.post import UploadedImage


class StorageService(Protocol):
    """
    Protocol defining the interface for image stores.

    All storage implementations must implement these methods
    to ensure consistent behavior across different backends.
    """

    @abstractmethod
    async def upload_image(self, file_data: bytes, content_type: str) -> UploadedImage:
        """
        Upload an image.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image

        Returns:
            UploadedImage: Durable URL plus the handle needed to delete it
        """
        ...

    @abstractmethod
    async def destroy_image(self, public_id: str) -> bool:
        """
        Delete an image by its handle.

        Args:
            public_id: Handle returned by `upload_image`

        Returns:
            bool: True only if the store confirmed the deletion
        """
        ...
