"""
Local filesystem storage implementation.

This module provides a local image store for development and testing
purposes. Files are stored in the local filesystem.
"""

from pathlib import Path
from uuid import uuid4

import aiofiles

from app.configs.settings import settings
from app.schemas.post import UploadedImage


class LocalStorage:
    """
    Local filesystem storage implementation.

    Stores images under the configured uploads directory. Suitable for
    development and testing.
    """

    folder = "images"

    def __init__(self) -> None:
        """Initialize local storage with configured paths."""
        self.uploads_dir = settings.UPLOADS_DIR
        self.base_path = self.uploads_dir / self.folder
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the upload directory exists."""
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_extension_from_content_type(self, content_type: str) -> str:
        """
        Get file extension from content type.

        Args:
            content_type: MIME type of the image

        Returns:
            str: File extension
        """
        extensions = {
            "image/jpeg": "jpg",
            "image/png": "png",
            "image/webp": "webp",
            "image/gif": "gif",
        }
        return extensions.get(content_type, "jpg")

    def _get_file_path(self, public_id: str) -> Path:
        # public ids look like "images/<uuid>.<ext>"; never leave the uploads dir
        return self.uploads_dir / self.folder / Path(public_id).name

    async def upload_image(self, file_data: bytes, content_type: str) -> UploadedImage:
        """
        Write an image to the local filesystem.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image

        Returns:
            UploadedImage: URL path for serving via static files and the
            relative path used as deletion handle
        """
        extension = self._get_extension_from_content_type(content_type)
        file_name = f"{uuid4()}.{extension}"
        file_path = self.base_path / file_name

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file_data)

        public_id = f"{self.folder}/{file_name}"
        return UploadedImage(url=f"/uploads/{public_id}", public_id=public_id)

    async def destroy_image(self, public_id: str) -> bool:
        """
        Delete an image from the local filesystem.

        Args:
            public_id: Relative path returned by `upload_image`

        Returns:
            bool: True if the file existed and was removed
        """
        file_path = self._get_file_path(public_id)
        if file_path.exists():
            file_path.unlink()
            return True
        return False
