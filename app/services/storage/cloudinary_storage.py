"""
Cloudinary storage implementation.

This module provides a Cloudinary-based image store for production use.
Offers automatic image optimization and CDN delivery.
"""

from asyncio import get_event_loop
from functools import partial
from logging import getLogger
from uuid import uuid4

from cloudinary import config
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.uploader import destroy, upload

from app.configs import file_logger, settings
from app.errors.upload import StorageError
from app.schemas.post import UploadedImage

logger = file_logger(getLogger(__name__))


class CloudinaryStorage:
    """
    Cloudinary storage implementation.

    Stores post thumbnails and inline images in Cloudinary with automatic
    quality and format optimization.
    """

    def __init__(self) -> None:
        """Initialize Cloudinary with configured credentials."""
        config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )
        self.folder = settings.CLOUDINARY_FOLDER

    def _get_public_id(self, image_id: str) -> str:
        """
        Get the Cloudinary public ID for a new image.

        Args:
            image_id: Unique identifier for the image

        Returns:
            str: Cloudinary public ID
        """
        return f"{self.folder}/{image_id}"

    async def upload_image(self, file_data: bytes, content_type: str) -> UploadedImage:
        """
        Upload an image to Cloudinary.

        Args:
            file_data: Raw image bytes
            content_type: MIME type of the image

        Returns:
            UploadedImage: Secure URL and Cloudinary public ID

        Raises:
            StorageError: If Cloudinary rejects the upload
        """
        public_id = self._get_public_id(str(uuid4()))

        # Run blocking Cloudinary upload in thread pool
        loop = get_event_loop()
        try:
            result = await loop.run_in_executor(
                None,
                partial(
                    upload,
                    file_data,
                    public_id=public_id,
                    overwrite=False,
                    resource_type="image",
                    transformation=[
                        {"quality": "auto:good"},
                        {"fetch_format": "auto"},
                    ],
                ),
            )
        except CloudinaryError as e:
            logger.exception("Cloudinary upload failed")
            raise StorageError from e

        logger.info(f"Uploaded image {result['public_id']} ({content_type})")
        return UploadedImage(url=result["secure_url"], public_id=result["public_id"])

    async def destroy_image(self, public_id: str) -> bool:
        """
        Delete an image from Cloudinary.

        Args:
            public_id: Cloudinary public ID

        Returns:
            bool: True if Cloudinary answered ``result == "ok"``
        """
        loop = get_event_loop()
        try:
            result = await loop.run_in_executor(
                None,
                partial(destroy, public_id, resource_type="image"),
            )
        except CloudinaryError:
            logger.exception(f"Cloudinary destroy failed for {public_id}")
            return False

        deleted = result.get("result") == "ok"
        if not deleted:
            logger.warning(f"Cloudinary did not delete {public_id}: {result}")
        return deleted
