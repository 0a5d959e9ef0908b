"""
Upload-related error classes.

This module defines custom exceptions for thumbnail and image uploads,
including image validation and storage errors.
"""

from logging import getLogger

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class UploadError(BaseAppError):
    """Base exception for upload-related errors."""

    def __init__(
        self,
        detail: str = "We couldn't upload your file. Please try again.",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ImageTooLargeError(UploadError):
    """Exception raised when uploaded image exceeds size limit."""

    def __init__(
        self,
        max_size_mb: int = 5,
        actual_size_mb: float | None = None,
    ) -> None:
        detail = f"Your image is too large. Please use an image smaller than {max_size_mb}MB."
        if actual_size_mb is not None:
            detail += f" Your file is {actual_size_mb:.1f}MB."
        super().__init__(detail=detail, status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """Exception raised when uploaded file is not an accepted image type."""

    def __init__(
        self,
        content_type: str,
        allowed_types: list[str] | None = None,
    ) -> None:
        allowed = allowed_types or ["image/jpeg", "image/png", "image/webp", "image/gif"]
        detail = "Invalid image format"
        super().__init__(detail=detail, status_code=HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.content_type = content_type
        self.allowed_types = allowed


class InvalidImageError(UploadError):
    """Exception raised when uploaded file is not a valid image."""

    def __init__(
        self,
        detail: str = "This file doesn't appear to be a valid image. Please try a different file.",
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class StorageError(UploadError):
    """Exception raised when the image store rejects or fails an operation."""

    def __init__(self, detail: str = "We couldn't save your file. Please try again later.") -> None:
        super().__init__(detail=detail, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


upload_exception_handler = create_exception_handler(logger)
