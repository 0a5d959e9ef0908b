from app.errors.base import BaseAppError, create_exception_handler
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    database_exception_handler,
)
from app.errors.post import (
    DuplicateSlugError,
    ImageMissingError,
    InvalidPostError,
    InvalidRequestError,
    PostError,
    PostNotFoundError,
    SearchQueryMissingError,
    ThumbnailRemovalError,
    ValidationError,
    post_exception_handler,
)
from app.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from app.errors.validation import validation_exception_handler

__all__ = [
    "BaseAppError",
    "create_exception_handler",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "database_exception_handler",
    "DuplicateSlugError",
    "ImageMissingError",
    "InvalidPostError",
    "InvalidRequestError",
    "PostError",
    "PostNotFoundError",
    "SearchQueryMissingError",
    "ThumbnailRemovalError",
    "ValidationError",
    "post_exception_handler",
    "ImageTooLargeError",
    "InvalidImageError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "upload_exception_handler",
    "validation_exception_handler",
]
