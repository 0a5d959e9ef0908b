"""
Post-related error classes.

Input problems (malformed ids, missing fields, duplicate slugs, blank search
queries) answer with 401, unknown posts with 404, and a thumbnail the image
store refused to delete with 404 on delete and 401 on update.
"""

from logging import getLogger

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_404_NOT_FOUND

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class PostError(BaseAppError):
    """Base exception for post operations."""


class ValidationError(PostError):
    """Bad or missing input."""

    def __init__(self, detail: str = "Invalid request!") -> None:
        super().__init__(detail=detail, status_code=HTTP_401_UNAUTHORIZED)


class InvalidRequestError(ValidationError):
    """Malformed post id or blank slug."""

    def __init__(self, detail: str = "Invalid request!") -> None:
        super().__init__(detail)


class InvalidPostError(ValidationError):
    """Post form fields failed validation."""

    def __init__(
        self,
        detail: str = "Invalid post data",
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(detail)
        self.errors = errors or []


class DuplicateSlugError(ValidationError):
    """Another post already uses the slug."""

    def __init__(self, slug: str | None = None) -> None:
        super().__init__("Please use unique slug")
        self.slug = slug


class SearchQueryMissingError(ValidationError):
    def __init__(self) -> None:
        super().__init__("search query is missing!")


class ImageMissingError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Image file is missing!")


class PostNotFoundError(PostError):
    """No post matches the given id or slug."""

    def __init__(self, detail: str = "Post not found!") -> None:
        super().__init__(detail=detail, status_code=HTTP_404_NOT_FOUND)


class ThumbnailRemovalError(PostError):
    """The image store did not confirm deletion of a post thumbnail."""

    def __init__(self, status_code: int = HTTP_404_NOT_FOUND) -> None:
        super().__init__(detail="Could not remove thumbnail", status_code=status_code)


post_exception_handler = create_exception_handler(logger)
