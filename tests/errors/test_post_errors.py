# tests/errors/test_post_errors.py
"""Tests for app/errors/post.py and app/errors/upload.py."""

from unittest.mock import MagicMock

import pytest
from orjson import loads

from app.errors import (
    DuplicateSlugError,
    ImageMissingError,
    ImageTooLargeError,
    InvalidImageError,
    InvalidPostError,
    InvalidRequestError,
    PostError,
    PostNotFoundError,
    SearchQueryMissingError,
    StorageError,
    ThumbnailRemovalError,
    UnsupportedImageTypeError,
    ValidationError,
    post_exception_handler,
    upload_exception_handler,
)


@pytest.mark.parametrize(
    ("error", "status_code", "detail"),
    [
        (InvalidRequestError(), 401, "Invalid request!"),
        (InvalidPostError(), 401, "Invalid post data"),
        (DuplicateSlugError("x"), 401, "Please use unique slug"),
        (SearchQueryMissingError(), 401, "search query is missing!"),
        (ImageMissingError(), 401, "Image file is missing!"),
        (PostNotFoundError(), 404, "Post not found!"),
        (ThumbnailRemovalError(), 404, "Could not remove thumbnail"),
        (ThumbnailRemovalError(status_code=401), 401, "Could not remove thumbnail"),
    ],
)
def test_post_error_status_and_detail(error: PostError, status_code: int, detail: str) -> None:
    assert isinstance(error, PostError)
    assert error.status_code == status_code
    assert error.detail == detail


def test_validation_family() -> None:
    for error_type in (InvalidRequestError, SearchQueryMissingError, ImageMissingError):
        assert issubclass(error_type, ValidationError)
    assert not issubclass(PostNotFoundError, ValidationError)


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (UnsupportedImageTypeError("application/pdf"), 415),
        (ImageTooLargeError(max_size_mb=5, actual_size_mb=7.5), 413),
        (InvalidImageError(), 400),
        (StorageError(), 500),
    ],
)
def test_upload_error_status(error: Exception, status_code: int) -> None:
    assert error.status_code == status_code


def test_image_too_large_detail_mentions_sizes() -> None:
    error = ImageTooLargeError(max_size_mb=5, actual_size_mb=7.5)
    assert "5MB" in error.detail
    assert "7.5MB" in error.detail


@pytest.mark.asyncio
async def test_post_handler_includes_field_errors() -> None:
    request = MagicMock()
    request.client.host = "127.0.0.1"
    request.url.path = "/api/post/create"
    errors = [{"field": "slug", "message": "Field required", "type": "missing"}]

    response = await post_exception_handler(request, InvalidPostError(errors=errors))

    assert response.status_code == 401
    assert loads(response.body) == {"detail": "Invalid post data", "errors": errors}


@pytest.mark.asyncio
async def test_upload_handler_includes_allowed_types() -> None:
    request = MagicMock()
    request.client = None
    request.url.path = "/api/post/upload-image"

    response = await upload_exception_handler(
        request,
        UnsupportedImageTypeError("application/pdf", ["image/png"]),
    )

    body = loads(response.body)
    assert response.status_code == 415
    assert body["detail"] == "Invalid image format"
    assert body["content_type"] == "application/pdf"
    assert body["allowed_types"] == ["image/png"]
