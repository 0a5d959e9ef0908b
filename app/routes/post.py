# app/routes/post.py

"""
Post Routes.

CRUD, listing, search, related-post and image upload endpoints for the blog
admin and public frontends.

Summary
-------
Endpoints include:
  - Create post (multipart form, optional thumbnail)
  - Update post (multipart form, optional replacement thumbnail)
  - Delete post
  - Get post by slug
  - List featured posts
  - List posts (paginated)
  - Search posts by title
  - List related posts
  - Upload an image for post content

Dependencies
------------
  - `PostServiceDep`: Post service bound to the request's database session.
  - `PostFormDep` / `ThumbnailDep`: Parsed multipart form fields and file.

Rate Limiting
-------------
All endpoints define explicit limits and include `429` response examples. Tiered
limits apply when `X-API-Key` is present.
"""

from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, File, Query, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.configs import file_logger
from app.decorators import timed
from app.dependencies import PostFormDep, PostPageQueryDep, PostServiceDep, ThumbnailDep
from app.managers import limiter
from app.schemas import (
    ImageUploadResponse,
    MessageResponse,
    PaginatedPosts,
    PostDetailEnvelope,
    PostFullDetailEnvelope,
    PostItemList,
    PostSummaryEnvelope,
    PostSummaryList,
)

router = APIRouter(prefix="/api/post", tags=["📝 Posts"])

logger = file_logger(getLogger(__name__))

_SUMMARY_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "title": "Getting Started with FastAPI",
    "meta": "A short tour of path operations and dependencies",
    "slug": "getting-started-with-fastapi",
    "thumbnail": "https://res.cloudinary.com/demo/image/upload/blog/thumbnails/abc.jpg",
    "author": "Admin",
}

_RATE_LIMITED = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}
_INVALID_REQUEST = {
    "description": "Invalid request",
    "content": {"application/json": {"example": {"detail": "Invalid request!"}}},
}
_NOT_FOUND = {
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Post not found!"}}},
}


@router.post(
    "/create",
    response_class=ORJSONResponse,
    response_model=PostSummaryEnvelope,
    summary="Create a new post",
    description="Create a post from multipart form fields with an optional thumbnail.",
    responses={
        200: {"content": {"application/json": {"example": {"post": _SUMMARY_EXAMPLE}}}},
        401: {
            "description": "Invalid post data or duplicate slug",
            "content": {"application/json": {"example": {"detail": "Please use unique slug"}}},
        },
        415: {
            "description": "Unsupported thumbnail type",
            "content": {"application/json": {"example": {"detail": "Invalid image format"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_create",
)
@timed("/post/create")
@limiter.limit(lambda key: "30/minute" if "apikey" in key else "10/minute")
async def create_post(
    request: Request,
    response: Response,
    post: PostFormDep,
    thumbnail: ThumbnailDep,
    service: PostServiceDep,
) -> PostSummaryEnvelope:
    """
    Create a new post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    post : PostCreate
        Parsed form fields.
    thumbnail : UploadFile | None
        Optional thumbnail image.
    service : PostService
        Post service dependency.

    Returns
    -------
    PostSummaryEnvelope
        Created post summary.

    Raises
    ------
    DuplicateSlugError
        If the slug is already used by another post.
    InvalidPostError
        If required fields are missing or invalid.
    """
    created = await service.create(post, thumbnail)
    return PostSummaryEnvelope(post=created)


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a post",
    description="Delete a post, its thumbnail and its featured entry.",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"message": "Post removed successfully"}},
            },
        },
        401: _INVALID_REQUEST,
        404: {
            "description": "Post not found or thumbnail could not be removed",
            "content": {"application/json": {"example": {"detail": "Post not found!"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_delete",
)
@timed("/post/delete")
@limiter.limit(lambda key: "30/minute" if "apikey" in key else "10/minute")
async def delete_post(
    request: Request,
    response: Response,
    post_id: str,
    service: PostServiceDep,
) -> MessageResponse:
    """
    Delete a post.

    The post is kept if the image store does not confirm the thumbnail
    deletion.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    post_id : str
        Post identifier (UUID).
    service : PostService
        Post service dependency.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    return await service.delete(post_id)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostDetailEnvelope,
    summary="Update a post",
    description="Overwrite every field of a post; replace the thumbnail when a file is sent.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "post": {
                            **_SUMMARY_EXAMPLE,
                            "content": "FastAPI is a modern web framework...",
                            "featured": True,
                            "tags": ["python", "fastapi"],
                        },
                    },
                },
            },
        },
        401: _INVALID_REQUEST,
        404: _NOT_FOUND,
        429: _RATE_LIMITED,
    },
    operation_id="posts_update",
)
@timed("/post/update")
@limiter.limit(lambda key: "30/minute" if "apikey" in key else "10/minute")
async def update_post(
    request: Request,
    response: Response,
    post_id: str,
    post: PostFormDep,
    thumbnail: ThumbnailDep,
    service: PostServiceDep,
) -> PostDetailEnvelope:
    """
    Update a post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    post_id : str
        Post identifier (UUID).
    post : PostCreate
        Replacement field values.
    thumbnail : UploadFile | None
        Optional replacement thumbnail.
    service : PostService
        Post service dependency.

    Returns
    -------
    PostDetailEnvelope
        Updated post.

    Raises
    ------
    ThumbnailRemovalError
        If the previous thumbnail could not be deleted (401).
    """
    updated = await service.update(post_id, post, thumbnail)
    return PostDetailEnvelope(post=updated)


@router.get(
    "/single/{slug}",
    response_class=ORJSONResponse,
    response_model=PostFullDetailEnvelope,
    summary="Get post by slug",
    description="Retrieve a post by its slug, including its featured flag.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "post": {
                            **_SUMMARY_EXAMPLE,
                            "content": "FastAPI is a modern web framework...",
                            "featured": False,
                            "tags": ["python", "fastapi"],
                            "createdAt": "2025-01-01T09:30:00+00:00",
                        },
                    },
                },
            },
        },
        401: _INVALID_REQUEST,
        404: _NOT_FOUND,
        429: _RATE_LIMITED,
    },
    operation_id="posts_get_by_slug",
)
@timed("/post/single")
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def get_post_by_slug(
    request: Request,
    response: Response,
    slug: str,
    service: PostServiceDep,
) -> PostFullDetailEnvelope:
    """Get a single post by slug."""
    post = await service.get_by_slug(slug)
    return PostFullDetailEnvelope(post=post)


@router.get(
    "/featured-posts",
    response_class=ORJSONResponse,
    response_model=PostSummaryList,
    summary="List featured posts",
    description="Up to four featured posts, most recently featured first.",
    responses={
        200: {"content": {"application/json": {"example": {"posts": [_SUMMARY_EXAMPLE]}}}},
        429: _RATE_LIMITED,
    },
    operation_id="posts_featured",
)
@timed("/post/featured-posts")
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def get_featured_posts(
    request: Request,
    response: Response,
    service: PostServiceDep,
) -> PostSummaryList:
    """List featured posts."""
    return PostSummaryList(posts=await service.list_featured())


@router.get(
    "/posts",
    response_class=ORJSONResponse,
    response_model=PaginatedPosts,
    summary="List posts",
    description="Posts newest first, paginated by zero-based `pageNo` and `limit`.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "posts": [
                            {
                                **_SUMMARY_EXAMPLE,
                                "createdAt": "2025-01-01T09:30:00+00:00",
                                "tags": ["python", "fastapi"],
                            },
                        ],
                        "postCount": 1,
                    },
                },
            },
        },
        422: {
            "description": "Invalid paging parameters",
            "content": {"application/json": {"example": {"detail": "Validation failed"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_list",
)
@timed("/post/posts")
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def get_posts(
    request: Request,
    response: Response,
    page: PostPageQueryDep,
    service: PostServiceDep,
) -> PaginatedPosts:
    """
    List posts with pagination.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    page : PostPageQuery
        Page number and page size.
    service : PostService
        Post service dependency.

    Returns
    -------
    PaginatedPosts
        Page of posts and the total post count.
    """
    return await service.list_posts(page.page_no, page.limit)


@router.get(
    "/search",
    response_class=ORJSONResponse,
    response_model=PostItemList,
    summary="Search posts by title",
    description="Case-insensitive substring match on post titles.",
    responses={
        401: {
            "description": "Missing query",
            "content": {"application/json": {"example": {"detail": "search query is missing!"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_search",
)
@timed("/post/search")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "30/minute")
async def search_posts(
    request: Request,
    response: Response,
    service: PostServiceDep,
    title: Annotated[str | None, Query(description="Text to look for in titles")] = None,
) -> PostItemList:
    """Search posts by title."""
    return PostItemList(posts=await service.search(title))


@router.get(
    "/related-posts/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostSummaryList,
    summary="List related posts",
    description="Up to five other posts sharing at least one tag, newest first.",
    responses={
        200: {"content": {"application/json": {"example": {"posts": [_SUMMARY_EXAMPLE]}}}},
        401: _INVALID_REQUEST,
        404: _NOT_FOUND,
        429: _RATE_LIMITED,
    },
    operation_id="posts_related",
)
@timed("/post/related-posts")
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "60/minute")
async def get_related_posts(
    request: Request,
    response: Response,
    post_id: str,
    service: PostServiceDep,
) -> PostSummaryList:
    """List posts related to the given post by tag."""
    return PostSummaryList(posts=await service.related(post_id))


@router.post(
    "/upload-image",
    response_class=ORJSONResponse,
    response_model=ImageUploadResponse,
    status_code=HTTP_201_CREATED,
    summary="Upload an image",
    description="Upload an image for use inside post content and get its URL back.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "image": "https://res.cloudinary.com/demo/image/upload/blog/thumbnails/abc.jpg",
                    },
                },
            },
        },
        401: {
            "description": "Missing file",
            "content": {"application/json": {"example": {"detail": "Image file is missing!"}}},
        },
        413: {
            "description": "File too large",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Your image is too large. Please use an image smaller than 5MB.",
                    },
                },
            },
        },
        415: {
            "description": "Unsupported type",
            "content": {"application/json": {"example": {"detail": "Invalid image format"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_upload_image",
)
@timed("/post/upload-image")
@limiter.limit(lambda key: "30/minute" if "apikey" in key else "10/minute")
async def upload_image(
    request: Request,
    response: Response,
    service: PostServiceDep,
    image: Annotated[UploadFile | None, File(description="Image file")] = None,
) -> ImageUploadResponse:
    """
    Upload an image for post content.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    service : PostService
        Post service dependency.
    image : UploadFile | None
        Image file.

    Returns
    -------
    ImageUploadResponse
        URL of the stored image.

    Raises
    ------
    ImageMissingError
        If no file was sent.
    """
    return await service.upload_image(image)
